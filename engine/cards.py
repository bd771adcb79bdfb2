"""
Embedded static card catalog.
Served whenever the persisted catalog is unreachable, empty, or mock mode is
forced; also the catalog the CLI works against.
"""

from typing import Iterable, List, Optional

from engine.models import CardRecord


STATIC_CARDS = [
    {
        "card_id": 1,
        "name": "HDFC Diners Club Black",
        "issuer": "HDFC Bank",
        "joining_fee": 10000,
        "annual_fee": 10000,
        "reward_type": "Points",
        "reward_rate": "5-10%",
        "min_income": 1800000,
        "min_credit_score": 750,
        "special_perks": ["Airport lounge access", "Golf privileges"],
        "categories": ["travel", "dining"],
        "apply_link": "https://www.hdfcbank.com/",
        "card_image": "hdfc_diners_black.jpg",
    },
    {
        "card_id": 2,
        "name": "SBI Card PRIME",
        "issuer": "SBI Card",
        "joining_fee": 2999,
        "annual_fee": 2999,
        "reward_type": "Points",
        "reward_rate": "2-5%",
        "min_income": 600000,
        "min_credit_score": 700,
        "special_perks": ["Fuel surcharge waiver", "Movie ticket discounts"],
        "categories": ["fuel", "entertainment"],
        "apply_link": "https://www.sbicard.com/",
        "card_image": "sbi_prime.jpg",
    },
    {
        "card_id": 3,
        "name": "ICICI Amazon Pay Credit Card",
        "issuer": "ICICI Bank",
        "joining_fee": 0,
        "annual_fee": 0,
        "reward_type": "Cashback",
        "reward_rate": "1-5%",
        "min_income": 300000,
        "min_credit_score": 650,
        "special_perks": ["Amazon Prime membership", "No-cost EMI"],
        "categories": ["shopping", "bills"],
        "apply_link": "https://www.icicibank.com/",
        "card_image": "icici_amazon.jpg",
    },
    {
        "card_id": 4,
        "name": "Axis Bank Flipkart Credit Card",
        "issuer": "Axis Bank",
        "joining_fee": 500,
        "annual_fee": 500,
        "reward_type": "Cashback",
        "reward_rate": "1.5-5%",
        "min_income": 250000,
        "min_credit_score": 650,
        "special_perks": ["Flipkart vouchers", "Welcome points"],
        "categories": ["shopping", "groceries"],
        "apply_link": "https://www.axisbank.com/",
        "card_image": "axis_flipkart.jpg",
    },
    {
        "card_id": 5,
        "name": "Standard Chartered Manhattan Card",
        "issuer": "Standard Chartered",
        "joining_fee": 999,
        "annual_fee": 999,
        "reward_type": "Cashback",
        "reward_rate": "1-3%",
        "min_income": 180000,
        "min_credit_score": 600,
        "special_perks": ["Dining discounts", "Movie offers"],
        "categories": ["dining", "entertainment"],
        "apply_link": "https://www.sc.com/in/",
        "card_image": "sc_manhattan.jpg",
    },
    {
        "card_id": 6,
        "name": "Citi PremierMiles Card",
        "issuer": "Citibank",
        "joining_fee": 3000,
        "annual_fee": 3000,
        "reward_type": "Points",
        "reward_rate": "4-10 miles per ₹100",
        "min_income": 750000,
        "min_credit_score": 720,
        "special_perks": ["Complimentary lounge access", "Travel insurance"],
        "categories": ["travel", "international"],
        "apply_link": "https://www.citibank.co.in/",
        "card_image": "citi_premiermiles.jpg",
    },
    {
        "card_id": 7,
        "name": "HSBC Visa Platinum Card",
        "issuer": "HSBC",
        "joining_fee": 1000,
        "annual_fee": 1000,
        "reward_type": "Points",
        "reward_rate": "2 points per ₹100",
        "min_income": 500000,
        "min_credit_score": 680,
        "special_perks": ["Fuel surcharge waiver", "Extended warranty"],
        "categories": ["fuel", "shopping"],
        "apply_link": "https://www.hsbc.co.in/",
        "card_image": "hsbc_platinum.jpg",
    },
    {
        "card_id": 8,
        "name": "Kotak Urbane Card",
        "issuer": "Kotak Mahindra Bank",
        "joining_fee": 700,
        "annual_fee": 700,
        "reward_type": "Cashback",
        "reward_rate": "1-2%",
        "min_income": 300000,
        "min_credit_score": 650,
        "special_perks": ["1+1 movie tickets", "Dining discounts"],
        "categories": ["entertainment", "dining"],
        "apply_link": "https://www.kotak.com/",
        "card_image": "kotak_urbane.jpg",
    },
]


class StaticCatalog:
    """In-memory catalog with the same read interface as CatalogService."""

    def __init__(self, cards: Optional[Iterable[CardRecord]] = None):
        if cards is None:
            cards = [CardRecord.from_mapping(data) for data in STATIC_CARDS]
        self._cards: List[CardRecord] = list(cards)

    def get_all(self) -> List[CardRecord]:
        return list(self._cards)

    def get_by_id(self, card_id: int) -> Optional[CardRecord]:
        for card in self._cards:
            if card.card_id == card_id:
                return card
        return None

    def get_by_ids(self, card_ids: Iterable[int]) -> List[CardRecord]:
        by_id = {card.card_id: card for card in self._cards}
        return [by_id[int(card_id)] for card_id in dict.fromkeys(card_ids) if int(card_id) in by_id]


static_catalog = StaticCatalog()
