"""
Side-by-side comparison metrics for a short list of cards.
Deterministic and unit-testable; no store access here.
"""

import math
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from engine.models import CardRecord, ComparisonRow, RewardType
from engine.scoring import yearly_rewards_for_spend


BASELINE_MONTHLY_SPEND = 30000
NOT_APPLICABLE = "N/A"

# Composite score caps (sum to 100)
REWARD_VALUE_MAX = 40
ANNUAL_FEE_MAX = 30
PERKS_MAX = 30
REWARD_VALUE_SCALE = 10000
ANNUAL_FEE_SCALE = 15000
POINTS_PER_PERK = 10
SUBSCORE_POINTS_PER_PERK = 25

# Deterministic placeholder data for unresolved ids
PLACEHOLDER_ISSUERS = ["HDFC Bank", "ICICI Bank", "SBI Card", "Axis Bank"]
PLACEHOLDER_PERKS = [
    "Airport lounge access",
    "Fuel surcharge waiver",
    "Movie ticket discounts",
    "Dining privileges",
]
PLACEHOLDER_CATEGORIES = ["travel", "dining", "shopping", "entertainment", "groceries"]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def estimate_yearly_benefit(card: CardRecord) -> int:
    """Yearly reward at the baseline spend of 30,000 a month."""
    return yearly_rewards_for_spend(card.reward_type, BASELINE_MONTHLY_SPEND)


def cost_benefit_ratio(estimated_yearly_benefit: float, annual_fee: float) -> str:
    """
    Benefit per unit of annual fee, as a 2-decimal string.

    Fee-free cards have no meaningful ratio and get "N/A".
    """
    if annual_fee > 0:
        return f"{estimated_yearly_benefit / annual_fee:.2f}"
    return NOT_APPLICABLE


def ratio_value(ratio: str) -> float:
    """Numeric value of a ratio string; "N/A" counts as zero."""
    if ratio == NOT_APPLICABLE:
        return 0.0
    try:
        return float(ratio)
    except (TypeError, ValueError):
        return 0.0


def reward_value_points(estimated_yearly_benefit: float) -> float:
    return min(REWARD_VALUE_MAX, (estimated_yearly_benefit / REWARD_VALUE_SCALE) * REWARD_VALUE_MAX)


def annual_fee_points(annual_fee: float) -> float:
    if annual_fee == 0:
        return ANNUAL_FEE_MAX
    return max(0, (1 - annual_fee / ANNUAL_FEE_SCALE) * ANNUAL_FEE_MAX)


def perks_points(perk_count: int) -> float:
    return min(PERKS_MAX, perk_count * POINTS_PER_PERK)


def overall_score(estimated_yearly_benefit: float, annual_fee: float, perk_count: int) -> int:
    """
    Composite 0-100 score.

    Rules:
    - Reward value: up to 40 points, linear up to 10,000 a year
    - Annual fee: 30 points when free, falling linearly to 0 at 15,000
    - Perks: 10 points per perk, up to 30
    """
    total = (
        reward_value_points(estimated_yearly_benefit)
        + annual_fee_points(annual_fee)
        + perks_points(perk_count)
    )
    return _round_half_up(_clamp(total))


def category_scores(row: ComparisonRow) -> Dict[str, int]:
    """Per-category 0-100 sub-scores for the visual breakdown."""
    benefit = row.estimated_yearly_benefit
    fee = row.card.annual_fee
    return {
        "reward_value": int(_clamp(_round_half_up(benefit / REWARD_VALUE_SCALE * 100))),
        "annual_cost": int(_clamp(_round_half_up((1 - fee / ANNUAL_FEE_SCALE) * 100))),
        "perks_value": int(_clamp(len(row.card.special_perks) * SUBSCORE_POINTS_PER_PERK)),
        "overall_score": int(_clamp(row.overall_score)),
    }


def build_row(card: CardRecord, known_benefit: Optional[int] = None) -> ComparisonRow:
    benefit = known_benefit if known_benefit is not None else estimate_yearly_benefit(card)
    row = ComparisonRow(
        card=card,
        estimated_yearly_benefit=benefit,
        cost_benefit_ratio=cost_benefit_ratio(benefit, card.annual_fee),
        overall_score=overall_score(benefit, card.annual_fee, len(card.special_perks)),
    )
    return replace(row, category_scores=category_scores(row))


def top_pick_index(rows: List[ComparisonRow]) -> Optional[int]:
    """Index of the strictly greatest overall_score; the first one wins ties."""
    best = None
    for index, row in enumerate(rows):
        if best is None or row.overall_score > rows[best].overall_score:
            best = index
    return best


def compare(
    cards: Iterable[CardRecord],
    known_benefits: Optional[Mapping[int, int]] = None,
) -> List[ComparisonRow]:
    """
    Build comparison rows and flag the top pick.

    Args:
        cards: CardRecords in display order
        known_benefits: optional card_id -> yearly benefit already computed
            elsewhere; missing ids use the baseline estimate

    Returns:
        ComparisonRow list in the same order, exactly one flagged as top pick
        (unless the input is empty)
    """
    known_benefits = known_benefits or {}
    rows = [build_row(card, known_benefits.get(card.card_id)) for card in cards]

    best = top_pick_index(rows)
    if best is not None:
        rows[best] = replace(rows[best], is_top_pick=True)
    return rows


def feature_leaders(rows: List[ComparisonRow]) -> Dict[str, List[int]]:
    """
    Card ids holding the best value per compared feature.

    - annual_fee: lowest
    - estimated_yearly_benefit: highest
    - cost_benefit_ratio: highest numeric ratio; "N/A" rows are never leaders
    """
    if not rows:
        return {"annual_fee": [], "estimated_yearly_benefit": [], "cost_benefit_ratio": []}

    lowest_fee = min(row.card.annual_fee for row in rows)
    highest_benefit = max(row.estimated_yearly_benefit for row in rows)
    highest_ratio = max(ratio_value(row.cost_benefit_ratio) for row in rows)

    return {
        "annual_fee": [row.card.card_id for row in rows if row.card.annual_fee == lowest_fee],
        "estimated_yearly_benefit": [
            row.card.card_id for row in rows if row.estimated_yearly_benefit == highest_benefit
        ],
        "cost_benefit_ratio": [
            row.card.card_id
            for row in rows
            if row.cost_benefit_ratio != NOT_APPLICABLE
            and ratio_value(row.cost_benefit_ratio) == highest_ratio
        ],
    }


def placeholder_cards(card_ids: Iterable) -> List[CardRecord]:
    """
    Synthetic stand-ins for ids that resolved to nothing.

    Variation is index based, so the same request always yields the same rows:
    annual fee 500 + i*250, alternating Cashback/Points, growing thresholds.
    """
    cards = []
    for index, raw_id in enumerate(card_ids):
        card_id = int(raw_id)
        base_rate = (Decimal("1.5") + Decimal("0.25") * index).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        reward_type = RewardType.CASHBACK if index % 2 == 0 else RewardType.POINTS
        cards.append(
            CardRecord(
                card_id=card_id,
                name=f"Credit Card {card_id}",
                issuer=PLACEHOLDER_ISSUERS[index % len(PLACEHOLDER_ISSUERS)],
                joining_fee=1000,
                annual_fee=500 + index * 250,
                reward_type=reward_type,
                reward_rate=f"{base_rate}%" if reward_type == RewardType.CASHBACK else f"{base_rate}X",
                min_income=500000 + index * 100000,
                min_credit_score=700 + index * 20,
                special_perks=tuple(PLACEHOLDER_PERKS[: 2 + index % 3]),
                categories=tuple(PLACEHOLDER_CATEGORIES[: 2 + index % 4]),
            )
        )
    return cards
