from .credit_card import CreditCard, CreditCardResponse

__all__ = [
    "CreditCard",
    "CreditCardResponse",
]
