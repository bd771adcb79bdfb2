"""
Eligibility rules: which catalog cards a profile qualifies for.
Pure functions over CardRecord lists; the store-backed lookup lives in
app.services.eligibility_service.
"""

from typing import Iterable, List, Optional, Tuple

from engine.models import BenefitPreference, CardRecord, RewardType, UserProfile


# Relaxation policy when the strict rule finds nothing
RELAXED_INCOME_FACTOR = 1.2
RELAXED_CREDIT_SCORE_MARGIN = 50
FALLBACK_PREFIX_SIZE = 3

STAGE_STRICT = "strict"
STAGE_RELAXED = "relaxed"
STAGE_PREFIX = "prefix"


def is_eligible(card: CardRecord, profile: UserProfile) -> bool:
    """A card qualifies when both income and credit score meet its minimums."""
    return (
        card.min_income <= profile.monthly_income
        and card.min_credit_score <= profile.credit_score
    )


def is_relaxed_eligible(card: CardRecord, profile: UserProfile) -> bool:
    """Relaxed rule: either threshold within its tolerance is enough."""
    return (
        card.min_income <= profile.monthly_income * RELAXED_INCOME_FACTOR
        or card.min_credit_score <= profile.credit_score + RELAXED_CREDIT_SCORE_MARGIN
    )


def select_eligible(
    profile: UserProfile,
    catalog: Iterable[CardRecord],
) -> Tuple[List[CardRecord], str]:
    """
    Apply the strict rule, then the relaxed rule, then a fixed prefix.

    Returns:
        (cards, stage) where stage is "strict", "relaxed" or "prefix".
    """
    cards = list(catalog)

    strict = [card for card in cards if is_eligible(card, profile)]
    if strict:
        return strict, STAGE_STRICT

    return relax(profile, cards)


def relax(profile: UserProfile, catalog: Iterable[CardRecord]) -> Tuple[List[CardRecord], str]:
    """Fallback stages used when strict matching (or the store query) found nothing."""
    cards = list(catalog)

    relaxed = [card for card in cards if is_relaxed_eligible(card, profile)]
    if relaxed:
        return relaxed, STAGE_RELAXED

    return cards[:FALLBACK_PREFIX_SIZE], STAGE_PREFIX


def filter_eligible(profile: UserProfile, catalog: Iterable[CardRecord]) -> List[CardRecord]:
    cards, _ = select_eligible(profile, catalog)
    return cards


def category_pattern(spending_habits: Iterable[str]) -> str:
    """
    Build the LIKE pattern used against the stored categories column.

    Example:
        >>> category_pattern(["travel", "dining"])
        '%travel%dining%'
        >>> category_pattern([])
        '%'
    """
    habits = [habit for habit in spending_habits if habit]
    if not habits:
        return "%"
    return f"%{'%'.join(habits)}%"


def benefit_label(preference: Optional[BenefitPreference]) -> str:
    """Reward type label a benefit preference targets ("" when none)."""
    if preference == BenefitPreference.CASHBACK:
        return RewardType.CASHBACK.value
    if preference == BenefitPreference.TRAVEL_POINTS:
        return RewardType.POINTS.value
    return ""
