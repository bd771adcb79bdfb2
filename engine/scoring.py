"""
Heuristic card scoring.
Each scorer takes a CardRecord and a UserProfile and returns a fresh
ScoredCard with score, projected yearly rewards and reasons.
"""

import math
from dataclasses import dataclass
from typing import Optional

from engine.models import BenefitPreference, CardRecord, RewardType, ScoredCard, UserProfile


# Score weights
INCOME_MATCH_POINTS = 20
INCOME_HEADROOM_POINTS = 10
INCOME_HEADROOM_FACTOR = 0.5
CATEGORY_MATCH_POINTS = 15
BENEFIT_MATCH_POINTS = 25

# Reward multipliers on yearly spend
CASHBACK_REWARD_RATE = 0.02
POINTS_REWARD_RATE = 0.015

LOW_FEE_INCOME_FACTOR = 0.01


@dataclass(frozen=True)
class SpendPreset:
    """
    Assumed card spend used for the yearly reward projection.

    Fields:
    - name: preset identifier
    - spend_ratio: share of monthly income spent on the card
    - monthly_cap: upper bound on the monthly spend (None for no cap)
    """
    name: str
    spend_ratio: float
    monthly_cap: Optional[float] = None

    def monthly_spend(self, monthly_income: float) -> float:
        spend = monthly_income * self.spend_ratio
        if self.monthly_cap is not None:
            spend = min(spend, self.monthly_cap)
        return spend


# Store-backed path: 40% of income, at most 50k a month
CONSERVATIVE = SpendPreset(name="conservative", spend_ratio=0.4, monthly_cap=50000)
# Static-catalog path: flat 30% of income
SIMPLE = SpendPreset(name="simple", spend_ratio=0.3)

SPEND_PRESETS = {preset.name: preset for preset in (CONSERVATIVE, SIMPLE)}


def reward_rate_for(reward_type: RewardType) -> float:
    return CASHBACK_REWARD_RATE if reward_type == RewardType.CASHBACK else POINTS_REWARD_RATE


def yearly_rewards_for_spend(reward_type: RewardType, monthly_spend: float) -> int:
    """Floor of the yearly spend times the reward-type multiplier."""
    yearly_spend = monthly_spend * 12
    return math.floor(yearly_spend * reward_rate_for(reward_type))


def project_yearly_rewards(card: CardRecord, profile: UserProfile, preset: SpendPreset = CONSERVATIVE) -> int:
    return yearly_rewards_for_spend(card.reward_type, preset.monthly_spend(profile.monthly_income))


def matching_categories(card: CardRecord, profile: UserProfile) -> list[str]:
    """Card categories the user also spends on, in card order."""
    habits = set(profile.spending_habits)
    return [category for category in card.categories if category in habits]


def benefit_matches(card: CardRecord, preference: Optional[BenefitPreference]) -> bool:
    if preference == BenefitPreference.CASHBACK:
        return card.reward_type == RewardType.CASHBACK
    if preference == BenefitPreference.TRAVEL_POINTS:
        return card.reward_type == RewardType.POINTS
    return False


def heuristic_score(card: CardRecord, profile: UserProfile) -> int:
    """
    Additive suitability score.

    Rules:
    - +20 when the card's minimum income is met, +10 more when the income is
      at least double the minimum
    - +15 for every card category the user spends on
    - +25 when the reward type matches the preferred benefit
    """
    score = 0

    if card.min_income <= profile.monthly_income:
        score += INCOME_MATCH_POINTS
        if card.min_income <= profile.monthly_income * INCOME_HEADROOM_FACTOR:
            score += INCOME_HEADROOM_POINTS

    score += len(matching_categories(card, profile)) * CATEGORY_MATCH_POINTS

    if benefit_matches(card, profile.preferred_benefits):
        score += BENEFIT_MATCH_POINTS

    return score


def build_reasons(card: CardRecord, profile: UserProfile) -> list[str]:
    """
    Human-readable justifications, at most one per rule, in rule order:
    preference match, category overlap, annual fee, headline perk.
    """
    reasons = []

    if benefit_matches(card, profile.preferred_benefits):
        if card.reward_type == RewardType.CASHBACK:
            reasons.append("High cashback rewards match your preference")
        else:
            reasons.append("Excellent travel rewards program")

    matched = matching_categories(card, profile)
    if matched:
        reasons.append(f"Great rewards on {' and '.join(matched)} spending")

    if card.annual_fee == 0:
        reasons.append("Zero annual fee")
    elif card.annual_fee < profile.monthly_income * LOW_FEE_INCOME_FACTOR:
        reasons.append("Low annual fee relative to your income")

    if card.special_perks:
        reasons.append(f"Premium perks: {card.special_perks[0]}")

    return reasons


def score_card(card: CardRecord, profile: UserProfile, preset: SpendPreset = CONSERVATIVE) -> ScoredCard:
    """
    Score one card for one profile.

    Args:
        card: CardRecord to evaluate (never mutated)
        profile: completed UserProfile
        preset: spend assumption for the yearly reward projection

    Returns:
        A new ScoredCard
    """
    return ScoredCard(
        card=card,
        score=heuristic_score(card, profile),
        yearly_rewards=project_yearly_rewards(card, profile, preset),
        reasons=tuple(build_reasons(card, profile)),
    )
