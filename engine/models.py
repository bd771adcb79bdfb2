"""
Data models for the Credit Card Advisor engine.
All models are dataclasses for simplicity and type safety.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)


MAX_CREDIT_SCORE = 900


class RewardType(str, Enum):
    CASHBACK = "Cashback"
    POINTS = "Points"


class BenefitPreference(str, Enum):
    CASHBACK = "cashback"
    TRAVEL_POINTS = "travel_points"
    REWARDS = "rewards"
    LOUNGE_ACCESS = "lounge_access"
    INSURANCE = "insurance"
    ZERO_FEES = "zero_fees"


def parse_benefit_preference(value: Any) -> Optional[BenefitPreference]:
    """
    Map a free-text benefit answer onto a BenefitPreference.

    Accepts enum members, the tag itself ("travel_points") or the chat
    spelling ("Travel Points"). Unknown values map to None.
    """
    if value is None or isinstance(value, BenefitPreference):
        return value
    tag = str(value).strip().lower().replace("-", "_").replace(" ", "_")
    if not tag:
        return None
    try:
        return BenefitPreference(tag)
    except ValueError:
        logger.info(f"Unrecognised benefit preference '{value}'; treating as no preference")
        return None


def normalize_collection(value: Any, field_name: str = "collection") -> list[str]:
    """
    Decode a perks/categories value into a list of strings.

    Store rows keep these fields as JSON text; in-memory records already
    carry lists. Anything that does not decode to a JSON array becomes [].
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(item) for item in value]
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            decoded = json.loads(value)
        except ValueError:
            logger.warning(f"Malformed JSON in {field_name}: {value!r}; using empty list")
            return []
        if isinstance(decoded, list):
            return [str(item) for item in decoded]
        logger.warning(f"Expected a JSON array in {field_name}, got {type(decoded).__name__}; using empty list")
        return []
    logger.warning(f"Unsupported {field_name} value of type {type(value).__name__}; using empty list")
    return []


@dataclass(frozen=True)
class CardRecord:
    """
    One credit-card product from the catalog.

    Fields:
    - card_id: unique catalog identifier
    - joining_fee / annual_fee: non-negative currency amounts
    - reward_type: Cashback | Points
    - reward_rate: free-text descriptor (e.g. "5% on online spending")
    - min_income / min_credit_score: eligibility thresholds
    - special_perks: ordered perk descriptions
    - categories: spending category tags (e.g. "travel", "dining")
    """
    card_id: int
    name: str
    issuer: str
    joining_fee: float
    annual_fee: float
    reward_type: RewardType
    reward_rate: str
    min_income: float
    min_credit_score: int
    special_perks: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    apply_link: Optional[str] = None
    card_image: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: dict) -> "CardRecord":
        """Build a record from a row-like mapping, decoding list fields once."""
        card_id = data.get("card_id", data.get("id"))
        return cls(
            card_id=int(card_id),
            name=str(data["name"]),
            issuer=str(data.get("issuer") or ""),
            joining_fee=float(data.get("joining_fee") or 0),
            annual_fee=float(data.get("annual_fee") or 0),
            reward_type=RewardType(data["reward_type"]),
            reward_rate=str(data.get("reward_rate") or ""),
            min_income=float(data.get("min_income") or 0),
            min_credit_score=int(data.get("min_credit_score") or 0),
            special_perks=tuple(normalize_collection(data.get("special_perks"), "special_perks")),
            categories=tuple(normalize_collection(data.get("categories"), "categories")),
            apply_link=data.get("apply_link"),
            card_image=data.get("card_image"),
        )

    def to_dict(self) -> dict:
        return {
            "card_id": self.card_id,
            "name": self.name,
            "issuer": self.issuer,
            "joining_fee": self.joining_fee,
            "annual_fee": self.annual_fee,
            "reward_type": self.reward_type.value,
            "reward_rate": self.reward_rate,
            "min_income": self.min_income,
            "min_credit_score": self.min_credit_score,
            "special_perks": list(self.special_perks),
            "categories": list(self.categories),
            "apply_link": self.apply_link,
            "card_image": self.card_image,
        }


@dataclass(frozen=True)
class UserProfile:
    """
    Completed intake answers for one conversation.

    Fields:
    - monthly_income: positive income figure
    - credit_score: positive integer score
    - spending_habits: category tags, possibly empty
    - preferred_benefits: optional BenefitPreference
    """
    monthly_income: float
    credit_score: int
    spending_habits: tuple[str, ...] = ()
    preferred_benefits: Optional[BenefitPreference] = None


@dataclass(frozen=True)
class ScoredCard:
    """
    A catalog card with its heuristic suitability for one profile.

    Fields:
    - card: the underlying CardRecord
    - score: additive heuristic score
    - yearly_rewards: projected annual reward value
    - reasons: ordered justification strings (at most four)
    - ai_score: relevance assigned by an external re-rank, if any
    """
    card: CardRecord
    score: int
    yearly_rewards: int
    reasons: tuple[str, ...] = ()
    ai_score: Optional[int] = None

    @property
    def name(self) -> str:
        return self.card.name

    def to_dict(self) -> dict:
        data = self.card.to_dict()
        data.update(
            score=self.score,
            yearly_rewards=self.yearly_rewards,
            reasons=list(self.reasons),
        )
        if self.ai_score is not None:
            data["ai_score"] = self.ai_score
        return data


@dataclass(frozen=True)
class ComparisonRow:
    """
    A card with the derived metrics shown in the comparison view.

    Fields:
    - estimated_yearly_benefit: yearly reward estimate at baseline spend
    - cost_benefit_ratio: "N/A" for fee-free cards, else a 2-decimal string
    - overall_score: composite score in [0, 100]
    - category_scores: reward_value / annual_cost / perks_value / overall_score
    - is_top_pick: True for the single best row
    """
    card: CardRecord
    estimated_yearly_benefit: int
    cost_benefit_ratio: str
    overall_score: int
    category_scores: dict = field(default_factory=dict)
    is_top_pick: bool = False

    def to_dict(self) -> dict:
        data = self.card.to_dict()
        data.update(
            estimated_yearly_benefit=self.estimated_yearly_benefit,
            cost_benefit_ratio=self.cost_benefit_ratio,
            overall_score=self.overall_score,
            category_scores=dict(self.category_scores),
            is_top_pick=self.is_top_pick,
        )
        return data
