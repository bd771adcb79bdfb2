"""
Request/response DTOs for the advisor API.

Request bodies use the camelCase names the chat front end sends
(monthlyIncome, cardIds, ...); snake_case is accepted as well.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.credit_card import CreditCardResponse
from engine.models import ComparisonRow, ScoredCard, UserProfile, parse_benefit_preference


# =============================================================================
# Recommendations
# =============================================================================

class RecommendationRequest(BaseModel):
    """Completed intake answers."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "monthlyIncome": 700000,
                    "creditScore": 750,
                    "spendingHabits": ["travel", "dining"],
                    "preferredBenefits": "travel_points",
                }
            ]
        },
    )

    monthly_income: float = Field(..., gt=0, alias="monthlyIncome")
    credit_score: int = Field(..., gt=0, alias="creditScore")
    spending_habits: List[str] = Field(default_factory=list, alias="spendingHabits")
    preferred_benefits: Optional[str] = Field(None, alias="preferredBenefits")

    @field_validator("spending_habits", mode="before")
    @classmethod
    def normalize_habits(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [str(item).strip().lower() for item in v if str(item).strip()]

    def to_profile(self) -> UserProfile:
        return UserProfile(
            monthly_income=self.monthly_income,
            credit_score=self.credit_score,
            spending_habits=tuple(self.spending_habits),
            preferred_benefits=parse_benefit_preference(self.preferred_benefits),
        )


class RecommendedCard(CreditCardResponse):
    score: int
    yearly_rewards: int
    reasons: List[str] = Field(default_factory=list)
    ai_score: Optional[int] = None

    @classmethod
    def from_scored(cls, scored: ScoredCard) -> "RecommendedCard":
        return cls(**scored.to_dict())


# =============================================================================
# Comparison
# =============================================================================

class CompareCardsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    card_ids: Optional[List[Any]] = Field(None, alias="cardIds")


class ComparisonCard(CreditCardResponse):
    estimated_yearly_benefit: int
    cost_benefit_ratio: str
    overall_score: int = Field(..., ge=0, le=100)
    category_scores: dict[str, int] = Field(default_factory=dict)
    is_top_pick: bool = False

    @classmethod
    def from_row(cls, row: ComparisonRow) -> "ComparisonCard":
        return cls(**row.to_dict())


# =============================================================================
# Notifications / health
# =============================================================================

class WhatsAppRecommendationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    card_ids: Optional[List[int]] = Field(None, alias="cardIds")
    cards: Optional[List[dict[str, Any]]] = None


class WhatsAppTemplateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    template_sid: Optional[str] = Field(None, alias="templateSid")
    variables: Optional[dict[str, Any]] = None


class NotificationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message_sid: Optional[str] = Field(None, alias="messageSid")
    status: Optional[str] = None


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    timestamp: str
    mock_mode: bool = Field(..., alias="mockMode")
