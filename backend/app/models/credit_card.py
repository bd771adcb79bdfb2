import json

from sqlalchemy import Column, Integer, String, Numeric, Text, Enum as SAEnum, CheckConstraint
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.db.db import Base
from engine.models import MAX_CREDIT_SCORE, CardRecord, RewardType, normalize_collection


# SQLAlchemy ORM Model
class CreditCard(Base):
    __tablename__ = "credit_cards"

    card_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    issuer = Column(String(255), nullable=False)
    joining_fee = Column(Numeric(12, 2), nullable=False, default=0)
    annual_fee = Column(Numeric(12, 2), nullable=False, default=0)
    reward_type = Column(
        SAEnum(RewardType, name="reward_type", values_callable=lambda enum: [member.value for member in enum]),
        nullable=False,
    )
    reward_rate = Column(String(255), nullable=False, default="")
    min_income = Column(Numeric(14, 2), nullable=False, default=0)
    min_credit_score = Column(Integer, nullable=False, default=0)
    # JSON-encoded lists, decoded once by to_record()
    special_perks = Column(Text, nullable=False, default="[]")
    categories = Column(Text, nullable=False, default="[]")
    apply_link = Column(String(512), nullable=True)
    card_image = Column(String(255), nullable=True)

    # Table-level constraints
    __table_args__ = (
        CheckConstraint("joining_fee >= 0", name="ck_joining_fee_non_negative"),
        CheckConstraint("annual_fee >= 0", name="ck_annual_fee_non_negative"),
        CheckConstraint("min_income >= 0", name="ck_min_income_non_negative"),
        CheckConstraint(
            f"min_credit_score >= 0 AND min_credit_score <= {MAX_CREDIT_SCORE}",
            name="ck_min_credit_score_range",
        ),
    )

    def to_record(self) -> CardRecord:
        return CardRecord.from_mapping(
            {
                "card_id": self.card_id,
                "name": self.name,
                "issuer": self.issuer,
                "joining_fee": self.joining_fee,
                "annual_fee": self.annual_fee,
                "reward_type": self.reward_type,
                "reward_rate": self.reward_rate,
                "min_income": self.min_income,
                "min_credit_score": self.min_credit_score,
                "special_perks": self.special_perks,
                "categories": self.categories,
                "apply_link": self.apply_link,
                "card_image": self.card_image,
            }
        )

    @classmethod
    def from_record(cls, record: CardRecord) -> "CreditCard":
        return cls(
            card_id=record.card_id,
            name=record.name,
            issuer=record.issuer,
            joining_fee=record.joining_fee,
            annual_fee=record.annual_fee,
            reward_type=record.reward_type,
            reward_rate=record.reward_rate,
            min_income=record.min_income,
            min_credit_score=record.min_credit_score,
            special_perks=json.dumps(list(record.special_perks)),
            categories=json.dumps(list(record.categories)),
            apply_link=record.apply_link,
            card_image=record.card_image,
        )


# Pydantic Models for Request/Response
class CreditCardResponse(BaseModel):
    """Schema for API responses"""
    model_config = ConfigDict(from_attributes=True)

    card_id: int
    name: str
    issuer: str
    joining_fee: float
    annual_fee: float
    reward_type: RewardType
    reward_rate: str
    min_income: float
    min_credit_score: int
    special_perks: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    apply_link: str | None = None
    card_image: str | None = None

    @field_validator("special_perks", "categories", mode="before")
    @classmethod
    def decode_list_field(cls, v):
        return normalize_collection(v)
