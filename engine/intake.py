"""
Four-step intake dialog that collects a UserProfile.
Linear state machine: income -> spending habits -> preferred benefit -> credit score.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from engine.models import UserProfile, parse_benefit_preference


WELCOME_MESSAGE = (
    "Hi! I'm your personal credit card advisor. I'll help you find the perfect credit card "
    "based on your needs and spending habits. Let's get started!\n\n"
    "What's your approximate monthly income?"
)
ASK_SPENDING = "Great! What are your main spending categories? (e.g., travel, dining, shopping)"
ASK_BENEFIT = "What is your most preferred benefit? (e.g., cashback, travel points)"
ASK_CREDIT_SCORE = "What is your approximate credit score?"
INVALID_INCOME = "Please enter a valid number for your monthly income."
INVALID_CREDIT_SCORE = "Please enter a valid number for your credit score."
COMPLETED = "Thanks! I'm now generating your personalized credit card recommendations..."

_NON_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_INT = re.compile(r"^\s*[+-]?\d+")


class IntakeStep(str, Enum):
    INCOME = "income"
    SPENDING = "spending"
    BENEFIT = "benefit"
    CREDIT_SCORE = "credit_score"
    DONE = "done"


def parse_income(message: str) -> Optional[float]:
    """
    Keep digits and dots, then parse as a float.

    Example:
        >>> parse_income("Rs. 75,000 a month")
        75000.0
    """
    cleaned = _NON_NUMERIC.sub("", message or "")
    # "Rs." leaves a leading dot behind
    cleaned = cleaned.strip(".")
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if value > 0 else None


def parse_spending_habits(message: str) -> tuple[str, ...]:
    return tuple(part.strip().lower() for part in (message or "").split(",") if part.strip())


def parse_credit_score(message: str) -> Optional[int]:
    match = _LEADING_INT.match(message or "")
    if not match:
        return None
    value = int(match.group(0))
    return value if value > 0 else None


@dataclass
class IntakeSession:
    """
    One conversation's progress through the intake dialog.

    Call answer() with each user message; the returned string is the next
    prompt. Once step is DONE, profile() returns the completed UserProfile.
    """
    step: IntakeStep = IntakeStep.INCOME
    monthly_income: Optional[float] = None
    spending_habits: tuple[str, ...] = field(default_factory=tuple)
    preferred_benefit: Optional[str] = None
    credit_score: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return self.step == IntakeStep.DONE

    def answer(self, message: str) -> str:
        if self.step == IntakeStep.INCOME:
            income = parse_income(message)
            if income is None:
                return INVALID_INCOME
            self.monthly_income = income
            self.step = IntakeStep.SPENDING
            return ASK_SPENDING

        if self.step == IntakeStep.SPENDING:
            self.spending_habits = parse_spending_habits(message)
            self.step = IntakeStep.BENEFIT
            return ASK_BENEFIT

        if self.step == IntakeStep.BENEFIT:
            self.preferred_benefit = (message or "").strip().lower()
            self.step = IntakeStep.CREDIT_SCORE
            return ASK_CREDIT_SCORE

        if self.step == IntakeStep.CREDIT_SCORE:
            score = parse_credit_score(message)
            if score is None:
                return INVALID_CREDIT_SCORE
            self.credit_score = score
            self.step = IntakeStep.DONE
            return COMPLETED

        return COMPLETED

    def profile(self) -> UserProfile:
        if not self.is_complete:
            raise ValueError(f"Intake is not complete (current step: {self.step.value})")
        return UserProfile(
            monthly_income=self.monthly_income,
            credit_score=self.credit_score,
            spending_habits=self.spending_habits,
            preferred_benefits=parse_benefit_preference(self.preferred_benefit),
        )
