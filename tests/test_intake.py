"""
Unit tests for engine/intake.py
Tests the four-step intake dialog and its answer parsing.
"""

import pytest
from engine.intake import (
    ASK_BENEFIT,
    ASK_CREDIT_SCORE,
    ASK_SPENDING,
    COMPLETED,
    INVALID_CREDIT_SCORE,
    INVALID_INCOME,
    IntakeSession,
    IntakeStep,
    parse_credit_score,
    parse_income,
    parse_spending_habits,
)
from engine.models import BenefitPreference


class TestParsers:
    """Tests for the per-step answer parsers."""

    @pytest.mark.parametrize("message,expected", [
        ("75000", 75000.0),
        ("Rs. 75,000 a month", 75000.0),
        ("₹1,20,000", 120000.0),
        ("about 85000.50", 85000.5),
    ])
    def test_income_keeps_digits_and_dot(self, message, expected):
        assert parse_income(message) == expected

    @pytest.mark.parametrize("message", ["", "a lot", "0"])
    def test_invalid_income(self, message):
        assert parse_income(message) is None

    def test_spending_habits_split_and_normalised(self):
        assert parse_spending_habits(" Travel, dining ,,SHOPPING ") == ("travel", "dining", "shopping")

    def test_credit_score_leading_integer(self):
        assert parse_credit_score("750") == 750
        assert parse_credit_score("750 or so") == 750
        assert parse_credit_score("around 750") is None


class TestIntakeSession:
    """Tests for the linear state machine."""

    def test_full_dialog_builds_profile(self):
        # Arrange
        session = IntakeSession()

        # Act
        replies = [
            session.answer("80000"),
            session.answer("Travel, Dining"),
            session.answer("Travel Points"),
            session.answer("760"),
        ]
        profile = session.profile()

        # Assert
        assert replies == [ASK_SPENDING, ASK_BENEFIT, ASK_CREDIT_SCORE, COMPLETED]
        assert session.is_complete
        assert profile.monthly_income == 80000.0
        assert profile.credit_score == 760
        assert profile.spending_habits == ("travel", "dining")
        assert profile.preferred_benefits == BenefitPreference.TRAVEL_POINTS

    def test_invalid_answers_repeat_the_step(self):
        session = IntakeSession()

        assert session.answer("not sure") == INVALID_INCOME
        assert session.step == IntakeStep.INCOME

        session.answer("50000")
        session.answer("groceries")
        session.answer("cashback")
        assert session.answer("good") == INVALID_CREDIT_SCORE
        assert session.step == IntakeStep.CREDIT_SCORE

        assert session.answer("700") == COMPLETED
        assert session.profile().preferred_benefits == BenefitPreference.CASHBACK

    def test_unknown_benefit_becomes_none(self):
        session = IntakeSession()
        for message in ["50000", "fuel", "free coffee", "700"]:
            session.answer(message)
        assert session.profile().preferred_benefits is None

    def test_profile_before_completion_raises(self):
        session = IntakeSession()
        session.answer("50000")
        with pytest.raises(ValueError):
            session.profile()
