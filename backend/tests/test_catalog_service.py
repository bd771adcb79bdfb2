import json
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "backend"))
sys.path.insert(0, str(REPO_ROOT))

from app.models.credit_card import CreditCard  # noqa: E402
from app.services.catalog_service import CatalogService  # noqa: E402
from app.services.eligibility_service import EligibilityService  # noqa: E402
from app.services.errors import UpstreamUnavailable  # noqa: E402
from engine.models import BenefitPreference, RewardType, UserProfile  # noqa: E402


def make_row(card_id, name, perks, categories, reward_type=RewardType.CASHBACK):
    return CreditCard(
        card_id=card_id,
        name=name,
        issuer="Test Bank",
        joining_fee=0,
        annual_fee=500,
        reward_type=reward_type,
        reward_rate="1%",
        min_income=100000,
        min_credit_score=650,
        special_perks=perks,
        categories=categories,
    )


@pytest.fixture
def mock_db():
    return Mock()


@pytest.fixture
def catalog_service(mock_db):
    return CatalogService(db=mock_db)


def test_get_all_decodes_list_columns(catalog_service, mock_db):
    # Arrange
    mock_db.query.return_value.order_by.return_value.all.return_value = [
        make_row(1, "Card A", json.dumps(["Lounge access"]), json.dumps(["travel", "dining"])),
        make_row(2, "Card B", "{broken", json.dumps(["fuel"])),
        make_row(3, "Card C", json.dumps({"not": "a list"}), ""),
    ]

    # Act
    result = catalog_service.get_all()

    # Assert
    assert [card.name for card in result] == ["Card A", "Card B", "Card C"]
    assert result[0].special_perks == ("Lounge access",)
    assert result[0].categories == ("travel", "dining")
    assert result[1].special_perks == ()
    assert result[2].special_perks == ()
    assert result[2].categories == ()
    mock_db.query.assert_called_once_with(CreditCard)


def test_database_errors_become_upstream_unavailable(catalog_service, mock_db):
    mock_db.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))

    with pytest.raises(UpstreamUnavailable):
        catalog_service.get_all()
    with pytest.raises(UpstreamUnavailable):
        catalog_service.get_by_ids([1, 2])


def test_get_by_ids_keeps_request_order(catalog_service, mock_db):
    mock_db.query.return_value.filter.return_value.all.return_value = [
        make_row(1, "Card A", "[]", "[]"),
        make_row(2, "Card B", "[]", "[]"),
    ]

    result = catalog_service.get_by_ids([2, 99, 1, 2])

    assert [card.card_id for card in result] == [2, 1]


def test_get_by_ids_with_no_ids_skips_query(catalog_service, mock_db):
    assert catalog_service.get_by_ids([]) == []
    mock_db.query.assert_not_called()


def test_ping_reports_failure(catalog_service, mock_db):
    mock_db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
    assert catalog_service.ping() is False


class TestEligibilityService:
    """Store lookup with static fallback."""

    profile = UserProfile(
        monthly_income=700000,
        credit_score=750,
        spending_habits=("travel",),
        preferred_benefits=BenefitPreference.TRAVEL_POINTS,
    )

    def test_store_query_receives_pattern_and_label(self):
        store = Mock()
        store.query_eligible.return_value = [make_row(1, "Card A", "[]", '["travel"]').to_record()]

        outcome = EligibilityService(store).find_eligible(self.profile)

        store.query_eligible.assert_called_once_with(700000, 750, "%travel%", "Points")
        assert outcome.source == "store"
        assert outcome.stage == "strict"

    def test_store_failure_uses_static_catalog(self):
        store = Mock()
        store.query_eligible.side_effect = UpstreamUnavailable("catalog store", "down")

        outcome = EligibilityService(store).find_eligible(self.profile)

        assert outcome.source == "static"
        assert outcome.cards

    def test_empty_store_uses_static_catalog(self):
        store = Mock()
        store.query_eligible.return_value = []
        store.get_all.return_value = []

        outcome = EligibilityService(store).find_eligible(self.profile)

        assert outcome.source == "static"

    def test_mock_mode_skips_store(self):
        store = Mock()

        outcome = EligibilityService(store).find_eligible(self.profile, use_store=False)

        store.query_eligible.assert_not_called()
        assert outcome.source == "static"
