import asyncio
import sys
import threading
import unittest
from pathlib import Path
from unittest.mock import Mock

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "backend"))
sys.path.insert(0, str(REPO_ROOT))

from app.services.eligibility_service import EligibilityService  # noqa: E402
from app.services.health_service import DataSourceContext  # noqa: E402
from app.services.recommendation_service import RecommendationService  # noqa: E402
from engine.models import CardRecord, RewardType, UserProfile  # noqa: E402
from engine.recommender import STATIC_POLICY, STORE_POLICY  # noqa: E402


def stored_card(card_id, min_income, min_credit_score, categories=("fuel",)):
    return CardRecord(
        card_id=card_id,
        name=f"Stored Card {card_id}",
        issuer="Test Bank",
        joining_fee=0,
        annual_fee=500,
        reward_type=RewardType.CASHBACK,
        reward_rate="1%",
        min_income=min_income,
        min_credit_score=min_credit_score,
        special_perks=(),
        categories=categories,
    )


class RecommendationServiceTests(unittest.TestCase):
    def setUp(self):
        self.store = Mock()
        self.service = RecommendationService(
            EligibilityService(self.store),
            DataSourceContext(probe=lambda: True),
            store_policy=STORE_POLICY,
            static_policy=STATIC_POLICY,
        )

    def test_relaxed_store_cards_are_kept_with_zero_score(self):
        # Income misses the threshold and no category overlaps: score 0
        self.store.query_eligible.return_value = []
        self.store.get_all.return_value = [stored_card(1, min_income=200000, min_credit_score=650)]
        profile = UserProfile(monthly_income=100000, credit_score=600, spending_habits=("travel",))

        ranked = self.service.rank(profile)

        self.assertEqual([card.card_id for card in ranked], [1])
        self.assertEqual(ranked[0].score, 0)

    def test_prefix_stage_returns_first_three_store_cards(self):
        self.store.query_eligible.return_value = []
        self.store.get_all.return_value = [
            stored_card(card_id, min_income=900000, min_credit_score=850) for card_id in range(1, 6)
        ]
        profile = UserProfile(monthly_income=10000, credit_score=500, spending_habits=())

        ranked = self.service.rank(profile)

        self.assertEqual([card.card_id for card in ranked], [1, 2, 3])

    def test_strict_store_match_still_drops_zero_scores(self):
        self.store.query_eligible.return_value = [
            stored_card(1, min_income=50000, min_credit_score=600, categories=("travel",)),
            stored_card(2, min_income=200000, min_credit_score=600),
        ]
        profile = UserProfile(monthly_income=100000, credit_score=700, spending_habits=("travel",))

        ranked = self.service.rank(profile)

        self.assertEqual([card.card_id for card in ranked], [1])

    def test_store_work_runs_off_the_event_loop(self):
        threads = []

        def query_eligible(*args):
            threads.append(threading.get_ident())
            return [stored_card(1, min_income=50000, min_credit_score=600, categories=("travel",))]

        self.store.query_eligible.side_effect = query_eligible
        profile = UserProfile(monthly_income=100000, credit_score=700, spending_habits=("travel",))

        async def run():
            loop_thread = threading.get_ident()
            ranked = await self.service.recommend(profile)
            return loop_thread, ranked

        loop_thread, ranked = asyncio.run(run())

        self.assertEqual(len(ranked), 1)
        self.assertEqual(len(threads), 1)
        self.assertNotEqual(threads[0], loop_thread)


if __name__ == "__main__":
    unittest.main()
