"""
Unit tests for engine/recommender.py
Tests top-N selection per policy and folding in model re-rank/reason data.
"""

import pytest
from dataclasses import replace

from engine.cards import static_catalog
from engine.eligibility import select_eligible
from engine.models import BenefitPreference, CardRecord, RewardType, ScoredCard, UserProfile
from engine.recommender import (
    DEFAULT_AI_SCORE,
    GENERIC_REASONS,
    STATIC_POLICY,
    STORE_POLICY,
    apply_ai_reasons,
    apply_ai_scores,
    extract_json_array,
    rank_candidates,
    recommend,
)


def make_scored(card_id, score, name=None):
    card = CardRecord(
        card_id=card_id,
        name=name or f"Card {card_id}",
        issuer="Test Bank",
        joining_fee=0,
        annual_fee=0,
        reward_type=RewardType.CASHBACK,
        reward_rate="1%",
        min_income=0,
        min_credit_score=0,
    )
    return ScoredCard(card=card, score=score, yearly_rewards=0, reasons=("heuristic",))


class TestRankCandidates:
    """Tests for filtering, ordering and the top-N cut."""

    def test_store_policy_drops_zero_scores_and_keeps_five(self):
        # Arrange
        scored = [make_scored(i, score) for i, score in enumerate([0, 40, 15, 60, 40, 25, 30, 0])]

        # Act
        ranked = rank_candidates(scored, STORE_POLICY)

        # Assert
        assert [card.score for card in ranked] == [60, 40, 40, 30, 25]
        assert all(card.score > 0 for card in ranked)

    def test_ties_keep_input_order(self):
        scored = [make_scored(1, 40), make_scored(2, 40), make_scored(3, 40)]
        ranked = rank_candidates(scored, STORE_POLICY)
        assert [card.card.card_id for card in ranked] == [1, 2, 3]

    def test_static_policy_keeps_zero_scores_and_three(self):
        scored = [make_scored(1, 0), make_scored(2, 0), make_scored(3, 0), make_scored(4, 0)]
        ranked = rank_candidates(scored, STATIC_POLICY)
        assert [card.card.card_id for card in ranked] == [1, 2, 3]

    def test_top_n_is_configurable(self):
        scored = [make_scored(i, 10 + i) for i in range(10)]
        ranked = rank_candidates(scored, replace(STORE_POLICY, top_n=2))
        assert [card.score for card in ranked] == [19, 18]


class TestRecommendOnStaticCatalog:
    """End-to-end engine run against the embedded catalog."""

    def test_travel_profile_on_static_catalog(self):
        # Arrange
        profile = UserProfile(
            monthly_income=800000,
            credit_score=760,
            spending_habits=("travel", "dining"),
            preferred_benefits=BenefitPreference.TRAVEL_POINTS,
        )

        # Act
        eligible, stage = select_eligible(profile, static_catalog.get_all())
        ranked = recommend(profile, eligible, STATIC_POLICY)

        # Assert
        assert stage == "strict"
        assert len(ranked) == 3
        assert ranked[0].name == "Citi PremierMiles Card"
        assert ranked[0].score == 20 + 15 + 25
        # 30% of income, Points rate: 240000 * 12 * 0.015
        assert ranked[0].yearly_rewards == 43200


class TestExtractJsonArray:
    """Tests for pulling a JSON array out of free-form model output."""

    def test_array_inside_prose(self):
        content = 'Here you go:\n[{"name": "A", "score": 90}]\nHope this helps.'
        assert extract_json_array(content) == [{"name": "A", "score": 90}]

    @pytest.mark.parametrize("content", [None, "", "no array here", "[not json]", '{"a": 1}'])
    def test_unusable_content(self, content):
        assert extract_json_array(content) is None


class TestApplyAiScores:
    """Tests for the re-rank merge."""

    def test_sorts_by_ai_score_with_default(self):
        # Arrange
        cards = [make_scored(1, 60), make_scored(2, 50), make_scored(3, 40)]
        ranking = [{"name": "Card 3", "score": 95}, {"name": "Card 1", "score": 20}]

        # Act
        reranked = apply_ai_scores(cards, ranking)

        # Assert
        assert [card.card.card_id for card in reranked] == [3, 2, 1]
        assert [card.ai_score for card in reranked] == [95, DEFAULT_AI_SCORE, 20]

    def test_non_list_keeps_order(self):
        cards = [make_scored(1, 60), make_scored(2, 50)]
        assert apply_ai_scores(cards, None) == cards
        assert apply_ai_scores(cards, {"name": "Card 2"}) == cards

    def test_inputs_are_not_mutated(self):
        cards = [make_scored(1, 60)]
        apply_ai_scores(cards, [{"name": "Card 1", "score": 70}])
        assert cards[0].ai_score is None


class TestApplyAiReasons:
    """Tests for the reason enrichment merge."""

    def test_aligned_by_position_with_generic_gaps(self):
        cards = [make_scored(1, 60), make_scored(2, 50), make_scored(3, 40)]
        reasons = [["Great for travel", "Lounge access"], []]

        enriched = apply_ai_reasons(cards, reasons)

        assert enriched[0].reasons == ("Great for travel", "Lounge access")
        assert enriched[1].reasons == GENERIC_REASONS
        assert enriched[2].reasons == GENERIC_REASONS

    def test_unparseable_body_gives_generic_reasons(self):
        cards = [make_scored(1, 60), make_scored(2, 50)]
        enriched = apply_ai_reasons(cards, None)
        assert all(card.reasons == GENERIC_REASONS for card in enriched)
