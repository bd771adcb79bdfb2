"""
Recommendation orchestration.

eligibility -> heuristic scoring -> top-N -> (optional) reason enrichment -> (optional) re-rank

The data source is decided per call: the DataSourceContext says whether the
store is worth trying, and any store failure during the call switches that
call to the static catalog. The static path uses its own policy (spend preset
and top-N).
"""

import logging
from dataclasses import replace
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool

from app.config import AppConfig
from app.services.eligibility_service import SOURCE_STATIC, EligibilityService
from app.services.health_service import DataSourceContext
from app.services.ranking_service import RankingService
from engine.eligibility import STAGE_STRICT
from engine.models import ScoredCard, UserProfile
from engine.recommender import STATIC_POLICY, STORE_POLICY, RecommendationPolicy, recommend

logger = logging.getLogger(__name__)


def configured_policies() -> tuple[RecommendationPolicy, RecommendationPolicy]:
    """Store and static policies with top-N taken from the environment."""
    return (
        replace(STORE_POLICY, top_n=AppConfig.TOP_N_STORE),
        replace(STATIC_POLICY, top_n=AppConfig.TOP_N_STATIC),
    )


class RecommendationService:
    def __init__(
        self,
        eligibility: EligibilityService,
        data_source: DataSourceContext,
        ranking: Optional[RankingService] = None,
        store_policy: Optional[RecommendationPolicy] = None,
        static_policy: Optional[RecommendationPolicy] = None,
    ):
        self.eligibility = eligibility
        self.data_source = data_source
        self.ranking = ranking
        default_store, default_static = configured_policies()
        self.store_policy = store_policy or default_store
        self.static_policy = static_policy or default_static

    def rank(self, profile: UserProfile) -> List[ScoredCard]:
        """Heuristic ranking only, without any LLM post-processing."""
        outcome = self.eligibility.find_eligible(profile, use_store=self.data_source.is_store_available())
        policy = self.static_policy if outcome.source == SOURCE_STATIC else self.store_policy
        if outcome.stage != STAGE_STRICT:
            # Relaxed and prefix candidates may all score 0; keep them
            policy = replace(policy, require_positive_score=False)

        ranked = recommend(profile, outcome.cards, policy)
        logger.info(
            f"Ranked {len(ranked)} of {len(outcome.cards)} eligible card(s) "
            f"(source={outcome.source}, stage={outcome.stage}, preset={policy.preset.name})"
        )
        return ranked

    async def recommend(self, profile: UserProfile) -> List[ScoredCard]:
        """
        Full recommendation pipeline for one completed profile.

        Returns:
            Ranked ScoredCard list; the LLM steps only ever reorder or
            re-annotate this list and are skipped on any failure.
        """
        # Store queries and the availability probe are blocking calls
        ranked = await run_in_threadpool(self.rank, profile)
        if self.ranking is None or not ranked:
            return ranked

        enriched = await self.ranking.enrich_reasons(profile, ranked)
        return await self.ranking.rerank(profile, enriched)
