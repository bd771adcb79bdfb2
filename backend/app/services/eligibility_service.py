import logging
from dataclasses import dataclass
from typing import List, Optional

from app.services.catalog_service import CatalogService
from app.services.errors import UpstreamUnavailable
from engine.cards import StaticCatalog, static_catalog
from engine.eligibility import STAGE_STRICT, benefit_label, category_pattern, relax, select_eligible
from engine.models import CardRecord, UserProfile

logger = logging.getLogger(__name__)

SOURCE_STORE = "store"
SOURCE_STATIC = "static"


@dataclass(frozen=True)
class EligibilityOutcome:
    """
    Eligible cards plus where they came from.

    - stage: "strict", "relaxed" or "prefix"
    - source: "store" or "static"
    """
    cards: List[CardRecord]
    stage: str
    source: str


class EligibilityService:
    """Store-backed eligibility lookup that never raises to its caller."""

    def __init__(self, store: Optional[CatalogService], static: StaticCatalog = static_catalog):
        self.store = store
        self.static = static

    def _from_static(self, profile: UserProfile) -> EligibilityOutcome:
        cards, stage = select_eligible(profile, self.static.get_all())
        return EligibilityOutcome(cards=cards, stage=stage, source=SOURCE_STATIC)

    def find_eligible(self, profile: UserProfile, use_store: bool = True) -> EligibilityOutcome:
        if self.store is None or not use_store:
            return self._from_static(profile)

        try:
            cards = self.store.query_eligible(
                profile.monthly_income,
                profile.credit_score,
                category_pattern(profile.spending_habits),
                benefit_label(profile.preferred_benefits),
            )
            if cards:
                return EligibilityOutcome(cards=cards, stage=STAGE_STRICT, source=SOURCE_STORE)

            catalog = self.store.get_all()
        except UpstreamUnavailable as exc:
            logger.warning(f"Eligibility lookup failed, falling back to static catalog: {exc}")
            return self._from_static(profile)

        if not catalog:
            logger.warning("Catalog store returned no cards, falling back to static catalog")
            return self._from_static(profile)

        cards, stage = relax(profile, catalog)
        logger.info(f"No strict store matches; {stage} fallback returned {len(cards)} card(s)")
        return EligibilityOutcome(cards=cards, stage=stage, source=SOURCE_STORE)
