import logging
from typing import Iterable, List, Optional

from app.services.catalog_service import CatalogService
from app.services.errors import InputValidationError, NotFoundError, UpstreamUnavailable
from engine.comparison import compare, placeholder_cards
from engine.models import CardRecord, ComparisonRow

logger = logging.getLogger(__name__)


def _parse_card_ids(card_ids: Optional[Iterable]) -> List[int]:
    if card_ids is None:
        raise InputValidationError("Invalid card IDs. Please provide an array of card IDs.")
    parsed = []
    for raw in card_ids:
        # int() would quietly turn True and 1.9 into 1
        if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
            raise InputValidationError(
                "Card IDs must be integers.",
                {"card_id": str(raw)},
            )
        try:
            parsed.append(int(raw))
        except (TypeError, ValueError, OverflowError):
            raise InputValidationError(
                "Card IDs must be integers.",
                {"card_id": str(raw)},
            )
    if not parsed:
        raise InputValidationError("Invalid card IDs. Please provide an array of card IDs.")
    return parsed


class ComparisonService:
    """Resolve requested ids and build comparison rows, never an empty set."""

    def __init__(self, store: Optional[CatalogService], use_store: bool = True):
        self.store = store
        self.use_store = use_store

    def resolve_cards(self, card_ids: List[int]) -> List[CardRecord]:
        if self.store is None or not self.use_store:
            logger.info("Using placeholder data for card comparison")
            return placeholder_cards(card_ids)

        try:
            cards = self.store.get_by_ids(card_ids)
        except UpstreamUnavailable as exc:
            logger.warning(f"Comparison lookup failed, using placeholder rows: {exc}")
            return placeholder_cards(card_ids)

        if not cards:
            logger.info(f"No stored cards for ids {card_ids}; using placeholder rows")
            return placeholder_cards(card_ids)
        return cards

    def compare_cards(self, card_ids: Optional[Iterable]) -> List[ComparisonRow]:
        """
        Comparison rows for the requested ids.

        Raises:
            InputValidationError: ids missing, empty, or not integers
            NotFoundError: nothing to compare after fallback
        """
        ids = _parse_card_ids(card_ids)
        rows = compare(self.resolve_cards(ids))
        if not rows:
            raise NotFoundError("No cards found for comparison", {"card_ids": ids})
        return rows
