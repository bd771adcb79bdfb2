import logging
from typing import Iterable, List, Optional

from sqlalchemy import or_, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.credit_card import CreditCard
from app.services.errors import UpstreamUnavailable
from engine.models import CardRecord, RewardType

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Read-only access to the persisted card catalog.

    Every method returns CardRecords (list fields already decoded) and turns
    database errors into UpstreamUnavailable so callers can degrade to the
    static catalog.
    """

    def __init__(self, db: Session):
        self.db = db

    def _records(self, rows: Iterable[CreditCard]) -> List[CardRecord]:
        return [row.to_record() for row in rows]

    def ping(self) -> bool:
        """Connectivity probe used by the data source health check."""
        try:
            self.db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.warning(f"Catalog store ping failed: {exc}")
            return False

    def get_all(self) -> List[CardRecord]:
        """Retrieve all cards from the database."""
        try:
            rows = self.db.query(CreditCard).order_by(CreditCard.card_id).all()
        except SQLAlchemyError as exc:
            raise UpstreamUnavailable("catalog store", str(exc)) from exc
        return self._records(rows)

    def get_by_id(self, card_id: int) -> Optional[CardRecord]:
        try:
            row = self.db.query(CreditCard).filter(CreditCard.card_id == card_id).first()
        except SQLAlchemyError as exc:
            raise UpstreamUnavailable("catalog store", str(exc)) from exc
        return row.to_record() if row else None

    def get_by_ids(self, card_ids: Iterable[int]) -> List[CardRecord]:
        """Cards for the given ids, in request order; unknown ids are skipped."""
        ids = [int(card_id) for card_id in card_ids]
        if not ids:
            return []
        try:
            rows = self.db.query(CreditCard).filter(CreditCard.card_id.in_(ids)).all()
        except SQLAlchemyError as exc:
            raise UpstreamUnavailable("catalog store", str(exc)) from exc

        by_id = {row.card_id: row for row in rows}
        return [by_id[card_id].to_record() for card_id in dict.fromkeys(ids) if card_id in by_id]

    def query_eligible(
        self,
        monthly_income: float,
        credit_score: int,
        category_pattern: str,
        benefit_label: str,
    ) -> List[CardRecord]:
        """
        Strict threshold match, widened by category pattern or reward type.

        Args:
            monthly_income: user's monthly income
            credit_score: user's credit score
            category_pattern: LIKE pattern over the JSON categories column
            benefit_label: reward type the preferred benefit targets ("" for none)
        """
        soft_match = [CreditCard.categories.like(category_pattern)]
        if benefit_label:
            soft_match.append(CreditCard.reward_type == RewardType(benefit_label))

        try:
            rows = (
                self.db.query(CreditCard)
                .filter(
                    CreditCard.min_income <= monthly_income,
                    CreditCard.min_credit_score <= credit_score,
                    or_(*soft_match),
                )
                .order_by(CreditCard.card_id)
                .all()
            )
        except SQLAlchemyError as exc:
            raise UpstreamUnavailable("catalog store", str(exc)) from exc

        logger.debug(f"Store eligibility query returned {len(rows)} card(s)")
        return self._records(rows)
