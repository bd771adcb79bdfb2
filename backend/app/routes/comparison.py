from fastapi import APIRouter, Depends

from app.dependencies.services import get_comparison_service
from app.schemas.advisor_schemas import CompareCardsRequest, ComparisonCard
from app.services.comparison_service import ComparisonService


router = APIRouter(prefix="/api/v1", tags=["comparison"])


@router.post("/compare-cards", response_model=list[ComparisonCard])
def compare_cards(
    payload: CompareCardsRequest,
    service: ComparisonService = Depends(get_comparison_service),
):
    """Side-by-side metrics for the requested card ids.

    Empty or missing cardIds -> 400 VALIDATION_ERROR. Ids that resolve to no
    stored cards get deterministic placeholder rows.
    """
    rows = service.compare_cards(payload.card_ids)
    return [ComparisonCard.from_row(row) for row in rows]
