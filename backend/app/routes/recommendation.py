from fastapi import APIRouter, Depends

from app.dependencies.services import get_recommendation_service
from app.schemas.advisor_schemas import RecommendationRequest, RecommendedCard
from app.services.recommendation_service import RecommendationService


router = APIRouter(prefix="/api/v1", tags=["recommendation"])


@router.post("/recommendations", response_model=list[RecommendedCard])
async def get_recommendations(
    payload: RecommendationRequest,
    service: RecommendationService = Depends(get_recommendation_service),
):
    """Recommend cards for a completed intake profile.

    Must-have behavior:
    - Missing or non-numeric monthlyIncome / creditScore -> 400 VALIDATION_ERROR.
    - Store failures fall back to the static catalog; never a 5xx.
    - LLM enrichment and re-rank are best effort.
    """
    ranked = await service.recommend(payload.to_profile())
    return [RecommendedCard.from_scored(card) for card in ranked]
