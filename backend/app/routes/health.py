from fastapi import APIRouter, Depends

from app.dependencies.services import get_data_source
from app.schemas.advisor_schemas import HealthResponse
from app.services.health_service import DataSourceContext


router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(source: DataSourceContext = Depends(get_data_source)):
    return source.health()
