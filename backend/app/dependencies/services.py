from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import AppConfig
from app.db.db import SessionLocal
from app.dependencies.db import get_db
from app.services.catalog_service import CatalogService
from app.services.comparison_service import ComparisonService
from app.services.eligibility_service import EligibilityService
from app.services.health_service import DataSourceContext, session_probe
from app.services.notification_service import NotificationService
from app.services.ranking_service import RankingService, build_async_client
from app.services.recommendation_service import RecommendationService

# Process-wide singletons; everything else is built per request
data_source = DataSourceContext(
    probe=session_probe(SessionLocal),
    mock_only=AppConfig.USE_MOCK_DATA,
    ttl_seconds=AppConfig.HEALTH_CHECK_TTL_SECONDS,
)
ranking_service = RankingService(build_async_client())


def get_data_source() -> DataSourceContext:
    return data_source


def get_ranking_service() -> RankingService:
    return ranking_service


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_recommendation_service(
    catalog: CatalogService = Depends(get_catalog_service),
    source: DataSourceContext = Depends(get_data_source),
    ranking: RankingService = Depends(get_ranking_service),
) -> RecommendationService:
    return RecommendationService(EligibilityService(catalog), source, ranking)


def get_comparison_service(
    catalog: CatalogService = Depends(get_catalog_service),
    source: DataSourceContext = Depends(get_data_source),
) -> ComparisonService:
    # Placeholder rows instead of store lookups while in mock mode
    return ComparisonService(catalog, use_store=source.is_store_available())


def get_notification_service(
    catalog: CatalogService = Depends(get_catalog_service),
) -> NotificationService:
    return NotificationService(catalog)
