from .catalog_service import CatalogService
from .comparison_service import ComparisonService
from .eligibility_service import EligibilityService, EligibilityOutcome
from .errors import (
    ServiceError,
    InputValidationError,
    NotFoundError,
    NotificationError,
    UpstreamUnavailable,
)
from .health_service import DataSourceContext
from .notification_service import NotificationService
from .ranking_service import RankingService
from .recommendation_service import RecommendationService

__all__ = [
    "CatalogService",
    "ComparisonService",
    "EligibilityService",
    "EligibilityOutcome",
    "ServiceError",
    "InputValidationError",
    "NotFoundError",
    "NotificationError",
    "UpstreamUnavailable",
    "DataSourceContext",
    "NotificationService",
    "RankingService",
    "RecommendationService",
]
