from .catalog import router as catalog_router
from .comparison import router as comparison_router
from .health import router as health_router
from .notification import router as notification_router
from .recommendation import router as recommendation_router

__all__ = [
    "catalog_router",
    "comparison_router",
    "health_router",
    "notification_router",
    "recommendation_router",
]
