from src.user_aggregator.api.routers.users import router as users_router
from src.user_aggregator.api.routers.sources import router as sources_router

__all__ = ["users_router", "sources_router"]
