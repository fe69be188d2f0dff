from contextlib import asynccontextmanager
import logging

import dotenv
from fastapi import FastAPI

from src.user_aggregator.api.routers import users_router, sources_router
from src.user_aggregator.core.logging_setup import setup_logging
from src.user_aggregator.core.settings import get_settings
from src.user_aggregator.services.user_aggregation_service import UserAggregationService

dotenv.load_dotenv()

logger = logging.getLogger(__name__)


# Определение жизненного цикла
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    configs = settings.load_sources()
    app.state.source_configs = configs
    app.state.aggregation_service = UserAggregationService.from_configs(
        configs,
        mode=settings.AGGREGATION_MODE,
        source_timeout=settings.SOURCE_TIMEOUT_SECONDS,
    )
    logger.info("configured sources: %d, mode: %s", len(configs), settings.AGGREGATION_MODE)
    yield
    app.state.aggregation_service.close()

app = FastAPI(
    title="User Aggregator API",
    description="A RESTful API for aggregating user data from multiple sources",
    version="1.0.0",
    docs_url="/docs",
    redoc_url=None,
    lifespan=lifespan,
)

app.include_router(users_router)
app.include_router(sources_router)

@app.get("/health")
def health():
    return {"status": "ok"}
