from fastapi import HTTPException, Request, status

from src.user_aggregator.services.user_aggregation_service import UserAggregationService


# Service factories (composition root)
def get_aggregation_service(request: Request) -> UserAggregationService:
    """
    Сервис собирается один раз в lifespan и живёт в app.state.
    """
    svc = getattr(request.app.state, "aggregation_service", None)
    if svc is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Aggregation service is not initialized",
        )
    return svc
