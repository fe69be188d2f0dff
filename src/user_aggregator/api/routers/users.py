from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from src.user_aggregator.api.deps import get_aggregation_service
from src.user_aggregator.api.schemas import UserResponse
from src.user_aggregator.services.user_aggregation_service import UserAggregationService


router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "",
    response_model=list[UserResponse],
    summary="Retrieve a list of users",
    description="Optional filters can be applied, e.g. ?name=John&surname=Doe",
    responses={500: {"description": "Server error"}},
)
async def list_users(
    request: Request,
    svc: UserAggregationService = Depends(get_aggregation_service),
):
    # все query-параметры – фильтры; неизвестные поля отбросит построитель запроса
    filters = dict(request.query_params)

    if svc.concurrent:
        users = await svc.get_all_users_concurrent(filters)
    else:
        users = await run_in_threadpool(svc.get_all_users, filters)

    return [UserResponse.model_validate(u) for u in users]
