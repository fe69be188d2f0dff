from fastapi import APIRouter, Request

from src.user_aggregator.api.schemas import SourceResponse


router = APIRouter(prefix="/sources", tags=["sources"])


@router.get("", response_model=list[SourceResponse])
def list_sources(request: Request):
    configs = getattr(request.app.state, "source_configs", [])
    return [
        SourceResponse(name=c.name, strategy=str(c.strategy), table=c.table)
        for c in configs
    ]
