"""System stats API router."""

from fastapi import APIRouter, Depends

from land_registry.common.security import get_current_user
from land_registry.system.schemas import StatsResponse

router = APIRouter()


def _get_service():
    from land_registry.deps import get_stats_service
    return get_stats_service()


def _get_db():
    from land_registry.deps import get_db
    return get_db()


@router.get("/system/stats", response_model=StatsResponse)
async def system_stats(_=Depends(get_current_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        return StatsResponse(**await svc.get_stats(session))
