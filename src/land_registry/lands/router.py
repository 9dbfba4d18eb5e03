"""Land API router."""

from fastapi import APIRouter, Depends

from land_registry.common.exceptions import ValidationError
from land_registry.common.security import Operation, get_current_user, require
from land_registry.lands.models import LandStatus
from land_registry.lands.schemas import (
    LandCreate,
    LandResponse,
    LandSaleUpdate,
    LandStatusUpdate,
)
from land_registry.users.models import UserModel

router = APIRouter()

_DECISIONS = {LandStatus.VERIFIED: True, LandStatus.REJECTED: False}


def _get_service():
    from land_registry.deps import get_land_service
    return get_land_service()


def _get_db():
    from land_registry.deps import get_db
    return get_db()


@router.post("/lands", response_model=LandResponse, status_code=201)
async def register_land(
    body: LandCreate,
    user: UserModel = Depends(require(Operation.REGISTER_LAND)),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        land = await svc.register(session, user.id, **body.model_dump(exclude_none=True))
        return LandResponse.model_validate(land)


@router.get("/lands/my", response_model=list[LandResponse])
async def my_lands(user: UserModel = Depends(get_current_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        lands = await svc.lands_by_owner(session, user.id)
        return [LandResponse.model_validate(land) for land in lands]


@router.get("/lands/marketplace", response_model=list[LandResponse])
async def marketplace():
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        lands = await svc.list_for_sale(session)
        return [LandResponse.model_validate(land) for land in lands]


@router.get("/lands/status/{status}", response_model=list[LandResponse])
async def lands_by_status(
    status: LandStatus,
    _=Depends(require(Operation.LIST_LANDS_BY_STATUS)),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        lands = await svc.lands_by_status(session, status)
        return [LandResponse.model_validate(land) for land in lands]


@router.get("/lands/{land_id}", response_model=LandResponse)
async def get_land(land_id: int, _=Depends(get_current_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        land = await svc.get_land(session, land_id)
        return LandResponse.model_validate(land)


@router.patch("/lands/{land_id}/status", response_model=LandResponse)
async def decide_verification(
    land_id: int,
    body: LandStatusUpdate,
    user: UserModel = Depends(require(Operation.DECIDE_VERIFICATION)),
):
    if body.status not in _DECISIONS:
        raise ValidationError("Invalid status")
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        land, _log = await svc.decide_verification(
            session, land_id, user.id,
            approve=_DECISIONS[body.status],
            reason=body.reason,
            tx_hash=body.tx_hash,
        )
        return LandResponse.model_validate(land)


@router.patch("/lands/{land_id}/sale", response_model=LandResponse)
async def set_for_sale(
    land_id: int,
    body: LandSaleUpdate,
    user: UserModel = Depends(require(Operation.SET_FOR_SALE)),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        land = await svc.set_for_sale(
            session, land_id, user.id, body.is_for_sale, price=body.price,
        )
        return LandResponse.model_validate(land)
