"""Verification log API router."""

from fastapi import APIRouter, Depends

from land_registry.common.security import Operation, get_current_user, require
from land_registry.users.models import UserModel
from land_registry.verification.schemas import VerificationLogResponse

router = APIRouter()


def _get_service():
    from land_registry.deps import get_verification_log_service
    return get_verification_log_service()


def _get_db():
    from land_registry.deps import get_db
    return get_db()


@router.get("/verification-logs/land/{land_id}", response_model=list[VerificationLogResponse])
async def logs_for_land(land_id: int, _=Depends(get_current_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        logs = await svc.for_land(session, land_id)
        return [VerificationLogResponse.model_validate(log) for log in logs]


@router.get("/verification-logs/verifier", response_model=list[VerificationLogResponse])
async def logs_for_verifier(
    user: UserModel = Depends(require(Operation.VIEW_VERIFIER_LOG)),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        logs = await svc.for_verifier(session, user.id)
        return [VerificationLogResponse.model_validate(log) for log in logs]
