"""Transaction API router."""

from fastapi import APIRouter, Depends

from land_registry.common.exceptions import ValidationError
from land_registry.common.security import Operation, get_current_user, require
from land_registry.transactions.models import TransactionStatus
from land_registry.transactions.schemas import (
    PurchaseRequest,
    TransactionResponse,
    TransferDecision,
)
from land_registry.users.models import UserModel

router = APIRouter()

_DECISIONS = {TransactionStatus.COMPLETED: True, TransactionStatus.REJECTED: False}


def _get_service():
    from land_registry.deps import get_transaction_service
    return get_transaction_service()


def _get_db():
    from land_registry.deps import get_db
    return get_db()


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
async def initiate_purchase(
    body: PurchaseRequest,
    user: UserModel = Depends(require(Operation.INITIATE_PURCHASE)),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        transaction = await svc.initiate_purchase(
            session, user.id, body.land_id, body.price,
        )
        return TransactionResponse.model_validate(transaction)


@router.get("/transactions/my", response_model=list[TransactionResponse])
async def my_transactions(user: UserModel = Depends(get_current_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        transactions = await svc.transactions_for_user(session, user.id)
        return [TransactionResponse.model_validate(t) for t in transactions]


@router.get("/transactions/pending", response_model=list[TransactionResponse])
async def pending_transactions(
    _=Depends(require(Operation.LIST_PENDING_TRANSACTIONS)),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        transactions = await svc.pending(session)
        return [TransactionResponse.model_validate(t) for t in transactions]


@router.patch("/transactions/{transaction_id}", response_model=TransactionResponse)
async def decide_transfer(
    transaction_id: int,
    body: TransferDecision,
    user: UserModel = Depends(require(Operation.DECIDE_TRANSFER)),
):
    if body.status not in _DECISIONS:
        raise ValidationError("Invalid status")
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        transaction, _log = await svc.decide_transfer(
            session, transaction_id, user.id,
            approve=_DECISIONS[body.status],
            reason=body.reason,
            tx_hash=body.tx_hash,
        )
        return TransactionResponse.model_validate(transaction)
