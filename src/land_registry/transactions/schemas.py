"""Pydantic schemas for transaction endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from land_registry.common.schemas import CamelModel
from land_registry.transactions.models import TransactionStatus


class PurchaseRequest(CamelModel):
    land_id: int
    price: int = Field(..., gt=0)


class TransferDecision(CamelModel):
    status: TransactionStatus
    tx_hash: Optional[str] = None
    reason: Optional[str] = None


class TransactionResponse(CamelModel):
    id: int
    land_id: int
    from_user_id: int
    to_user_id: int
    price: int
    status: TransactionStatus
    tx_hash: Optional[str] = None
    escrow_id: Optional[str] = None
    verifier_id: Optional[int] = None
    verified_at: Optional[datetime] = None
    created_at: datetime
