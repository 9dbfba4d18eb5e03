"""Pydantic schemas for verification log responses."""

from datetime import datetime
from typing import Optional

from land_registry.common.schemas import CamelModel
from land_registry.verification.models import VerificationAction


class VerificationLogResponse(CamelModel):
    id: int
    land_id: int
    verifier_id: int
    action: VerificationAction
    reason: Optional[str] = None
    tx_hash: Optional[str] = None
    created_at: datetime
