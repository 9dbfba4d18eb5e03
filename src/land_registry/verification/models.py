"""SQLAlchemy model for the verifier audit trail."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from land_registry.common.models import Base, enum_column, utcnow


class VerificationAction(str, enum.Enum):
    APPROVED = "approved"
    REJECTED = "rejected"
    APPROVED_TRANSFER = "approved-transfer"
    REJECTED_TRANSFER = "rejected-transfer"


class VerificationLogModel(Base):
    __tablename__ = "verification_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    land_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("lands.id"), nullable=False, index=True
    )
    verifier_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    action: Mapped[VerificationAction] = mapped_column(
        enum_column(VerificationAction), nullable=False
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    tx_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
