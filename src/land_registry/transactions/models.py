"""SQLAlchemy model for purchase transactions."""

import enum
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from land_registry.common.models import Base, TimestampMixin, enum_column


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    REJECTED = "rejected"


class TransactionModel(Base, TimestampMixin):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    land_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("lands.id"), nullable=False, index=True
    )
    from_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    to_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)  # wei
    status: Mapped[TransactionStatus] = mapped_column(
        enum_column(TransactionStatus),
        nullable=False,
        default=TransactionStatus.PENDING,
        index=True,
    )
    tx_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    escrow_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    verifier_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
