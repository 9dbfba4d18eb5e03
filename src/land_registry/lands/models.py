"""SQLAlchemy model for land records."""

import enum

from sqlalchemy import JSON, BigInteger, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from land_registry.common.models import Base, TimestampMixin, enum_column


class LandStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"
    TRANSFER_PENDING = "transfer_pending"


class PropertyType(str, enum.Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    AGRICULTURAL = "agricultural"
    INDUSTRIAL = "industrial"


class LandModel(Base, TimestampMixin):
    __tablename__ = "lands"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    area: Mapped[int] = mapped_column(Integer, nullable=False)  # sq.ft.
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    city: Mapped[str] = mapped_column(String(255), nullable=False)
    state: Mapped[str] = mapped_column(String(255), nullable=False)
    postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    property_type: Mapped[PropertyType] = mapped_column(
        enum_column(PropertyType), nullable=False
    )
    year_built: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[LandStatus] = mapped_column(
        enum_column(LandStatus), nullable=False, default=LandStatus.PENDING, index=True
    )
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    location: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    token_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    documents: Mapped[list] = mapped_column(JSON, default=list)
    price: Mapped[int | None] = mapped_column(BigInteger, nullable=True)  # wei
    is_for_sale: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Bumped by every guarded write; the compare-and-swap in the store keys on it.
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
