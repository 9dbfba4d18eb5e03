"""SQLAlchemy model for registry users."""

import enum

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from land_registry.common.models import Base, TimestampMixin, enum_column


class UserRole(str, enum.Enum):
    LANDOWNER = "landowner"
    BUYER = "buyer"
    VERIFIER = "verifier"
    ADMIN = "admin"


class UserModel(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        enum_column(UserRole), nullable=False, default=UserRole.LANDOWNER
    )
    wallet_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
