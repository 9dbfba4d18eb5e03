"""Pydantic schemas for account endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from land_registry.common.schemas import CamelModel
from land_registry.users.models import UserRole

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: str = Field(..., max_length=255, pattern=_EMAIL_PATTERN)
    password: str = Field(..., min_length=6, max_length=255)
    full_name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = UserRole.LANDOWNER
    wallet_address: Optional[str] = Field(default=None, max_length=255)


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class VerifierCreate(CamelModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: str = Field(..., max_length=255, pattern=_EMAIL_PATTERN)
    password: str = Field(..., min_length=6, max_length=255)
    full_name: str = Field(..., min_length=1, max_length=255)


class WalletUpdate(CamelModel):
    wallet_address: str = Field(..., min_length=1, max_length=255)


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    full_name: str
    role: UserRole
    wallet_address: Optional[str] = None
    created_at: datetime


class AuthResponse(UserResponse):
    """Includes the session token — send it back as ``Authorization: Bearer``."""
    token: str
