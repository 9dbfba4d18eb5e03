"""Pydantic schemas for land endpoints."""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, StrictBool

from land_registry.common.schemas import CamelModel
from land_registry.lands.models import LandStatus, PropertyType


class LandCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    area: int = Field(..., gt=0)
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=255)
    state: str = Field(..., min_length=1, max_length=255)
    postal_code: Optional[str] = Field(default=None, max_length=20)
    property_type: PropertyType
    year_built: Optional[int] = None
    location: Optional[dict[str, Any]] = None
    documents: list[str] = Field(default_factory=list)
    price: Optional[int] = Field(default=None, gt=0)


class LandStatusUpdate(CamelModel):
    status: LandStatus
    reason: Optional[str] = None
    tx_hash: Optional[str] = None


class LandSaleUpdate(CamelModel):
    is_for_sale: StrictBool
    price: Optional[int] = Field(default=None, gt=0)


class LandResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    area: int
    address: str
    city: str
    state: str
    postal_code: Optional[str] = None
    property_type: PropertyType
    year_built: Optional[int] = None
    status: LandStatus
    owner_id: int
    location: Optional[dict[str, Any]] = None
    token_id: Optional[str] = None
    documents: list[str] = Field(default_factory=list)
    price: Optional[int] = None
    is_for_sale: bool
    created_at: datetime
    updated_at: datetime
