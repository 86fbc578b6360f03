# backend/creatorcall/schemas/creator.py
"""
Creator schemas.

Request rates are in major currency units (dollars) and stored in minor
units (cents); responses always carry minor units.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import Field

from ._strict_base import StrictModel, StrictRequestModel
from .user import UserResponse


def to_minor_units(amount: Decimal) -> int:
    """Convert a major-unit amount to integer minor units."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class CreatorCreate(StrictRequestModel):
    user_id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=255)
    rate: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2, description="Major units")
    duration: int = Field(..., gt=0, le=24 * 60, description="Session length in minutes")
    category: str = Field(..., min_length=1, max_length=100)
    timezone: Optional[str] = Field(None, max_length=64)


class CreatorUpdate(StrictRequestModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    rate: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    duration: Optional[int] = Field(None, gt=0, le=24 * 60)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    is_active: Optional[bool] = None
    timezone: Optional[str] = Field(None, max_length=64)


class CreatorResponse(StrictModel):
    id: int
    user_id: int
    title: str
    rate: int = Field(..., description="Minor currency units")
    duration: int
    category: str
    is_active: bool
    timezone: str


class CreatorWithUserResponse(CreatorResponse):
    user: Optional[UserResponse] = None
