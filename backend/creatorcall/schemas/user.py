# backend/creatorcall/schemas/user.py
"""User schemas."""

from typing import Optional

from pydantic import Field

from ._strict_base import StrictModel, StrictRequestModel
from .base import UtcDatetime


class UserCreate(StrictRequestModel):
    """Sign-in payload; the user is created only if the fid is unknown."""

    username: str = Field(..., min_length=1, max_length=255)
    fid: Optional[int] = Field(None, ge=0, description="External social id")
    display_name: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = None
    profile_image: Optional[str] = None


class WalletAddressUpdate(StrictRequestModel):
    wallet_address: str = Field(..., min_length=1)


class UserResponse(StrictModel):
    id: int
    username: str
    fid: Optional[int] = None
    display_name: Optional[str] = None
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    wallet_address: Optional[str] = None
    created_at: Optional[UtcDatetime] = None
