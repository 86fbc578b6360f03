# backend/creatorcall/schemas/booking.py
"""
Booking schemas.

``totalAmount`` on create is the price the client showed the user; the booking
is rejected if it no longer matches the creator's rate.
"""

from typing import Optional

from pydantic import Field

from ..models.booking import BookingStatus, PaymentMethod
from ..services.booking_service import MAX_MESSAGE_LENGTH, BookingDetails
from ._strict_base import StrictModel, StrictRequestModel
from .base import UtcDatetime
from .creator import CreatorWithUserResponse
from .time_slot import TimeSlotResponse
from .user import UserResponse


class BookingCreate(StrictRequestModel):
    user_id: int = Field(..., ge=1)
    creator_id: int = Field(..., ge=1)
    time_slot_id: int = Field(..., ge=1)
    message: Optional[str] = Field(None, max_length=MAX_MESSAGE_LENGTH)
    total_amount: int = Field(..., ge=0, description="Expected price in minor units")


class BookingCancelRequest(StrictRequestModel):
    reason: Optional[str] = Field(None, max_length=500)


class BookingResponse(StrictModel):
    id: int
    user_id: int
    creator_id: int
    time_slot_id: int
    message: Optional[str] = None
    total_amount: int
    status: BookingStatus
    payment_method: Optional[PaymentMethod] = None
    payment_reference: Optional[str] = None
    created_at: UtcDatetime
    updated_at: Optional[UtcDatetime] = None
    confirmed_at: Optional[UtcDatetime] = None
    cancelled_at: Optional[UtcDatetime] = None
    completed_at: Optional[UtcDatetime] = None


class BookingDetailResponse(BookingResponse):
    creator: Optional[CreatorWithUserResponse] = None
    time_slot: Optional[TimeSlotResponse] = None

    @classmethod
    def from_details(cls, details: BookingDetails) -> "BookingDetailResponse":
        creator = None
        if details.creator is not None:
            creator = CreatorWithUserResponse.model_validate(details.creator).model_copy(
                update={
                    "user": UserResponse.model_validate(details.creator_user)
                    if details.creator_user
                    else None
                }
            )
        return cls.model_validate(
            {
                **BookingResponse.model_validate(details.booking).model_dump(),
                "creator": creator,
                "time_slot": (
                    TimeSlotResponse.model_validate(details.time_slot)
                    if details.time_slot
                    else None
                ),
            }
        )
