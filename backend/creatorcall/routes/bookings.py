# backend/creatorcall/routes/bookings.py
"""
Booking API Routes

Endpoints:
    POST /bookings                        → Claim a slot and create a pending booking
    GET /bookings/user/{user_id}          → A user's bookings with creator and slot
    GET /bookings/{booking_id}            → Booking detail
    POST /bookings/{booking_id}/cancel    → Cancel and release the slot
"""

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, status

from ..core.exceptions import DomainException
from ..schemas.booking import (
    BookingCancelRequest,
    BookingCreate,
    BookingDetailResponse,
    BookingResponse,
)
from ..services.booking_service import BookingService
from ..services.dependencies import get_booking_service
from ._errors import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate,
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Create a booking in ``pending``.

    The slot is claimed atomically; a second request for the same slot gets
    400 SLOT_UNAVAILABLE.
    """
    try:
        booking = await asyncio.to_thread(
            booking_service.create,
            user_id=payload.user_id,
            creator_id=payload.creator_id,
            time_slot_id=payload.time_slot_id,
            message=payload.message,
            expected_amount=payload.total_amount,
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/user/{user_id}", response_model=List[BookingDetailResponse])
async def list_user_bookings(
    user_id: int,
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingDetailResponse]:
    try:
        details = await asyncio.to_thread(booking_service.list_user_bookings, user_id)
        return [BookingDetailResponse.from_details(item) for item in details]
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, booking_id)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: int,
    payload: Optional[BookingCancelRequest] = Body(None),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """Cancel a pending or payment-pending booking; its slot becomes bookable again."""
    try:
        booking = await asyncio.to_thread(
            booking_service.cancel, booking_id, payload.reason if payload else None
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)
