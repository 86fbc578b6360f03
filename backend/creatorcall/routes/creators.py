# backend/creatorcall/routes/creators.py
"""
Creator API Routes

Endpoints:
    GET /creators                         → List active creators (?category=)
    POST /creators                        → Opt a user in as a creator
    GET /creators/{creator_id}            → Creator with its user
    PATCH /creators/{creator_id}          → Update rate / active flag / profile
    GET /creators/{creator_id}/timeslots  → Available slots (?startDate=&endDate=)
    POST /creators/{creator_id}/timeslots → Publish a slot
    GET /creators/{creator_id}/bookings   → Bookings of a creator
"""

import asyncio
from datetime import datetime
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..core.exceptions import DomainException
from ..schemas.booking import BookingResponse
from ..schemas.creator import (
    CreatorCreate,
    CreatorResponse,
    CreatorUpdate,
    CreatorWithUserResponse,
    to_minor_units,
)
from ..schemas.time_slot import TimeSlotCreate, TimeSlotResponse
from ..schemas.user import UserResponse
from ..services.booking_service import BookingService
from ..services.creator_service import CreatorService, CreatorWithUser
from ..services.dependencies import (
    get_booking_service,
    get_creator_service,
    get_slot_reservation_service,
)
from ..services.slot_reservation_service import SlotReservationService
from ._errors import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["creators"])


def _creator_with_user(item: CreatorWithUser) -> CreatorWithUserResponse:
    response = CreatorWithUserResponse.model_validate(item.creator)
    response.user = UserResponse.model_validate(item.user) if item.user else None
    return response


@router.get("", response_model=List[CreatorWithUserResponse])
async def list_creators(
    category: Optional[str] = Query(None, max_length=100),
    creator_service: CreatorService = Depends(get_creator_service),
) -> List[CreatorWithUserResponse]:
    """List active creators, optionally filtered by category."""
    try:
        items = await asyncio.to_thread(creator_service.list_creators, category)
        return [_creator_with_user(item) for item in items]
    except DomainException as e:
        handle_domain_exception(e)


@router.post("", response_model=CreatorResponse, status_code=status.HTTP_201_CREATED)
async def create_creator(
    payload: CreatorCreate,
    creator_service: CreatorService = Depends(get_creator_service),
) -> CreatorResponse:
    """Create a creator profile. ``rate`` is given in major units."""
    try:
        creator = await asyncio.to_thread(
            creator_service.create_creator,
            user_id=payload.user_id,
            title=payload.title,
            rate=to_minor_units(payload.rate),
            duration=payload.duration,
            category=payload.category,
            timezone=payload.timezone,
        )
        return CreatorResponse.model_validate(creator)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{creator_id}", response_model=CreatorWithUserResponse)
async def get_creator(
    creator_id: int,
    creator_service: CreatorService = Depends(get_creator_service),
) -> CreatorWithUserResponse:
    try:
        item = await asyncio.to_thread(creator_service.get_creator, creator_id)
        return _creator_with_user(item)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{creator_id}", response_model=CreatorResponse)
async def update_creator(
    creator_id: int,
    payload: CreatorUpdate,
    creator_service: CreatorService = Depends(get_creator_service),
) -> CreatorResponse:
    updates = payload.model_dump(exclude_unset=True)
    if updates.get("rate") is not None:
        updates["rate"] = to_minor_units(updates["rate"])
    try:
        creator = await asyncio.to_thread(creator_service.update_creator, creator_id, **updates)
        return CreatorResponse.model_validate(creator)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{creator_id}/timeslots", response_model=List[TimeSlotResponse])
async def list_available_time_slots(
    creator_id: int,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    slot_service: SlotReservationService = Depends(get_slot_reservation_service),
) -> List[TimeSlotResponse]:
    """Available slots ordered by start; the window is inclusive on slot start."""
    try:
        slots = await asyncio.to_thread(
            slot_service.list_available, creator_id, start_date, end_date
        )
        return [TimeSlotResponse.model_validate(slot) for slot in slots]
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{creator_id}/timeslots",
    response_model=TimeSlotResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_time_slot(
    creator_id: int,
    payload: TimeSlotCreate,
    slot_service: SlotReservationService = Depends(get_slot_reservation_service),
) -> TimeSlotResponse:
    try:
        slot = await asyncio.to_thread(
            slot_service.create_time_slot, creator_id, payload.start_time, payload.end_time
        )
        return TimeSlotResponse.model_validate(slot)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{creator_id}/bookings", response_model=List[BookingResponse])
async def list_creator_bookings(
    creator_id: int,
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    try:
        bookings = await asyncio.to_thread(booking_service.list_creator_bookings, creator_id)
        return [BookingResponse.model_validate(b) for b in bookings]
    except DomainException as e:
        handle_domain_exception(e)
