# backend/creatorcall/services/dependencies.py
"""
Dependency injection functions for services.

Every service is built on the injected RecordStore. Tests override
``get_record_store`` to swap the backend.
"""

import threading
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from ..core.config import settings
from ..database import get_db
from ..repositories import InMemoryRecordStore, RecordStore, SqlAlchemyRecordStore
from .booking_service import BookingService
from .creator_service import CreatorService
from .payment_service import PaymentService
from .slot_reservation_service import SlotReservationService
from .user_service import UserService

_memory_store: Optional[InMemoryRecordStore] = None
_memory_store_lock = threading.Lock()


def get_memory_store() -> InMemoryRecordStore:
    """Process-wide in-memory store, created on first use."""
    global _memory_store
    with _memory_store_lock:
        if _memory_store is None:
            _memory_store = InMemoryRecordStore()
        return _memory_store


def get_record_store(db: Session = Depends(get_db)) -> RecordStore:
    """
    Dependency injection function for the record store.

    Usage in routes:
        store: RecordStore = Depends(get_record_store)
    """
    if settings.store_backend == "memory":
        return get_memory_store()
    return SqlAlchemyRecordStore(db)


def get_slot_reservation_service(
    store: RecordStore = Depends(get_record_store),
) -> SlotReservationService:
    return SlotReservationService(store)


def get_booking_service(
    store: RecordStore = Depends(get_record_store),
    slot_service: SlotReservationService = Depends(get_slot_reservation_service),
) -> BookingService:
    """
    Dependency injection function for BookingService.

    Usage in routes:
        booking_service: BookingService = Depends(get_booking_service)
    """
    return BookingService(store, slot_service=slot_service)


def get_payment_service(
    store: RecordStore = Depends(get_record_store),
    booking_service: BookingService = Depends(get_booking_service),
) -> PaymentService:
    return PaymentService(store, booking_service=booking_service)


def get_user_service(store: RecordStore = Depends(get_record_store)) -> UserService:
    return UserService(store)


def get_creator_service(store: RecordStore = Depends(get_record_store)) -> CreatorService:
    return CreatorService(store)
