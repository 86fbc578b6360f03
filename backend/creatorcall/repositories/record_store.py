# backend/creatorcall/repositories/record_store.py
"""
Record Store interface.

The store exclusively owns every persisted row (users, creators, time slots,
bookings). Services receive a store by injection and never hold a returned
record longer than one request; all mutations go through store methods.

Two implementations satisfy this contract:
- SqlAlchemyRecordStore: durable, backed by a relational database
- InMemoryRecordStore: process-local, used by tests and local development
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any, List, Optional

from ..models.booking import Booking
from ..models.creator import Creator
from ..models.time_slot import TimeSlot
from ..models.user import User


class RecordStore(ABC):
    """Abstract record store shared by every request."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager[Any]:
        """
        Group several mutations into one unit.

        Everything written inside the block is committed together on normal
        exit and discarded if the block raises.
        """

    # Users

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Return the user with this id, or None."""

    @abstractmethod
    def get_user_by_fid(self, fid: int) -> Optional[User]:
        """Return the user linked to an external social id, or None."""

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        """Return the user with this username, or None."""

    @abstractmethod
    def create_user(self, **fields: Any) -> User:
        """Insert a user and return it with its generated id."""

    @abstractmethod
    def update_user(self, user_id: int, **fields: Any) -> Optional[User]:
        """Update a user; None if it does not exist."""

    # Creators

    @abstractmethod
    def get_creator(self, creator_id: int) -> Optional[Creator]:
        """Return the creator with this id, or None."""

    @abstractmethod
    def get_creator_by_user_id(self, user_id: int) -> Optional[Creator]:
        """Return the creator owned by a user, or None."""

    @abstractmethod
    def list_creators(self, category: Optional[str] = None) -> List[Creator]:
        """Active creators, optionally restricted to one category, ordered by id."""

    @abstractmethod
    def create_creator(self, **fields: Any) -> Creator:
        """Insert a creator and return it with its generated id."""

    @abstractmethod
    def update_creator(self, creator_id: int, **fields: Any) -> Optional[Creator]:
        """Update a creator; None if it does not exist."""

    # Time slots

    @abstractmethod
    def get_time_slot(self, time_slot_id: int) -> Optional[TimeSlot]:
        """Return the time slot with this id, or None."""

    @abstractmethod
    def list_available_time_slots(
        self,
        creator_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[TimeSlot]:
        """
        Available slots of a creator ordered by start time.

        Args:
            creator_id: Owning creator
            start: Inclusive lower bound on the slot start (UTC), or None
            end: Inclusive upper bound on the slot start (UTC), or None
        """

    @abstractmethod
    def create_time_slot(self, **fields: Any) -> TimeSlot:
        """Insert a time slot and return it with its generated id."""

    @abstractmethod
    def claim_time_slot(self, time_slot_id: int) -> bool:
        """
        Atomically flip an available slot to unavailable.

        Compare-and-set: returns True only for the single caller that observed
        the slot available and marked it taken. Returns False when the slot is
        missing or already taken.
        """

    @abstractmethod
    def set_time_slot_availability(
        self, time_slot_id: int, is_available: bool
    ) -> Optional[TimeSlot]:
        """Unconditionally set the availability flag; None if the slot does not exist."""

    # Bookings

    @abstractmethod
    def get_booking(self, booking_id: int) -> Optional[Booking]:
        """Return the booking with this id, or None."""

    @abstractmethod
    def get_booking_by_payment_reference(self, payment_reference: str) -> Optional[Booking]:
        """Return the booking carrying this payment reference, or None."""

    @abstractmethod
    def list_bookings_for_user(self, user_id: int) -> List[Booking]:
        """Bookings made by a user, newest first."""

    @abstractmethod
    def list_bookings_for_creator(self, creator_id: int) -> List[Booking]:
        """Bookings of a creator, newest first."""

    @abstractmethod
    def create_booking(self, **fields: Any) -> Booking:
        """Insert a booking and return it with its generated id."""

    @abstractmethod
    def update_booking(self, booking_id: int, **fields: Any) -> Optional[Booking]:
        """Update a booking; None if it does not exist."""

    @abstractmethod
    def transition_booking(
        self, booking_id: int, from_status: str, to_status: str, **fields: Any
    ) -> Optional[Booking]:
        """
        Move a booking to ``to_status`` only if it is still in ``from_status``.

        Compare-and-set like ``claim_time_slot``: of two callers that read the
        same status, at most one wins. Returns the updated booking, or None
        when the booking is missing or its status has already changed.
        """
