# backend/creatorcall/repositories/sql_record_store.py
"""
Durable record store backed by SQLAlchemy.

One store wraps one session (one request). Writes are flushed immediately and
committed when the outermost ``transaction()`` block exits.
"""

from contextlib import contextmanager
from datetime import datetime
import logging
from typing import Any, Iterator, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.booking import Booking
from ..models.creator import Creator
from ..models.time_slot import TimeSlot
from ..models.user import User
from .base_repository import BaseRepository
from .record_store import RecordStore

logger = logging.getLogger(__name__)


class SqlAlchemyRecordStore(RecordStore):
    """RecordStore implementation over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db
        self.users = BaseRepository(db, User)
        self.creators = BaseRepository(db, Creator)
        self.time_slots = BaseRepository(db, TimeSlot)
        self.bookings = BaseRepository(db, Booking)
        self._depth = 0

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        if self._depth:
            # Inner blocks join the outer unit; only the outermost commits.
            self._depth += 1
            try:
                yield self.db
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            with self.bookings.transaction() as session:
                yield session
        finally:
            self._depth = 0

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        return self.users.get_by_id(user_id)

    def get_user_by_fid(self, fid: int) -> Optional[User]:
        return self.users.find_one_by(fid=fid)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.users.find_one_by(username=username)

    def create_user(self, **fields: Any) -> User:
        return self.users.create(**fields)

    def update_user(self, user_id: int, **fields: Any) -> Optional[User]:
        return self.users.update(user_id, **fields)

    # Creators

    def get_creator(self, creator_id: int) -> Optional[Creator]:
        return self.creators.get_by_id(creator_id)

    def get_creator_by_user_id(self, user_id: int) -> Optional[Creator]:
        return self.creators.find_one_by(user_id=user_id)

    def list_creators(self, category: Optional[str] = None) -> List[Creator]:
        query = self.creators._build_query().filter(Creator.is_active.is_(True))
        if category:
            query = query.filter(Creator.category == category)
        return self.creators._execute_query(query.order_by(Creator.id))

    def create_creator(self, **fields: Any) -> Creator:
        return self.creators.create(**fields)

    def update_creator(self, creator_id: int, **fields: Any) -> Optional[Creator]:
        return self.creators.update(creator_id, **fields)

    # Time slots

    def get_time_slot(self, time_slot_id: int) -> Optional[TimeSlot]:
        return self.time_slots.get_by_id(time_slot_id)

    def list_available_time_slots(
        self,
        creator_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[TimeSlot]:
        query = self.time_slots._build_query().filter(
            TimeSlot.creator_id == creator_id,
            TimeSlot.is_available.is_(True),
        )
        if start is not None:
            query = query.filter(TimeSlot.start_time >= start)
        if end is not None:
            query = query.filter(TimeSlot.start_time <= end)
        return self.time_slots._execute_query(query.order_by(TimeSlot.start_time, TimeSlot.id))

    def create_time_slot(self, **fields: Any) -> TimeSlot:
        return self.time_slots.create(**fields)

    def claim_time_slot(self, time_slot_id: int) -> bool:
        # Conditional UPDATE: the row lock serializes concurrent claimers and
        # only one of them can see is_available = true.
        stmt = (
            update(TimeSlot)
            .where(TimeSlot.id == time_slot_id, TimeSlot.is_available.is_(True))
            .values(is_available=False)
            .execution_options(synchronize_session="fetch")
        )
        try:
            result = self.db.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Error claiming time slot %s: %s", time_slot_id, exc)
            raise RepositoryException(f"Failed to claim time slot: {exc}") from exc
        return result.rowcount == 1

    def set_time_slot_availability(
        self, time_slot_id: int, is_available: bool
    ) -> Optional[TimeSlot]:
        return self.time_slots.update(time_slot_id, is_available=is_available)

    # Bookings

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        return self.bookings.get_by_id(booking_id)

    def get_booking_by_payment_reference(self, payment_reference: str) -> Optional[Booking]:
        return self.bookings.find_one_by(payment_reference=payment_reference)

    def list_bookings_for_user(self, user_id: int) -> List[Booking]:
        query = self.bookings._build_query().filter(Booking.user_id == user_id)
        return self.bookings._execute_query(query.order_by(Booking.id.desc()))

    def list_bookings_for_creator(self, creator_id: int) -> List[Booking]:
        query = self.bookings._build_query().filter(Booking.creator_id == creator_id)
        return self.bookings._execute_query(query.order_by(Booking.id.desc()))

    def create_booking(self, **fields: Any) -> Booking:
        return self.bookings.create(**fields)

    def update_booking(self, booking_id: int, **fields: Any) -> Optional[Booking]:
        return self.bookings.update(booking_id, **fields)

    def transition_booking(
        self, booking_id: int, from_status: str, to_status: str, **fields: Any
    ) -> Optional[Booking]:
        # Same conditional UPDATE as claim_time_slot, keyed on the status read by the caller.
        stmt = (
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == from_status)
            .values(status=to_status, **fields)
            .execution_options(synchronize_session="fetch")
        )
        try:
            result = self.db.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Error moving booking %s to %s: %s", booking_id, to_status, exc)
            raise RepositoryException(f"Failed to update booking status: {exc}") from exc
        if result.rowcount != 1:
            return None
        return self.bookings.get_by_id(booking_id)
