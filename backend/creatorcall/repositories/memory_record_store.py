# backend/creatorcall/repositories/memory_record_store.py
"""
Process-local record store.

Rows live in plain dicts keyed by store-generated sequence numbers. Every
read hands back a fresh detached model instance, so callers cannot mutate a
stored row except through the store's update methods. All access is
serialized by one re-entrant lock; ``transaction()`` holds that lock for the
whole block and restores a snapshot if the block raises.
"""

from contextlib import contextmanager
import copy
from datetime import datetime, timezone
import itertools
import logging
import threading
from typing import Any, Callable, Dict, Iterator, List, Optional, Type

from ..models.booking import Booking, BookingStatus
from ..models.creator import Creator
from ..models.time_slot import TimeSlot
from ..models.user import User
from .record_store import RecordStore

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Table:
    """Rows of one entity type plus their id sequence."""

    def __init__(self, model: Type[Any], defaults: Callable[[], Row]):
        self.model = model
        self.defaults = defaults
        self.rows: Dict[int, Row] = {}
        self.sequence = itertools.count(1)
        self.columns = [column.name for column in model.__table__.columns]

    def insert(self, fields: Row) -> Row:
        unknown = set(fields) - set(self.columns)
        if unknown:
            raise TypeError(f"Unknown {self.model.__name__} fields: {sorted(unknown)}")
        row: Row = {name: None for name in self.columns}
        row.update(self.defaults())
        row.update(fields)
        if row.get("id") is None:
            row["id"] = self._next_id()
        elif row["id"] in self.rows:
            raise ValueError(f"Duplicate {self.model.__name__} id {row['id']}")
        self.rows[row["id"]] = row
        return row

    def _next_id(self) -> int:
        while True:
            candidate = next(self.sequence)
            if candidate not in self.rows:
                return candidate

    def materialize(self, row: Optional[Row]) -> Optional[Any]:
        if row is None:
            return None
        return self.model(**copy.deepcopy(row))


class InMemoryRecordStore(RecordStore):
    """RecordStore implementation kept entirely in process memory."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users = _Table(User, lambda: {"created_at": _utcnow()})
        self._creators = _Table(Creator, lambda: {"is_active": True, "timezone": "UTC"})
        self._time_slots = _Table(TimeSlot, lambda: {"is_available": True})
        self._bookings = _Table(
            Booking, lambda: {"status": BookingStatus.PENDING.value, "created_at": _utcnow()}
        )
        self._tables = (self._users, self._creators, self._time_slots, self._bookings)

    @contextmanager
    def transaction(self) -> Iterator["InMemoryRecordStore"]:
        with self._lock:
            snapshot = [copy.deepcopy(table.rows) for table in self._tables]
            try:
                yield self
            except Exception:
                for table, rows in zip(self._tables, snapshot):
                    table.rows = rows
                logger.debug("In-memory transaction rolled back")
                raise

    # Generic helpers

    def _get(self, table: _Table, id: int) -> Optional[Any]:
        with self._lock:
            return table.materialize(table.rows.get(id))

    def _find(self, table: _Table, predicate: Callable[[Row], bool]) -> List[Row]:
        with self._lock:
            return [row for row in table.rows.values() if predicate(row)]

    def _create(self, table: _Table, fields: Row) -> Any:
        with self._lock:
            return table.materialize(table.insert(fields))

    def _update(self, table: _Table, id: int, fields: Row) -> Optional[Any]:
        with self._lock:
            row = table.rows.get(id)
            if row is None:
                return None
            for key, value in fields.items():
                if key in row and key != "id":
                    row[key] = value
            if "updated_at" in row:
                row["updated_at"] = _utcnow()
            return table.materialize(row)

    def _first(self, table: _Table, predicate: Callable[[Row], bool]) -> Optional[Any]:
        with self._lock:
            matches = sorted(self._find(table, predicate), key=lambda row: row["id"])
            return table.materialize(matches[0]) if matches else None

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        return self._get(self._users, user_id)

    def get_user_by_fid(self, fid: int) -> Optional[User]:
        return self._first(self._users, lambda row: row["fid"] == fid)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._first(self._users, lambda row: row["username"] == username)

    def create_user(self, **fields: Any) -> User:
        return self._create(self._users, fields)

    def update_user(self, user_id: int, **fields: Any) -> Optional[User]:
        return self._update(self._users, user_id, fields)

    # Creators

    def get_creator(self, creator_id: int) -> Optional[Creator]:
        return self._get(self._creators, creator_id)

    def get_creator_by_user_id(self, user_id: int) -> Optional[Creator]:
        return self._first(self._creators, lambda row: row["user_id"] == user_id)

    def list_creators(self, category: Optional[str] = None) -> List[Creator]:
        rows = self._find(
            self._creators,
            lambda row: bool(row["is_active"]) and (not category or row["category"] == category),
        )
        return [self._creators.materialize(row) for row in sorted(rows, key=lambda r: r["id"])]

    def create_creator(self, **fields: Any) -> Creator:
        return self._create(self._creators, fields)

    def update_creator(self, creator_id: int, **fields: Any) -> Optional[Creator]:
        return self._update(self._creators, creator_id, fields)

    # Time slots

    def get_time_slot(self, time_slot_id: int) -> Optional[TimeSlot]:
        return self._get(self._time_slots, time_slot_id)

    def list_available_time_slots(
        self,
        creator_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[TimeSlot]:
        def matches(row: Row) -> bool:
            if row["creator_id"] != creator_id or not row["is_available"]:
                return False
            if start is not None and row["start_time"] < start:
                return False
            if end is not None and row["start_time"] > end:
                return False
            return True

        rows = self._find(self._time_slots, matches)
        rows.sort(key=lambda row: (row["start_time"], row["id"]))
        return [self._time_slots.materialize(row) for row in rows]

    def create_time_slot(self, **fields: Any) -> TimeSlot:
        return self._create(self._time_slots, fields)

    def claim_time_slot(self, time_slot_id: int) -> bool:
        with self._lock:
            row = self._time_slots.rows.get(time_slot_id)
            if row is None or not row["is_available"]:
                return False
            row["is_available"] = False
            return True

    def set_time_slot_availability(
        self, time_slot_id: int, is_available: bool
    ) -> Optional[TimeSlot]:
        return self._update(self._time_slots, time_slot_id, {"is_available": is_available})

    # Bookings

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        return self._get(self._bookings, booking_id)

    def get_booking_by_payment_reference(self, payment_reference: str) -> Optional[Booking]:
        return self._first(
            self._bookings, lambda row: row["payment_reference"] == payment_reference
        )

    def list_bookings_for_user(self, user_id: int) -> List[Booking]:
        rows = self._find(self._bookings, lambda row: row["user_id"] == user_id)
        return [
            self._bookings.materialize(row)
            for row in sorted(rows, key=lambda r: r["id"], reverse=True)
        ]

    def list_bookings_for_creator(self, creator_id: int) -> List[Booking]:
        rows = self._find(self._bookings, lambda row: row["creator_id"] == creator_id)
        return [
            self._bookings.materialize(row)
            for row in sorted(rows, key=lambda r: r["id"], reverse=True)
        ]

    def create_booking(self, **fields: Any) -> Booking:
        return self._create(self._bookings, fields)

    def update_booking(self, booking_id: int, **fields: Any) -> Optional[Booking]:
        return self._update(self._bookings, booking_id, fields)

    def transition_booking(
        self, booking_id: int, from_status: str, to_status: str, **fields: Any
    ) -> Optional[Booking]:
        with self._lock:
            row = self._bookings.rows.get(booking_id)
            if row is None or row["status"] != from_status:
                return None
            return self._update(self._bookings, booking_id, {**fields, "status": to_status})
