# backend/creatorcall/services/slot_reservation_service.py
"""
Slot Reservation Service

Lists a creator's open time slots and performs the exclusive claim/release of
a single slot. The claim is a compare-and-set delegated to the record store,
so two concurrent claims on one slot id can never both succeed.
"""

from datetime import datetime
import logging
from typing import List, Optional

from ..core.exceptions import NotFoundException, SlotUnavailableException, ValidationException
from ..core.timezone_utils import ensure_utc
from ..models.time_slot import TimeSlot
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.record_store import RecordStore
from .base import BaseService

logger = logging.getLogger(__name__)


class SlotReservationService(BaseService):
    """Availability reads plus exclusive claim/release of time slots."""

    def __init__(self, store: RecordStore):
        super().__init__(store)

    @BaseService.measure_operation("list_available_slots")
    def list_available(
        self,
        creator_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[TimeSlot]:
        """
        Available slots for a creator, ordered by start time.

        Args:
            creator_id: Creator whose slots to list
            start: Optional inclusive lower bound on slot start
            end: Optional inclusive upper bound on slot start

        Returns:
            List of available TimeSlot records (empty if none match)
        """
        start_utc = ensure_utc(start)
        end_utc = ensure_utc(end)
        if start_utc and end_utc and start_utc > end_utc:
            raise ValidationException(
                "startDate must not be after endDate",
                details={"start": start_utc.isoformat(), "end": end_utc.isoformat()},
            )
        return self.store.list_available_time_slots(creator_id, start_utc, end_utc)

    @BaseService.measure_operation("claim_slot")
    def claim(self, time_slot_id: int) -> TimeSlot:
        """
        Atomically mark a slot as taken.

        Raises:
            SlotUnavailableException: Slot is missing or already claimed
        """
        with self.transaction():
            claimed = self.store.claim_time_slot(time_slot_id)
        if not claimed:
            prometheus_metrics.record_slot_claim("unavailable")
            logger.info(f"Claim rejected for time slot {time_slot_id}")
            raise SlotUnavailableException(time_slot_id)

        prometheus_metrics.record_slot_claim("claimed")
        slot = self.store.get_time_slot(time_slot_id)
        if slot is None:
            # claim_time_slot only succeeds for an existing row
            raise SlotUnavailableException(time_slot_id)
        return slot

    @BaseService.measure_operation("release_slot")
    def release(self, time_slot_id: int) -> None:
        """Make a slot bookable again. Releasing an available slot is a no-op."""
        slot = self.store.get_time_slot(time_slot_id)
        if slot is None:
            logger.warning(f"Release requested for unknown time slot {time_slot_id}")
            return
        if slot.is_available:
            return
        with self.transaction():
            self.store.set_time_slot_availability(time_slot_id, True)
        prometheus_metrics.record_slot_claim("released")
        self.log_operation("release_slot", time_slot_id=time_slot_id)

    @BaseService.measure_operation("create_time_slot")
    def create_time_slot(self, creator_id: int, start_time: datetime, end_time: datetime) -> TimeSlot:
        """
        Publish a new bookable slot for a creator.

        Raises:
            NotFoundException: Creator does not exist
            ValidationException: end_time is not after start_time
        """
        start_utc = ensure_utc(start_time)
        end_utc = ensure_utc(end_time)
        if start_utc is None or end_utc is None or end_utc <= start_utc:
            raise ValidationException(
                "Time slot end must be after its start",
                details={"start_time": str(start_time), "end_time": str(end_time)},
            )

        if self.store.get_creator(creator_id) is None:
            raise NotFoundException(f"Creator {creator_id} not found")

        with self.transaction():
            slot = self.store.create_time_slot(
                creator_id=creator_id,
                start_time=start_utc,
                end_time=end_utc,
                is_available=True,
            )

        self.log_operation("create_time_slot", creator_id=creator_id, time_slot_id=slot.id)
        return slot
