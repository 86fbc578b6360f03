# backend/creatorcall/services/booking_service.py
"""
Booking Service

Owns the booking status machine:
- Creating a pending booking together with the exclusive slot claim
- Recording a payment attempt (payment_pending)
- Confirming, cancelling (with slot release) and completing bookings
- Read access for booking detail and listing endpoints
"""

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Any, List, Optional

from ..core.exceptions import (
    AmountMismatchException,
    InvalidTransitionException,
    NotFoundException,
    SlotUnavailableException,
    ValidationException,
)
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.booking import Booking, BookingStatus, PaymentMethod, can_transition
from ..models.creator import Creator
from ..models.time_slot import TimeSlot
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.record_store import RecordStore
from .base import BaseService
from .slot_reservation_service import SlotReservationService

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000


@dataclass
class BookingDetails:
    """A booking joined with the records a client needs to render it."""

    booking: Booking
    creator: Optional[Creator]
    creator_user: Optional[User]
    time_slot: Optional[TimeSlot]


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Every status change goes through ``_transition`` so that only edges of the
    status machine in ``models.booking`` can ever be written.
    """

    def __init__(
        self,
        store: RecordStore,
        slot_service: Optional[SlotReservationService] = None,
    ):
        """
        Initialize booking service.

        Args:
            store: Injected record store
            slot_service: Slot reservation service sharing the same store
        """
        super().__init__(store)
        self.slot_service = slot_service or SlotReservationService(store)

    @BaseService.measure_operation("create_booking")
    def create(
        self,
        user_id: int,
        creator_id: int,
        time_slot_id: int,
        message: Optional[str],
        expected_amount: int,
    ) -> Booking:
        """
        Claim a slot and create a pending booking for it.

        Every check that can fail without touching the store runs first; the
        claim and the insert then run in one transaction, so a failed insert
        leaves the slot available.

        Args:
            user_id: Booking user
            creator_id: Creator being booked
            time_slot_id: Slot to claim
            message: Optional note for the creator
            expected_amount: Price the client displayed, in minor units

        Returns:
            Booking in ``pending`` with total_amount snapshotted from the rate

        Raises:
            NotFoundException: Creator or user does not exist
            ValidationException: Creator inactive or slot owned by another creator
            AmountMismatchException: expected_amount differs from the current rate
            SlotUnavailableException: Slot is missing or already claimed
        """
        self.log_operation(
            "create_booking",
            user_id=user_id,
            creator_id=creator_id,
            time_slot_id=time_slot_id,
        )

        if message is not None and len(message) > MAX_MESSAGE_LENGTH:
            raise ValidationException(
                f"Message must be at most {MAX_MESSAGE_LENGTH} characters",
                details={"field": "message"},
            )

        creator = self.store.get_creator(creator_id)
        if creator is None:
            raise NotFoundException(f"Creator {creator_id} not found")
        if not creator.is_active:
            raise ValidationException(
                "Creator is not accepting bookings",
                code="CREATOR_INACTIVE",
                details={"creator_id": creator_id},
            )

        if expected_amount != creator.rate:
            raise AmountMismatchException(expected_amount, creator.rate)

        if self.store.get_user(user_id) is None:
            raise NotFoundException(f"User {user_id} not found")

        slot = self.store.get_time_slot(time_slot_id)
        if slot is None:
            raise SlotUnavailableException(time_slot_id, "Time slot does not exist")
        if slot.creator_id != creator_id:
            raise ValidationException(
                "Time slot does not belong to this creator",
                code="SLOT_CREATOR_MISMATCH",
                details={"time_slot_id": time_slot_id, "creator_id": creator_id},
            )

        with self.transaction():
            self.slot_service.claim(time_slot_id)
            booking = self.store.create_booking(
                user_id=user_id,
                creator_id=creator_id,
                time_slot_id=time_slot_id,
                message=message,
                total_amount=creator.rate,
                status=BookingStatus.PENDING.value,
            )

        prometheus_metrics.record_booking_transition("new", BookingStatus.PENDING.value)
        logger.info(f"Booking {booking.id} created for slot {time_slot_id}")
        return booking

    @BaseService.measure_operation("mark_payment_pending")
    def mark_payment_pending(
        self,
        booking_id: int,
        payment_reference: str,
        payment_method: PaymentMethod = PaymentMethod.CARD,
    ) -> Booking:
        """
        Record an initiated payment attempt.

        Raises:
            NotFoundException: Booking does not exist
            InvalidTransitionException: Booking is not pending
        """
        if not payment_reference:
            raise ValidationException("Payment reference is required")

        booking = self._get_or_404(booking_id)
        if booking.status != BookingStatus.PENDING.value:
            raise InvalidTransitionException(
                booking_id, booking.status, BookingStatus.PAYMENT_PENDING.value
            )

        with self.transaction():
            return self._transition(
                booking,
                BookingStatus.PAYMENT_PENDING,
                payment_reference=payment_reference,
                payment_method=PaymentMethod(payment_method).value,
            )

    @BaseService.measure_operation("confirm_booking")
    def confirm(
        self,
        booking_id: int,
        payment_reference: Optional[str] = None,
        payment_method: Optional[PaymentMethod] = None,
    ) -> Booking:
        """
        Confirm a booking after a verified payment.

        Allowed from ``payment_pending`` and, for out-of-band payments, from
        ``pending``. Confirming a confirmed booking returns it unchanged.
        """
        booking = self._get_or_404(booking_id)
        if booking.status == BookingStatus.CONFIRMED.value:
            logger.info(f"Booking {booking_id} already confirmed")
            return booking

        fields: dict = {"confirmed_at": utc_now()}
        if payment_reference:
            fields["payment_reference"] = payment_reference
        if payment_method is not None:
            fields["payment_method"] = PaymentMethod(payment_method).value

        try:
            with self.transaction():
                booking = self._transition(booking, BookingStatus.CONFIRMED, **fields)
        except InvalidTransitionException:
            latest = self._get_or_404(booking_id)
            if latest.status == BookingStatus.CONFIRMED.value:
                logger.info(f"Booking {booking_id} confirmed concurrently")
                return latest
            raise

        self.log_operation("confirm_booking", booking_id=booking_id)
        return booking

    @BaseService.measure_operation("cancel_booking")
    def cancel(self, booking_id: int, reason: Optional[str] = None) -> Booking:
        """
        Cancel a pending or payment-pending booking and release its slot.

        Cancelling a cancelled booking returns it unchanged.
        """
        booking = self._get_or_404(booking_id)
        if booking.status == BookingStatus.CANCELLED.value:
            return booking

        try:
            with self.transaction():
                booking = self._transition(
                    booking, BookingStatus.CANCELLED, cancelled_at=utc_now()
                )
                # Only the caller that won the status change frees the slot
                self.slot_service.release(booking.time_slot_id)
        except InvalidTransitionException:
            latest = self._get_or_404(booking_id)
            if latest.status == BookingStatus.CANCELLED.value:
                return latest
            raise

        self.log_operation("cancel_booking", booking_id=booking_id, reason=reason)
        return booking

    @BaseService.measure_operation("complete_booking")
    def complete(self, booking_id: int, now: Optional[datetime] = None) -> Booking:
        """
        Mark a confirmed booking completed once its session has ended.

        Raises:
            InvalidTransitionException: Booking is not confirmed
            ValidationException: The session end is still in the future
        """
        booking = self._get_or_404(booking_id)
        if not can_transition(booking.status, BookingStatus.COMPLETED.value):
            raise InvalidTransitionException(
                booking_id, booking.status, BookingStatus.COMPLETED.value
            )

        now = ensure_utc(now) or utc_now()
        slot = self.store.get_time_slot(booking.time_slot_id)
        if slot is not None and ensure_utc(slot.end_time) > now:
            raise ValidationException(
                "Session has not ended yet",
                code="SESSION_NOT_ENDED",
                details={"booking_id": booking_id},
            )

        with self.transaction():
            return self._transition(booking, BookingStatus.COMPLETED, completed_at=now)

    # Queries

    def get_booking(self, booking_id: int) -> Booking:
        return self._get_or_404(booking_id)

    def get_booking_by_payment_reference(self, payment_reference: str) -> Optional[Booking]:
        return self.store.get_booking_by_payment_reference(payment_reference)

    @BaseService.measure_operation("list_user_bookings")
    def list_user_bookings(self, user_id: int) -> List[BookingDetails]:
        """Bookings of a user, newest first, with creator and slot details."""
        return [self._with_details(b) for b in self.store.list_bookings_for_user(user_id)]

    @BaseService.measure_operation("list_creator_bookings")
    def list_creator_bookings(self, creator_id: int) -> List[Booking]:
        if self.store.get_creator(creator_id) is None:
            raise NotFoundException(f"Creator {creator_id} not found")
        return self.store.list_bookings_for_creator(creator_id)

    # Private helpers

    def _get_or_404(self, booking_id: int) -> Booking:
        booking = self.store.get_booking(booking_id)
        if booking is None:
            raise NotFoundException(f"Booking {booking_id} not found")
        return booking

    def _transition(self, booking: Booking, target: BookingStatus, **fields: Any) -> Booking:
        current = booking.status
        if not can_transition(current, target.value):
            raise InvalidTransitionException(booking.id, current, target.value)

        updated = self.store.transition_booking(booking.id, current, target.value, **fields)
        if updated is None:
            # Lost the race: someone moved the booking after we read it.
            latest = self._get_or_404(booking.id)
            raise InvalidTransitionException(booking.id, latest.status, target.value)

        prometheus_metrics.record_booking_transition(current, target.value)
        logger.info(f"Booking {booking.id}: {current} -> {target.value}")
        return updated

    def _with_details(self, booking: Booking) -> BookingDetails:
        creator = self.store.get_creator(booking.creator_id)
        return BookingDetails(
            booking=booking,
            creator=creator,
            creator_user=self.store.get_user(creator.user_id) if creator else None,
            time_slot=self.store.get_time_slot(booking.time_slot_id),
        )
