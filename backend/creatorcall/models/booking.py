# backend/creatorcall/models/booking.py
"""
Booking model.

A booking is a user's reservation of exactly one time slot plus the payment
lifecycle attached to it. ``total_amount`` is snapshotted from the creator's
rate at creation and never recalculated.

Status machine:

    pending ──> payment_pending ──> confirmed ──> completed
       │               │
       │               └──────────> cancelled
       ├──────────────────────────> confirmed
       └──────────────────────────> cancelled
"""

from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Any, Dict, FrozenSet

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text

from ..database import Base

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"
    PAYMENT_PENDING = "payment_pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentMethod(str, Enum):
    """How a booking is paid for."""

    CARD = "card"
    WALLET = "wallet"


ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset(
        {BookingStatus.PAYMENT_PENDING, BookingStatus.CONFIRMED, BookingStatus.CANCELLED}
    ),
    BookingStatus.PAYMENT_PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    # completion is driven by a post-session process, outside the payment flow
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}

TERMINAL_STATUSES: FrozenSet[BookingStatus] = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


def can_transition(current: str, target: str) -> bool:
    """Return True when ``current -> target`` is an edge of the status machine."""
    return BookingStatus(target) in ALLOWED_TRANSITIONS[BookingStatus(current)]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    creator_id = Column(Integer, ForeignKey("creators.id"), nullable=False, index=True)
    time_slot_id = Column(Integer, ForeignKey("time_slots.id"), nullable=False, index=True)

    message = Column(Text, nullable=True)
    total_amount = Column(Integer, nullable=False, comment="Minor currency units")
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)

    payment_method = Column(String(20), nullable=True)
    payment_reference = Column(
        String(255),
        nullable=True,
        index=True,
        comment="Stripe PaymentIntent id or wallet transaction hash",
    )

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=_utcnow)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'payment_pending', 'confirmed', 'cancelled', 'completed')",
            name="ck_bookings_status",
        ),
        CheckConstraint(
            "payment_method IS NULL OR payment_method IN ('card', 'wallet')",
            name="ck_bookings_payment_method",
        ),
        CheckConstraint("total_amount >= 0", name="check_total_amount_non_negative"),
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.PENDING.value

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: user={self.user_id}, creator={self.creator_id}, "
            f"slot={self.time_slot_id}, amount={self.total_amount}, status={self.status}>"
        )
