"""ORM models; importing this package registers every table on ``Base.metadata``."""

from .booking import Booking, BookingStatus, PaymentMethod
from .creator import Creator
from .time_slot import TimeSlot
from .user import User

__all__ = [
    "Booking",
    "BookingStatus",
    "Creator",
    "PaymentMethod",
    "TimeSlot",
    "User",
]
