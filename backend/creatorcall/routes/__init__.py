# All application routes are mounted under /api in main.py
from . import (
    bookings as bookings,
    creators as creators,
    health as health,
    payments as payments,
    prometheus as prometheus,
    users as users,
)
