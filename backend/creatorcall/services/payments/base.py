# backend/creatorcall/services/payments/base.py
"""
Payment adapter interface.

Adapters know how to start and verify a payment with one provider. They never
read or write bookings; the PaymentService coordinator feeds their results
into the booking lifecycle.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ...models.booking import PaymentMethod


@dataclass(frozen=True)
class PaymentInitiation:
    """Result of starting a payment attempt."""

    method: PaymentMethod
    reference: Optional[str]
    status: str
    amount: int
    client_secret: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PaymentVerification:
    """Provider verdict on a payment reference."""

    method: PaymentMethod
    reference: str
    verified: bool
    status: str
    booking_id: Optional[int] = None
    amount: Optional[int] = None
    # True when the provider says the attempt can no longer succeed
    failed: bool = False


class PaymentAdapter(ABC):
    """Capability set shared by card and wallet payments."""

    method: PaymentMethod

    @abstractmethod
    def initiate(self, amount: int, booking_id: int) -> PaymentInitiation:
        """
        Start a payment of ``amount`` minor units for a booking.

        Raises:
            PaymentProviderException: Provider call failed
        """

    @abstractmethod
    def confirm(
        self,
        reference: str,
        *,
        booking_id: Optional[int] = None,
        wallet_address: Optional[str] = None,
    ) -> PaymentVerification:
        """
        Verify a payment reference for a booking.

        Args:
            reference: Provider payment id or transaction hash
            booking_id: Booking the client claims the payment belongs to, if known
            wallet_address: Payer address (wallet payments only)

        Raises:
            PaymentProviderException: Provider call failed
            ValidationException: Client-submitted proof is missing
        """
