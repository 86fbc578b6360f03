# backend/creatorcall/services/payment_service.py
"""
Payment Service

Coordinates payment adapters with the booking lifecycle:
- initiate: start a payment and move the booking to payment_pending
- confirm (card / wallet): verify with the adapter, then confirm or cancel
- webhook: reconcile Stripe payment_intent events with booking state

Adapters are selected once per call by PaymentMethod; nothing below this
layer branches on the payment method.
"""

from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, Optional, cast

from ..core.exceptions import (
    AmountMismatchException,
    InvalidTransitionException,
    PaymentProviderException,
    ValidationException,
)
from ..models.booking import Booking, BookingStatus, PaymentMethod
from ..repositories.record_store import RecordStore
from .base import BaseService
from .booking_service import BookingService
from .payments import CardPaymentAdapter, PaymentAdapter, PaymentInitiation, get_payment_adapter

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[PaymentMethod], PaymentAdapter]

OPEN_STATUSES = frozenset({BookingStatus.PENDING.value, BookingStatus.PAYMENT_PENDING.value})


@dataclass
class PaymentOutcome:
    """What a confirmation call did to the booking."""

    success: bool
    status: str
    booking: Optional[Booking] = None


class PaymentService(BaseService):
    """Drives bookings through payment using the configured adapters."""

    def __init__(
        self,
        store: RecordStore,
        booking_service: Optional[BookingService] = None,
        adapter_factory: AdapterFactory = get_payment_adapter,
    ):
        super().__init__(store)
        self.booking_service = booking_service or BookingService(store)
        self.adapter_factory = adapter_factory

    @BaseService.measure_operation("initiate_payment")
    def initiate_payment(
        self,
        booking_id: int,
        method: PaymentMethod,
        amount: Optional[int] = None,
    ) -> PaymentInitiation:
        """
        Start a payment for a pending booking.

        The charged amount is always the booking's snapshotted total; a client
        amount is only checked against it. If the provider call fails the
        booking is cancelled and its slot released before the error propagates.

        Raises:
            NotFoundException: Booking does not exist
            AmountMismatchException: amount differs from the booking total
            InvalidTransitionException: Booking is not pending
            PaymentProviderException: Provider call failed
            ServiceException: Provider not configured; the booking is left as is
        """
        booking = self.booking_service.get_booking(booking_id)
        if amount is not None and amount != booking.total_amount:
            raise AmountMismatchException(amount, booking.total_amount)
        if booking.status != BookingStatus.PENDING.value:
            raise InvalidTransitionException(
                booking_id, booking.status, BookingStatus.PAYMENT_PENDING.value
            )

        adapter = self.adapter_factory(method)
        try:
            initiation = adapter.initiate(booking.total_amount, booking.id)
        except PaymentProviderException:
            logger.error(f"Payment initiation failed for booking {booking_id}; cancelling")
            self.booking_service.cancel(booking_id, reason="payment_initiation_failed")
            raise

        if initiation.reference:
            self.booking_service.mark_payment_pending(booking_id, initiation.reference, method)

        self.log_operation(
            "initiate_payment",
            booking_id=booking_id,
            method=PaymentMethod(method).value,
            reference=initiation.reference,
        )
        return initiation

    @BaseService.measure_operation("confirm_card_payment")
    def confirm_card_payment(
        self, payment_intent_id: str, booking_id: Optional[int] = None
    ) -> PaymentOutcome:
        """
        Re-read a PaymentIntent and settle the booking it belongs to.

        A succeeded intent confirms the booking; a canceled intent cancels it
        and releases the slot; any other status leaves the booking untouched.
        A provider error propagates and leaves the booking unchanged.
        """
        if not payment_intent_id:
            raise ValidationException(
                "paymentIntentId is required", details={"field": "paymentIntentId"}
            )

        if booking_id is not None:
            # 404 before calling the provider
            self.booking_service.get_booking(booking_id)

        adapter = self.adapter_factory(PaymentMethod.CARD)
        verification = adapter.confirm(payment_intent_id, booking_id=booking_id)

        target_id = booking_id if booking_id is not None else verification.booking_id
        if target_id is None:
            raise ValidationException(
                "Payment intent is not linked to a booking",
                details={"payment_intent_id": payment_intent_id},
            )
        booking = self.booking_service.get_booking(target_id)

        if booking.payment_reference and booking.payment_reference != payment_intent_id:
            raise ValidationException(
                "Payment intent does not belong to this booking",
                code="PAYMENT_REFERENCE_MISMATCH",
                details={"booking_id": booking.id},
            )

        if verification.verified:
            if verification.amount is not None and verification.amount != booking.total_amount:
                raise AmountMismatchException(booking.total_amount, verification.amount)
            booking = self.booking_service.confirm(
                booking.id, payment_reference=payment_intent_id, payment_method=PaymentMethod.CARD
            )
            return PaymentOutcome(success=True, status=booking.status, booking=booking)

        if verification.failed and booking.status in OPEN_STATUSES:
            booking = self.booking_service.cancel(booking.id, reason=verification.status)

        return PaymentOutcome(success=False, status=verification.status, booking=booking)

    @BaseService.measure_operation("confirm_wallet_payment")
    def confirm_wallet_payment(
        self, booking_id: int, transaction_hash: str, wallet_address: str
    ) -> PaymentOutcome:
        """
        Confirm a booking from a client-submitted wallet transaction.

        The transaction is not looked up on-chain.
        """
        booking = self.booking_service.get_booking(booking_id)

        adapter = self.adapter_factory(PaymentMethod.WALLET)
        verification = adapter.confirm(
            transaction_hash, booking_id=booking.id, wallet_address=wallet_address
        )
        if not verification.verified:
            return PaymentOutcome(success=False, status=verification.status, booking=booking)

        booking = self.booking_service.confirm(
            booking.id, payment_reference=transaction_hash, payment_method=PaymentMethod.WALLET
        )
        return PaymentOutcome(success=True, status=booking.status, booking=booking)

    @BaseService.measure_operation("handle_stripe_webhook")
    def handle_stripe_webhook(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """
        Verify and process a Stripe webhook.

        Returns:
            Dictionary with processing result
        """
        adapter = cast(CardPaymentAdapter, self.adapter_factory(PaymentMethod.CARD))
        event = adapter.construct_webhook_event(payload, signature)
        return self.handle_webhook_event(event)

    def handle_webhook_event(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """Process an already-verified Stripe event."""
        event_type = event.get("type", "")
        self.logger.info(f"Processing webhook event: {event_type}")

        if event_type not in (
            "payment_intent.succeeded",
            "payment_intent.payment_failed",
            "payment_intent.canceled",
        ):
            self.logger.info(f"Unhandled webhook event type: {event_type}")
            return {"success": True, "event_type": event_type, "handled": False}

        intent = event["data"]["object"]
        verification = CardPaymentAdapter.verification_from_intent(intent)
        booking = self.booking_service.get_booking_by_payment_reference(verification.reference)
        if booking is None and verification.booking_id is not None:
            booking = self.store.get_booking(verification.booking_id)
        if booking is None:
            self.logger.warning(f"No booking found for payment intent {verification.reference}")
            return {"success": True, "event_type": event_type, "handled": False}

        if event_type == "payment_intent.succeeded":
            if booking.status not in OPEN_STATUSES | {BookingStatus.CONFIRMED.value}:
                self.logger.warning(
                    f"Ignoring succeeded intent for booking {booking.id} in status {booking.status}"
                )
                return {"success": True, "event_type": event_type, "handled": False}
            booking = self.booking_service.confirm(
                booking.id,
                payment_reference=verification.reference,
                payment_method=PaymentMethod.CARD,
            )
        elif booking.status in OPEN_STATUSES:
            try:
                booking = self.booking_service.cancel(booking.id, reason=event_type)
            except InvalidTransitionException as e:
                # Settled by a concurrent confirmation; nothing left to cancel.
                self.logger.warning(f"Ignoring {event_type} for booking {booking.id}: {e.message}")
                return {"success": True, "event_type": event_type, "handled": False}

        return {
            "success": True,
            "event_type": event_type,
            "handled": True,
            "booking_id": booking.id,
            "booking_status": booking.status,
        }
