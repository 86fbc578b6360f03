# backend/creatorcall/services/payments/card.py
"""
Card payments through Stripe PaymentIntents.

The client collects card details with the returned client secret; the server
later re-reads the intent from Stripe to decide whether it succeeded.
"""

import logging
from typing import Any, Dict, Optional

import stripe

from ...core.config import settings
from ...core.exceptions import (
    PaymentProviderException,
    ServiceException,
    ValidationException,
)
from ...models.booking import PaymentMethod
from ...monitoring.prometheus_metrics import prometheus_metrics
from .base import PaymentAdapter, PaymentInitiation, PaymentVerification

logger = logging.getLogger(__name__)

SUCCEEDED = "succeeded"
FAILED_STATUSES = frozenset({"canceled"})


def configure_stripe() -> bool:
    """
    Apply API key and network bounds to the stripe module.

    Returns:
        True when a secret key is configured
    """
    if not settings.stripe_configured:
        logger.warning("Stripe secret key not configured - card payments are unavailable")
        return False

    stripe.api_key = settings.stripe_secret_key.get_secret_value()
    # The caller owns retry policy
    stripe.max_network_retries = 0
    try:
        stripe.default_http_client = stripe.http_client.RequestsClient(
            timeout=settings.stripe_timeout_seconds
        )
    except Exception as e:
        # Non-fatal if client customization isn't available
        logger.warning(f"Could not set Stripe HTTP timeout: {e}")
    return True


class CardPaymentAdapter(PaymentAdapter):
    """PaymentAdapter backed by Stripe."""

    method = PaymentMethod.CARD

    def __init__(self, currency: Optional[str] = None):
        self.currency = currency or settings.stripe_currency
        self.stripe_configured = configure_stripe()

    def initiate(self, amount: int, booking_id: int) -> PaymentInitiation:
        self._check_stripe_configured()
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=self.currency,
                metadata={"bookingId": str(booking_id)},
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as e:
            prometheus_metrics.record_payment_call(self.method.value, "initiate", "error")
            logger.error(f"Stripe error creating payment intent for booking {booking_id}: {e}")
            raise PaymentProviderException(
                f"Failed to create payment intent: {str(e)}", provider="stripe"
            ) from e

        prometheus_metrics.record_payment_call(self.method.value, "initiate", "success")
        logger.info(f"Created payment intent {intent.id} for booking {booking_id}")
        return PaymentInitiation(
            method=self.method,
            reference=intent.id,
            status=intent.status,
            amount=amount,
            client_secret=intent.client_secret,
        )

    def confirm(
        self,
        reference: str,
        *,
        booking_id: Optional[int] = None,
        wallet_address: Optional[str] = None,
    ) -> PaymentVerification:
        self._check_stripe_configured()
        try:
            intent = stripe.PaymentIntent.retrieve(reference)
        except stripe.StripeError as e:
            prometheus_metrics.record_payment_call(self.method.value, "confirm", "error")
            logger.error(f"Stripe error retrieving payment intent {reference}: {e}")
            raise PaymentProviderException(
                f"Failed to retrieve payment intent: {str(e)}", provider="stripe"
            ) from e

        verification = self.verification_from_intent(intent)
        if (
            booking_id is not None
            and verification.booking_id is not None
            and verification.booking_id != booking_id
        ):
            logger.warning(
                f"Payment intent {reference} belongs to booking {verification.booking_id}, "
                f"not {booking_id}"
            )
            verification = PaymentVerification(
                method=self.method,
                reference=reference,
                verified=False,
                status="booking_mismatch",
                booking_id=verification.booking_id,
                amount=verification.amount,
            )

        prometheus_metrics.record_payment_call(
            self.method.value, "confirm", "verified" if verification.verified else "unverified"
        )
        return verification

    @classmethod
    def verification_from_intent(cls, intent: Any) -> PaymentVerification:
        """Build a verdict from a PaymentIntent object or webhook payload dict."""
        metadata: Dict[str, Any] = dict(_field(intent, "metadata") or {})
        raw_booking_id = metadata.get("bookingId")
        try:
            booking_id = int(raw_booking_id) if raw_booking_id is not None else None
        except (TypeError, ValueError):
            booking_id = None

        status = str(_field(intent, "status") or "")
        return PaymentVerification(
            method=cls.method,
            reference=str(_field(intent, "id")),
            verified=status == SUCCEEDED,
            status=status,
            booking_id=booking_id,
            amount=_field(intent, "amount"),
            failed=status in FAILED_STATUSES,
        )

    def construct_webhook_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """
        Verify a webhook signature and parse the event.

        Raises:
            ServiceException: Webhook secret not configured
            ValidationException: Bad signature or unparseable payload
        """
        webhook_secret = settings.stripe_webhook_secret
        if not webhook_secret or not webhook_secret.get_secret_value():
            raise ServiceException("Webhook secret not configured")

        try:
            event = stripe.Webhook.construct_event(
                payload, signature, webhook_secret.get_secret_value()
            )
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Invalid webhook signature: {str(e)}")
            raise ValidationException("Invalid webhook signature", code="INVALID_SIGNATURE")
        except ValueError as e:
            logger.warning(f"Invalid webhook payload: {str(e)}")
            raise ValidationException("Invalid webhook payload", code="INVALID_PAYLOAD")

        prometheus_metrics.record_payment_call(self.method.value, "webhook", "received")
        return dict(event) if isinstance(event, dict) else event.to_dict()

    def _check_stripe_configured(self) -> None:
        # Misconfiguration, not a provider failure
        if not self.stripe_configured:
            raise ServiceException(
                "Card payments are not configured",
                code="PAYMENT_NOT_CONFIGURED",
                details={"provider": "stripe"},
            )


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)
