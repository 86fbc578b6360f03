# backend/creatorcall/services/payments/wallet.py
"""
Wallet (crypto) payments.

The client sends the transaction itself and reports its hash. Hashes and
addresses are accepted in whatever format the client's wallet produces, since
bookings can be paid from more than one chain. Nothing is verified on-chain:
a client can claim any hash. Treat wallet confirmations as unverified until a
chain lookup exists.
"""

import logging
from typing import Optional

from ...core.config import settings
from ...core.exceptions import ValidationException
from ...models.booking import PaymentMethod
from ...monitoring.prometheus_metrics import prometheus_metrics
from .base import PaymentAdapter, PaymentInitiation, PaymentVerification

logger = logging.getLogger(__name__)


class WalletPaymentAdapter(PaymentAdapter):
    """PaymentAdapter that accepts client-submitted transaction hashes."""

    method = PaymentMethod.WALLET

    def __init__(self, chain_id: Optional[int] = None):
        self.chain_id = chain_id if chain_id is not None else settings.wallet_chain_id

    def initiate(self, amount: int, booking_id: int) -> PaymentInitiation:
        # Nothing to create server-side; the client submits the transaction.
        prometheus_metrics.record_payment_call(self.method.value, "initiate", "success")
        return PaymentInitiation(
            method=self.method,
            reference=None,
            status="awaiting_transaction",
            amount=amount,
            details={"chainId": self.chain_id, "bookingId": booking_id},
        )

    def confirm(
        self,
        reference: str,
        *,
        booking_id: Optional[int] = None,
        wallet_address: Optional[str] = None,
    ) -> PaymentVerification:
        if booking_id is None:
            raise ValidationException("bookingId is required", details={"field": "bookingId"})
        if not reference or not reference.strip():
            raise ValidationException(
                "transactionHash is required", details={"field": "transactionHash"}
            )
        if not wallet_address or not wallet_address.strip():
            raise ValidationException(
                "walletAddress is required", details={"field": "walletAddress"}
            )

        logger.warning(
            f"Accepting wallet transaction {reference} for booking {booking_id} "
            "without on-chain verification"
        )
        prometheus_metrics.record_payment_call(self.method.value, "confirm", "verified")
        return PaymentVerification(
            method=self.method,
            reference=reference,
            verified=True,
            status="succeeded",
            booking_id=booking_id,
        )
