# backend/creatorcall/routes/payments.py
"""
Payment API Routes

Endpoints:
    POST /create-payment-intent   → Start a card or wallet payment for a booking
    POST /confirm-payment         → Re-check a card PaymentIntent and settle the booking
    POST /confirm-crypto-payment  → Confirm from a client-submitted wallet transaction
    POST /webhooks/stripe         → Reconcile Stripe payment_intent events
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..core.exceptions import DomainException
from ..schemas.payment import (
    ConfirmCryptoPaymentRequest,
    ConfirmPaymentRequest,
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
    PaymentStatusResponse,
    WebhookResponse,
)
from ..services.dependencies import get_payment_service
from ..services.payment_service import PaymentService
from ._errors import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    payload: CreatePaymentIntentRequest,
    payment_service: PaymentService = Depends(get_payment_service),
) -> PaymentIntentResponse:
    """
    Start a payment for a pending booking.

    Card payments return the Stripe client secret and move the booking to
    payment_pending. Wallet payments return the amount and chain to pay on.
    """
    try:
        initiation = await asyncio.to_thread(
            payment_service.initiate_payment,
            payload.booking_id,
            payload.payment_method,
            payload.amount,
        )
    except DomainException as e:
        handle_domain_exception(e)

    return PaymentIntentResponse(
        payment_method=initiation.method,
        status=initiation.status,
        booking_id=payload.booking_id,
        amount=initiation.amount,
        client_secret=initiation.client_secret,
        payment_intent_id=initiation.reference,
        chain_id=initiation.details.get("chainId"),
    )


@router.post("/confirm-payment", response_model=PaymentStatusResponse)
async def confirm_payment(
    payload: ConfirmPaymentRequest,
    payment_service: PaymentService = Depends(get_payment_service),
) -> PaymentStatusResponse:
    """Confirm a card booking once Stripe reports the intent succeeded."""
    try:
        outcome = await asyncio.to_thread(
            payment_service.confirm_card_payment,
            payload.payment_intent_id,
            payload.booking_id,
        )
    except DomainException as e:
        handle_domain_exception(e)

    return PaymentStatusResponse(
        success=outcome.success,
        status=outcome.status,
        booking_id=outcome.booking.id if outcome.booking else None,
    )


@router.post("/confirm-crypto-payment", response_model=PaymentStatusResponse)
async def confirm_crypto_payment(
    payload: ConfirmCryptoPaymentRequest,
    payment_service: PaymentService = Depends(get_payment_service),
) -> PaymentStatusResponse:
    """
    Confirm a booking paid from a wallet.

    The transaction hash is not verified on-chain.
    """
    try:
        outcome = await asyncio.to_thread(
            payment_service.confirm_wallet_payment,
            payload.booking_id,
            payload.transaction_hash,
            payload.wallet_address,
        )
    except DomainException as e:
        handle_domain_exception(e)

    return PaymentStatusResponse(
        success=outcome.success,
        status=outcome.status,
        booking_id=payload.booking_id,
    )


@router.post("/webhooks/stripe", response_model=WebhookResponse)
async def handle_stripe_webhook(
    request: Request,
    payment_service: PaymentService = Depends(get_payment_service),
) -> WebhookResponse:
    """
    Handle Stripe webhook events.

    Note:
        This endpoint has no authentication as it uses webhook signature verification
    """
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")
    if not sig_header:
        logger.warning("Webhook received without signature")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No signature")

    try:
        result = await asyncio.to_thread(
            payment_service.handle_stripe_webhook, payload, sig_header
        )
    except DomainException as e:
        handle_domain_exception(e)

    return WebhookResponse(**result)
