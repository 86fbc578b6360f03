# backend/creatorcall/schemas/payment.py
"""Payment request/response schemas."""

from typing import Optional

from pydantic import Field

from ..models.booking import PaymentMethod
from ._strict_base import StrictModel, StrictRequestModel


class CreatePaymentIntentRequest(StrictRequestModel):
    booking_id: int = Field(..., ge=1)
    amount: Optional[int] = Field(None, ge=0, description="Expected amount in minor units")
    payment_method: PaymentMethod = PaymentMethod.CARD


class PaymentIntentResponse(StrictModel):
    payment_method: PaymentMethod
    status: str
    booking_id: int
    amount: int
    client_secret: Optional[str] = None
    payment_intent_id: Optional[str] = None
    chain_id: Optional[int] = None


class ConfirmPaymentRequest(StrictRequestModel):
    payment_intent_id: str = Field(..., min_length=1)
    booking_id: Optional[int] = Field(None, ge=1)


class ConfirmCryptoPaymentRequest(StrictRequestModel):
    booking_id: int = Field(..., ge=1)
    transaction_hash: str = Field(..., min_length=1)
    wallet_address: str = Field(..., min_length=1)


class PaymentStatusResponse(StrictModel):
    success: bool
    status: str
    booking_id: Optional[int] = None


class WebhookResponse(StrictModel):
    success: bool
    event_type: str
    handled: bool
    booking_id: Optional[int] = None
    booking_status: Optional[str] = None
