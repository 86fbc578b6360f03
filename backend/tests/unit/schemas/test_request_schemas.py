"""Request/response schema behavior: camelCase, strictness, UTC and money."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from pydantic import ValidationError
import pytest

from creatorcall.schemas.booking import BookingCreate
from creatorcall.schemas.creator import CreatorCreate, to_minor_units
from creatorcall.schemas.payment import ConfirmCryptoPaymentRequest, CreatePaymentIntentRequest
from creatorcall.schemas.time_slot import TimeSlotCreate, TimeSlotResponse


def test_camel_case_and_snake_case_input():
    by_alias = BookingCreate.model_validate(
        {"userId": 1, "creatorId": 2, "timeSlotId": 3, "totalAmount": 100}
    )
    by_name = BookingCreate(user_id=1, creator_id=2, time_slot_id=3, total_amount=100)
    assert by_alias == by_name
    assert by_alias.model_dump(by_alias=True)["timeSlotId"] == 3


def test_extra_fields_are_forbidden():
    with pytest.raises(ValidationError):
        BookingCreate.model_validate(
            {"userId": 1, "creatorId": 2, "timeSlotId": 3, "totalAmount": 100, "status": "x"}
        )


def test_strings_are_stripped():
    request = ConfirmCryptoPaymentRequest.model_validate(
        {"bookingId": 1, "transactionHash": "  0xabc ", "walletAddress": "0xdef"}
    )
    assert request.transaction_hash == "0xabc"


def test_payment_method_defaults_to_card():
    assert CreatePaymentIntentRequest(booking_id=1).payment_method.value == "card"
    with pytest.raises(ValidationError):
        CreatePaymentIntentRequest.model_validate({"bookingId": 1, "paymentMethod": "cash"})


@pytest.mark.parametrize(
    "amount,expected",
    [(Decimal("150"), 15000), (Decimal("120.50"), 12050), (Decimal("0.005"), 1)],
)
def test_to_minor_units(amount, expected):
    assert to_minor_units(amount) == expected


def test_creator_rate_precision():
    with pytest.raises(ValidationError):
        CreatorCreate(user_id=1, title="t", rate=Decimal("1.234"), duration=30, category="c")


def test_time_slot_times_are_utc():
    start = datetime(2024, 1, 3, 10, 0, tzinfo=timezone(timedelta(hours=-5)))
    slot = TimeSlotCreate(start_time=start, end_time=start + timedelta(minutes=30))
    assert slot.start_time == datetime(2024, 1, 3, 15, 0, tzinfo=timezone.utc)
    assert slot.start_time.tzinfo == timezone.utc


def test_time_slot_order():
    start = datetime(2024, 1, 3, 10, 0, tzinfo=timezone.utc)
    with pytest.raises(ValidationError):
        TimeSlotCreate(start_time=start, end_time=start)


def test_naive_response_times_are_read_as_utc():
    naive = datetime(2024, 1, 3, 10, 0)
    response = TimeSlotResponse(
        id=1, creator_id=2, start_time=naive, end_time=naive + timedelta(hours=1), is_available=True
    )
    assert response.start_time.tzinfo == timezone.utc
    assert response.model_dump(mode="json", by_alias=True)["startTime"].endswith("Z")
