"""
Payment endpoints with the Stripe API patched out.
"""

from unittest.mock import MagicMock, patch

from pydantic import SecretStr
import pytest
import stripe

from creatorcall.core.config import settings
from tests.factories.marketplace import TX_HASH, WALLET


@pytest.fixture
def stripe_keys(monkeypatch):
    monkeypatch.setattr(settings, "stripe_secret_key", SecretStr("sk_test_123"))
    monkeypatch.setattr(settings, "stripe_webhook_secret", SecretStr("whsec_test"))


@pytest.fixture
def booking_id(client, api_marketplace):
    response = client.post(
        "/api/bookings",
        json={"userId": 7, "creatorId": 2, "timeSlotId": 5, "totalAmount": 15000},
    )
    assert response.status_code == 201
    return response.json()["id"]


def _booking(client, booking_id):
    return client.get(f"/api/bookings/{booking_id}").json()


def _intent(booking_id, status="succeeded", intent_id="pi_123"):
    return {
        "id": intent_id,
        "status": status,
        "amount": 15000,
        "metadata": {"bookingId": str(booking_id)},
    }


@pytest.fixture
def payment_pending(client, booking_id, stripe_keys):
    intent = MagicMock(id="pi_123", status="requires_payment_method", client_secret="cs_123")
    with patch("stripe.PaymentIntent.create", return_value=intent):
        response = client.post("/api/create-payment-intent", json={"bookingId": booking_id})
    assert response.status_code == 200
    return booking_id


class TestCreatePaymentIntent:
    def test_card_intent(self, client, booking_id, stripe_keys):
        intent = MagicMock(id="pi_123", status="requires_payment_method", client_secret="cs_123")
        with patch("stripe.PaymentIntent.create", return_value=intent) as mock_create:
            response = client.post(
                "/api/create-payment-intent", json={"bookingId": booking_id, "amount": 15000}
            )

        assert response.status_code == 200
        data = response.json()
        assert data["clientSecret"] == "cs_123"
        assert data["paymentIntentId"] == "pi_123"
        assert data["amount"] == 15000
        assert mock_create.call_args.kwargs["amount"] == 15000

        booking = _booking(client, booking_id)
        assert booking["status"] == "payment_pending"
        assert booking["paymentReference"] == "pi_123"

    def test_wallet_intent(self, client, booking_id):
        response = client.post(
            "/api/create-payment-intent",
            json={"bookingId": booking_id, "paymentMethod": "wallet"},
        )
        assert response.status_code == 200
        assert response.json()["chainId"] == 8453
        assert response.json()["paymentIntentId"] is None
        assert _booking(client, booking_id)["status"] == "pending"

    def test_amount_mismatch(self, client, booking_id, stripe_keys):
        with patch("stripe.PaymentIntent.create") as mock_create:
            response = client.post(
                "/api/create-payment-intent", json={"bookingId": booking_id, "amount": 1}
            )
        assert response.status_code == 400
        assert response.json()["code"] == "AMOUNT_MISMATCH"
        mock_create.assert_not_called()

    def test_stripe_failure_cancels_booking(self, client, booking_id, stripe_keys):
        with patch(
            "stripe.PaymentIntent.create", side_effect=stripe.APIConnectionError("timeout")
        ):
            response = client.post("/api/create-payment-intent", json={"bookingId": booking_id})

        assert response.status_code == 500
        assert response.json()["code"] == "PAYMENT_PROVIDER_ERROR"
        assert _booking(client, booking_id)["status"] == "cancelled"
        assert [s["id"] for s in client.get("/api/creators/2/timeslots").json()] == [5]

    def test_unconfigured_stripe(self, client, booking_id, monkeypatch):
        monkeypatch.setattr(settings, "stripe_secret_key", None)
        response = client.post("/api/create-payment-intent", json={"bookingId": booking_id})
        assert response.status_code == 500
        assert response.json()["code"] == "PAYMENT_NOT_CONFIGURED"
        # Misconfiguration leaves the booking and its slot claim alone
        assert _booking(client, booking_id)["status"] == "pending"
        assert client.get("/api/creators/2/timeslots").json() == []

    def test_unknown_booking(self, client, api_marketplace):
        response = client.post(
            "/api/create-payment-intent", json={"bookingId": 404, "paymentMethod": "wallet"}
        )
        assert response.status_code == 404


class TestConfirmPayment:
    def test_succeeded_intent_confirms(self, client, payment_pending):
        with patch("stripe.PaymentIntent.retrieve", return_value=_intent(payment_pending)):
            response = client.post(
                "/api/confirm-payment",
                json={"paymentIntentId": "pi_123", "bookingId": payment_pending},
            )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "status": "confirmed",
            "bookingId": payment_pending,
        }
        assert _booking(client, payment_pending)["confirmedAt"] is not None

    def test_processing_intent(self, client, payment_pending):
        with patch(
            "stripe.PaymentIntent.retrieve",
            return_value=_intent(payment_pending, status="processing"),
        ):
            response = client.post(
                "/api/confirm-payment",
                json={"paymentIntentId": "pi_123", "bookingId": payment_pending},
            )

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["status"] == "processing"
        assert _booking(client, payment_pending)["status"] == "payment_pending"

    def test_stripe_timeout_leaves_booking_unchanged(self, client, payment_pending):
        with patch(
            "stripe.PaymentIntent.retrieve", side_effect=stripe.APIConnectionError("timeout")
        ):
            response = client.post(
                "/api/confirm-payment",
                json={"paymentIntentId": "pi_123", "bookingId": payment_pending},
            )

        assert response.status_code == 500
        assert _booking(client, payment_pending)["status"] == "payment_pending"

    def test_missing_intent_id(self, client, payment_pending):
        response = client.post("/api/confirm-payment", json={"bookingId": payment_pending})
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestConfirmCryptoPayment:
    def test_wallet_payment_confirms(self, client, booking_id):
        response = client.post(
            "/api/confirm-crypto-payment",
            json={"bookingId": booking_id, "transactionHash": TX_HASH, "walletAddress": WALLET},
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        booking = _booking(client, booking_id)
        assert booking["status"] == "confirmed"
        assert booking["paymentMethod"] == "wallet"
        assert booking["paymentReference"] == TX_HASH

    def test_missing_transaction_hash(self, client, booking_id):
        response = client.post(
            "/api/confirm-crypto-payment",
            json={"bookingId": booking_id, "walletAddress": WALLET},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert "transactionHash" in body["detail"]
        assert _booking(client, booking_id)["status"] == "pending"

    def test_non_evm_transaction_confirms(self, client, booking_id):
        tx_hash = "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpjKhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW"
        response = client.post(
            "/api/confirm-crypto-payment",
            json={
                "bookingId": booking_id,
                "transactionHash": tx_hash,
                "walletAddress": "7EcDhSYGxXyscszYEp35KHN8vvw3svAuLKTzXwCFLtV",
            },
        )
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert _booking(client, booking_id)["paymentReference"] == tx_hash


class TestStripeWebhook:
    def test_missing_signature(self, client, api_marketplace):
        response = client.post("/api/webhooks/stripe", content=b"{}")
        assert response.status_code == 400
        assert response.json()["detail"] == "No signature"

    def test_bad_signature(self, client, api_marketplace, stripe_keys):
        with patch(
            "stripe.Webhook.construct_event",
            side_effect=stripe.SignatureVerificationError("bad", "t=1,v1=x"),
        ):
            response = client.post(
                "/api/webhooks/stripe", content=b"{}", headers={"stripe-signature": "t=1,v1=x"}
            )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_SIGNATURE"

    def test_succeeded_event_confirms(self, client, payment_pending):
        event = {"type": "payment_intent.succeeded", "data": {"object": _intent(payment_pending)}}
        with patch("stripe.Webhook.construct_event", return_value=event):
            response = client.post(
                "/api/webhooks/stripe", content=b"{}", headers={"stripe-signature": "t=1,v1=x"}
            )

        assert response.status_code == 200
        assert response.json()["handled"] is True
        assert response.json()["bookingStatus"] == "confirmed"
        assert _booking(client, payment_pending)["status"] == "confirmed"
