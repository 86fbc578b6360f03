"""
Booking endpoints through the FastAPI app with an in-memory store.
"""

import pytest

from tests.factories.marketplace import SLOT_START


def _book(client, **overrides):
    body = {"userId": 7, "creatorId": 2, "timeSlotId": 5, "message": "hi", "totalAmount": 15000}
    body.update(overrides)
    return client.post("/api/bookings", json=body)


class TestCreateBooking:
    def test_creates_pending_booking(self, client, api_marketplace):
        response = _book(client)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["totalAmount"] == 15000
        assert data["timeSlotId"] == 5
        assert data["createdAt"].endswith("Z") or data["createdAt"].endswith("+00:00")

        slots = client.get("/api/creators/2/timeslots").json()
        assert slots == []

    def test_same_slot_twice(self, client, api_marketplace):
        assert _book(client).status_code == 201
        response = _book(client)

        assert response.status_code == 400
        assert response.json()["code"] == "SLOT_UNAVAILABLE"

    def test_amount_mismatch(self, client, api_marketplace):
        response = _book(client, totalAmount=10000)

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "AMOUNT_MISMATCH"
        assert body["errors"] == {"expected_amount": 10000, "actual_amount": 15000}
        assert api_marketplace.store.get_time_slot(5).is_available is True

    def test_unknown_creator(self, client, api_marketplace):
        response = _book(client, creatorId=404)
        assert response.status_code == 404
        assert response.json()["title"] == "Not Found"

    def test_missing_field(self, client, api_marketplace):
        response = client.post("/api/bookings", json={"userId": 7, "creatorId": 2})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert "timeSlotId" in body["detail"]
        assert "totalAmount" in body["detail"]

    def test_unknown_field_is_rejected(self, client, api_marketplace):
        response = _book(client, status="confirmed")
        assert response.status_code == 400


class TestReadBookings:
    def test_get_booking(self, client, api_marketplace):
        booking_id = _book(client).json()["id"]
        response = client.get(f"/api/bookings/{booking_id}")

        assert response.status_code == 200
        assert response.json()["id"] == booking_id

    def test_get_unknown_booking(self, client, api_marketplace):
        response = client.get("/api/bookings/404")
        assert response.status_code == 404
        assert response.json()["instance"] == "/api/bookings/404"

    def test_user_bookings_embed_creator_and_slot(self, client, api_marketplace):
        _book(client)
        response = client.get("/api/bookings/user/7")

        assert response.status_code == 200
        [item] = response.json()
        assert item["creator"]["title"] == "Founder, CryptoUX"
        assert item["creator"]["user"]["username"] == "sarahc.eth"
        assert item["timeSlot"]["startTime"].startswith(SLOT_START.strftime("%Y-%m-%dT%H:%M"))

    def test_creator_bookings(self, client, api_marketplace):
        booking_id = _book(client).json()["id"]
        response = client.get("/api/creators/2/bookings")
        assert [b["id"] for b in response.json()] == [booking_id]


class TestCancelBooking:
    def test_cancel_releases_slot(self, client, api_marketplace):
        booking_id = _book(client).json()["id"]
        response = client.post(f"/api/bookings/{booking_id}/cancel", json={"reason": "conflict"})

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["cancelledAt"] is not None
        assert [s["id"] for s in client.get("/api/creators/2/timeslots").json()] == [5]

    def test_cancel_without_body(self, client, api_marketplace):
        booking_id = _book(client).json()["id"]
        response = client.post(f"/api/bookings/{booking_id}/cancel")
        assert response.status_code == 200

    def test_confirmed_booking_cannot_be_cancelled(self, client, api_marketplace):
        booking_id = _book(client).json()["id"]
        with api_marketplace.store.transaction():
            api_marketplace.store.update_booking(booking_id, status="confirmed")

        response = client.post(f"/api/bookings/{booking_id}/cancel")
        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_TRANSITION"


@pytest.mark.parametrize("path", ["/api/bookings/abc", "/api/bookings/user/abc"])
def test_non_integer_ids(client, path):
    assert client.get(path).status_code == 400
