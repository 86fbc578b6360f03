"""
Behavior shared by every RecordStore implementation.

Each test runs against both the in-memory and the SQLAlchemy store.
"""

from datetime import timedelta

import pytest

from creatorcall.core.timezone_utils import ensure_utc
from creatorcall.models import BookingStatus
from tests.factories.marketplace import SLOT_END, SLOT_START


def _add_slot(store, creator_id, hours_from_base, available=True):
    start = SLOT_START + timedelta(hours=hours_from_base)
    with store.transaction():
        return store.create_time_slot(
            creator_id=creator_id,
            start_time=start,
            end_time=start + timedelta(minutes=30),
            is_available=available,
        )


class TestUsersAndCreators:
    def test_lookup_by_fid_and_username(self, marketplace):
        store = marketplace.store
        assert store.get_user_by_fid(77).id == 7
        assert store.get_user_by_username("sarahc.eth").id == 8
        assert store.get_user_by_fid(999999) is None
        assert store.get_user(12345) is None

    def test_update_user_wallet(self, marketplace):
        store = marketplace.store
        with store.transaction():
            updated = store.update_user(7, wallet_address="0xabc")
        assert updated.wallet_address == "0xabc"
        assert store.get_user(7).wallet_address == "0xabc"
        assert store.update_user(404, wallet_address="0x1") is None

    def test_creator_by_user_and_category_filter(self, marketplace):
        store = marketplace.store
        with store.transaction():
            other_user = store.create_user(username="alexdev.eth", fid=5678)
            store.create_creator(
                user_id=other_user.id,
                title="Senior Engineer, Base",
                rate=18000,
                duration=60,
                category="developers",
            )

        assert store.get_creator_by_user_id(8).id == 2
        assert [c.category for c in store.list_creators()] == ["designers", "developers"]
        assert [c.id for c in store.list_creators("designers")] == [2]
        assert store.list_creators("nobody") == []

    def test_inactive_creators_are_not_listed(self, marketplace):
        store = marketplace.store
        with store.transaction():
            store.update_creator(2, is_active=False)
        assert store.list_creators() == []
        # still retrievable directly
        assert store.get_creator(2).is_active is False

    def test_creator_defaults(self, store):
        with store.transaction():
            user = store.create_user(username="someone")
            creator = store.create_creator(
                user_id=user.id, title="t", rate=100, duration=30, category="c"
            )
        assert creator.is_active is True
        assert creator.timezone == "UTC"


class TestTimeSlots:
    def test_list_available_orders_by_start(self, marketplace):
        store = marketplace.store
        late = _add_slot(store, 2, 5)
        early = _add_slot(store, 2, -5)
        _add_slot(store, 2, 2, available=False)

        ids = [s.id for s in store.list_available_time_slots(2)]
        assert ids == [early.id, 5, late.id]

    def test_list_available_window_is_inclusive_on_start(self, marketplace):
        store = marketplace.store
        later = _add_slot(store, 2, 24)

        window = store.list_available_time_slots(2, SLOT_START, SLOT_START)
        assert [s.id for s in window] == [5]

        after = store.list_available_time_slots(2, start=SLOT_START + timedelta(minutes=1))
        assert [s.id for s in after] == [later.id]

        before = store.list_available_time_slots(2, end=SLOT_START + timedelta(hours=1))
        assert [s.id for s in before] == [5]

    def test_list_available_ignores_other_creators(self, marketplace):
        assert marketplace.store.list_available_time_slots(999) == []

    def test_claim_is_compare_and_set(self, marketplace):
        store = marketplace.store
        with store.transaction():
            assert store.claim_time_slot(5) is True
        with store.transaction():
            assert store.claim_time_slot(5) is False
        assert store.get_time_slot(5).is_available is False

    def test_claim_unknown_slot_fails(self, store):
        with store.transaction():
            assert store.claim_time_slot(424242) is False

    def test_set_availability(self, marketplace):
        store = marketplace.store
        with store.transaction():
            store.claim_time_slot(5)
            slot = store.set_time_slot_availability(5, True)
        assert slot.is_available is True
        assert store.set_time_slot_availability(31337, True) is None

    def test_times_round_trip_as_utc_instants(self, marketplace):
        slot = marketplace.store.get_time_slot(5)
        assert ensure_utc(slot.start_time) == SLOT_START
        assert ensure_utc(slot.end_time) == SLOT_END


class TestBookings:
    def _book(self, store, **overrides):
        fields = dict(
            user_id=7,
            creator_id=2,
            time_slot_id=5,
            message="hi",
            total_amount=15000,
        )
        fields.update(overrides)
        with store.transaction():
            return store.create_booking(**fields)

    def test_booking_defaults_to_pending(self, marketplace):
        booking = self._book(marketplace.store)
        assert booking.id is not None
        assert booking.status == BookingStatus.PENDING.value
        assert booking.created_at is not None

    def test_lookup_by_payment_reference(self, marketplace):
        store = marketplace.store
        booking = self._book(store, payment_reference="pi_123")
        assert store.get_booking_by_payment_reference("pi_123").id == booking.id
        assert store.get_booking_by_payment_reference("pi_missing") is None

    def test_lists_are_newest_first(self, marketplace):
        store = marketplace.store
        first = self._book(store)
        second = self._book(store, message="again")

        assert [b.id for b in store.list_bookings_for_user(7)] == [second.id, first.id]
        assert [b.id for b in store.list_bookings_for_creator(2)] == [second.id, first.id]
        assert store.list_bookings_for_user(8) == []

    def test_update_booking(self, marketplace):
        store = marketplace.store
        booking = self._book(store)
        with store.transaction():
            updated = store.update_booking(
                booking.id, status=BookingStatus.CONFIRMED.value, payment_reference="pi_9"
            )
        assert updated.status == "confirmed"
        assert store.get_booking(booking.id).payment_reference == "pi_9"
        assert store.update_booking(9999, status="confirmed") is None

    def test_transition_requires_expected_status(self, marketplace):
        store = marketplace.store
        booking = self._book(store)
        with store.transaction():
            moved = store.transition_booking(
                booking.id, "pending", "payment_pending", payment_reference="pi_7"
            )
        assert moved.status == "payment_pending"
        assert moved.payment_reference == "pi_7"

        with store.transaction():
            assert store.transition_booking(booking.id, "pending", "cancelled") is None
        assert store.get_booking(booking.id).status == "payment_pending"

    def test_transition_unknown_booking(self, store):
        with store.transaction():
            assert store.transition_booking(9999, "pending", "confirmed") is None


class TestTransactions:
    def test_failed_block_discards_every_write(self, marketplace):
        store = marketplace.store

        with pytest.raises(RuntimeError):
            with store.transaction():
                assert store.claim_time_slot(5) is True
                store.create_booking(
                    user_id=7, creator_id=2, time_slot_id=5, total_amount=15000
                )
                raise RuntimeError("boom")

        assert store.get_time_slot(5).is_available is True
        assert store.list_bookings_for_user(7) == []

    def test_nested_blocks_commit_with_outer(self, marketplace):
        store = marketplace.store
        with store.transaction():
            with store.transaction():
                store.claim_time_slot(5)
        assert store.get_time_slot(5).is_available is False


def test_memory_store_returns_detached_copies(memory_marketplace):
    store = memory_marketplace.store
    slot = store.get_time_slot(5)
    slot.is_available = False
    assert store.get_time_slot(5).is_available is True


def test_memory_store_rejects_unknown_fields(memory_store):
    with pytest.raises(TypeError):
        memory_store.create_user(username="x", nickname="y")
