"""Demo data seeding."""

from datetime import datetime, timezone

from creatorcall.core.timezone_utils import ensure_utc
from creatorcall.init_db import DEMO_CREATORS, DEMO_SLOTS, create_tables, seed_demo_data
from creatorcall.repositories import SqlAlchemyRecordStore

TODAY = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_seed_creates_demo_marketplace(memory_store):
    assert seed_demo_data(memory_store, today=TODAY) == len(DEMO_CREATORS)

    creators = memory_store.list_creators()
    assert [c.rate for c in creators] == [20000, 15000, 18000]
    assert memory_store.get_user_by_username("dwr.eth").fid == 3

    slots = [s for c in creators for s in memory_store.list_available_time_slots(c.id)]
    assert len(slots) == len(DEMO_SLOTS)


def test_slots_are_local_wall_clock_times(memory_store):
    seed_demo_data(memory_store, today=TODAY)
    founder = memory_store.get_creator_by_user_id(memory_store.get_user_by_fid(3).id)

    first = memory_store.list_available_time_slots(founder.id)[0]
    # 09:00 in Los Angeles on 2024-03-02 (PST) is 17:00 UTC
    assert ensure_utc(first.start_time) == datetime(2024, 3, 2, 17, 0, tzinfo=timezone.utc)
    assert (first.end_time - first.start_time).total_seconds() == founder.duration * 60


def test_seed_is_skipped_when_present(memory_store):
    seed_demo_data(memory_store, today=TODAY)
    assert seed_demo_data(memory_store, today=TODAY) == 0
    assert len(memory_store.list_creators()) == len(DEMO_CREATORS)


def test_seed_into_sql_store(sql_engine, sql_session):
    create_tables(bind=sql_engine)
    store = SqlAlchemyRecordStore(sql_session)

    assert seed_demo_data(store, today=TODAY) == 3
    assert store.get_user_by_username("alexdev.eth").display_name == "Alex Thompson"
