# backend/tests/conftest.py
"""
Pytest configuration.

Sets the test environment BEFORE any creatorcall import, then provides
record store fixtures for both backends, a small booking marketplace,
and a TestClient wired to an in-memory store.
"""

import os
import sys

# CRITICAL: Set testing mode BEFORE any app imports!
os.environ["CI"] = "1"  # skip backend/.env
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["STORE_BACKEND"] = "memory"
os.environ.pop("STRIPE_SECRET_KEY", None)
os.environ.pop("STRIPE_WEBHOOK_SECRET", None)

# Add the backend directory to Python path so imports work
backend_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, backend_dir)

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from creatorcall.database import Base
from creatorcall.main import app
import creatorcall.models  # noqa: F401
from creatorcall.repositories import InMemoryRecordStore, RecordStore, SqlAlchemyRecordStore
from creatorcall.services.dependencies import get_record_store
from tests.factories.marketplace import Marketplace, build_marketplace


@pytest.fixture
def sql_engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def sql_session(sql_engine) -> Session:
    SessionLocal = sessionmaker(bind=sql_engine, expire_on_commit=False, future=True)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def sql_store(sql_session) -> SqlAlchemyRecordStore:
    return SqlAlchemyRecordStore(sql_session)


@pytest.fixture(params=["memory", "sql"])
def store(request) -> RecordStore:
    """Run a test once per record store implementation."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def marketplace(store) -> Marketplace:
    return build_marketplace(store)


@pytest.fixture
def memory_marketplace(memory_store) -> Marketplace:
    return build_marketplace(memory_store)


@pytest.fixture
def client(memory_store):
    """TestClient using an isolated in-memory record store."""
    app.dependency_overrides[get_record_store] = lambda: memory_store
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def api_marketplace(client, memory_store) -> Marketplace:
    return build_marketplace(memory_store)
