"""
Database engine, session factory, and metadata shared across the application.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker

from creatorcall.core.config import settings

logger = logging.getLogger(__name__)

_DEFAULT_POOL_KWARGS: dict[str, Any] = {
    "pool_pre_ping": True,
    "future": True,
}


def build_engine_kwargs(db_url: str) -> dict[str, Any]:
    """Engine kwargs bounding how long a single store call may block."""

    kwargs = dict(_DEFAULT_POOL_KWARGS)
    timeout_ms = settings.database_statement_timeout_ms
    if db_url.startswith("sqlite"):
        # busy timeout while waiting on the SQLite write lock
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": timeout_ms / 1000}
    else:
        kwargs["connect_args"] = {
            "options": f"-c statement_timeout={timeout_ms}",
            "connect_timeout": 5,
            "application_name": "creatorcall",
        }
        kwargs["pool_timeout"] = 5
    return kwargs


def create_db_engine(db_url: str) -> Engine:
    engine = create_engine(db_url, **build_engine_kwargs(db_url))

    @event.listens_for(engine, "connect")
    def receive_connect(dbapi_connection: Any, connection_record: Any) -> None:
        connection_record.info["connect_time"] = datetime.now()
        logger.debug("Database connection established")

    return engine


engine: Engine = create_db_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base: DeclarativeMeta = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
