# backend/creatorcall/main.py
"""
FastAPI application for the creator booking marketplace.

All routes are mounted under /api.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import is_running_tests, settings
from .database import SessionLocal
from .errors import register_error_handlers
from .init_db import create_tables, seed_demo_data
from .repositories import SqlAlchemyRecordStore
from .routes import bookings, creators, health, payments, prometheus, users
from .services.dependencies import get_memory_store

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def _prepare_store() -> None:
    if settings.store_backend == "memory":
        if settings.seed_demo_data:
            seed_demo_data(get_memory_store())
        return

    create_tables()
    if settings.seed_demo_data:
        db = SessionLocal()
        try:
            seed_demo_data(SqlAlchemyRecordStore(db))
        finally:
            db.close()


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info("creatorcall API starting up...")
    logger.info(f"Environment: {settings.environment}, store backend: {settings.store_backend}")
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")
    else:
        _prepare_store()
    yield
    logger.info("creatorcall API shutting down...")


app = FastAPI(
    title="creatorcall API",
    description="Book paid sessions with creators",
    version="1.0.0",
    lifespan=app_lifespan,
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PATCH"],
    allow_headers=["*"],
)

api = APIRouter(prefix="/api")
api.include_router(health.router, prefix="/health")
api.include_router(users.router, prefix="/users")
api.include_router(creators.router, prefix="/creators")
api.include_router(bookings.router, prefix="/bookings")
api.include_router(payments.router)
api.include_router(prometheus.router, prefix="/metrics")

app.include_router(api)
