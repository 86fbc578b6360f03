# backend/creatorcall/routes/health.py
"""
Health check endpoint for monitoring and load balancer probes.
"""

from datetime import datetime, timezone
import logging

from fastapi import APIRouter
from pydantic import BaseModel

from ..core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    service: str
    environment: str
    store_backend: str
    timestamp: str


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns basic health status. Does not touch the record store.
    """
    return HealthResponse(
        status="healthy",
        service="creatorcall-api",
        environment=settings.environment,
        store_backend=settings.store_backend,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
