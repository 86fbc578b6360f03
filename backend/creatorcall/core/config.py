# backend/creatorcall/core/config.py
import logging
import os
from pathlib import Path
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.info(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    """Application settings sourced from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(default="development", description="Deployment environment")
    log_level: str = Field(default="INFO", description="Root log level")

    # Record store
    database_url: str = Field(
        default="sqlite:///./creatorcall.db",
        description="SQLAlchemy URL for the durable record store",
    )
    database_statement_timeout_ms: int = Field(
        default=5000,
        ge=100,
        description="Upper bound for a single store statement (ms)",
    )
    store_backend: Literal["sql", "memory"] = Field(
        default="sql", description="Record store implementation to inject"
    )
    seed_demo_data: bool = Field(default=False, description="Seed demo creators on startup")

    # Card payments (Stripe)
    stripe_publishable_key: str = Field(default="", description="Stripe publishable key")
    stripe_secret_key: Optional[SecretStr] = Field(default=None, description="Stripe secret key")
    stripe_webhook_secret: Optional[SecretStr] = Field(
        default=None, description="Signing secret for /api/webhooks/stripe"
    )
    stripe_currency: str = Field(default="usd", description="Default currency for payments")
    stripe_timeout_seconds: float = Field(
        default=8.0, gt=0, description="HTTP timeout for a single Stripe call"
    )

    # Wallet payments
    wallet_chain_id: int = Field(default=8453, description="EVM chain accepted for wallet payments")

    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        level = (v or "INFO").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def stripe_configured(self) -> bool:
        return bool(self.stripe_secret_key and self.stripe_secret_key.get_secret_value())


settings = Settings()
