# backend/app/core/config.py
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import BRAND_NAME


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

_DEFAULT_SECRET_KEY = SecretStr("dev-only-secret-key-change-me")

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Auth
    secret_key: SecretStr = Field(
        default=_DEFAULT_SECRET_KEY,
        description="Secret key for JWT tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 hours
    admin_role_name: str = Field(default="ADMIN", alias="ADMIN_ROLE_NAME")

    # Storage
    database_url: str = Field(
        default="sqlite:///./counseling_platform.db",
        alias="DATABASE_URL",
        description="SQLAlchemy URL for the item store",
    )
    table_prefix: str = Field(
        default="why-designers",
        alias="DYNAMODB_TABLE_PREFIX",
        description="Prefix applied to every entity namespace",
    )

    # Email
    email_provider: str = Field(default="console", alias="EMAIL_PROVIDER")
    resend_api_key: Optional[str] = Field(default=None, alias="RESEND_API_KEY")
    from_email: str = Field(default=f"{BRAND_NAME} <hello@whydesigners.com>", alias="FROM_EMAIL")
    admin_notification_email: Optional[str] = Field(default=None, alias="ADMIN_EMAIL")
    async_notifications: bool = Field(
        default=False,
        alias="ASYNC_NOTIFICATIONS",
        description="Dispatch booking emails through Celery instead of inline",
    )

    # Background jobs
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")
    booking_timezone: str = Field(
        default="UTC",
        alias="BOOKING_TIMEZONE",
        description="Timezone in which bookingDate/bookingTime are expressed",
    )
    reminder_window_hours: int = Field(default=24, alias="REMINDER_WINDOW_HOURS")
    reminder_scan_interval_minutes: int = Field(default=60, alias="REMINDER_SCAN_INTERVAL_MINUTES")
    slot_lock_takeover_seconds: int = Field(
        default=120,
        alias="SLOT_LOCK_TAKEOVER_SECONDS",
        description="Age a slot lock must reach before an orphaned one may be taken over",
    )

    # Object storage (S3-compatible)
    storage_endpoint_url: str = Field(default="", alias="STORAGE_ENDPOINT_URL")
    storage_bucket: str = Field(default="", alias="STORAGE_BUCKET")
    storage_region: str = Field(default="us-east-1", alias="STORAGE_REGION")
    storage_access_key_id: str = Field(default="", alias="STORAGE_ACCESS_KEY_ID")
    storage_secret_access_key: SecretStr = Field(
        default=SecretStr(""), alias="STORAGE_SECRET_ACCESS_KEY"
    )
    storage_public_base_url: str = Field(default="", alias="STORAGE_PUBLIC_BASE_URL")

    cors_origins_raw: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("table_prefix")
    @classmethod
    def _strip_prefix(cls, value: str) -> str:
        cleaned = (value or "").strip().rstrip("-")
        return cleaned or "why-designers"

    @property
    def cors_origins(self) -> list[str]:
        return [item.strip() for item in self.cors_origins_raw.split(",") if item.strip()]

    @property
    def storage_configured(self) -> bool:
        return bool(
            self.storage_endpoint_url
            and self.storage_bucket
            and self.storage_access_key_id
            and self.storage_secret_access_key.get_secret_value()
        )

    def table_name(self, entity: str) -> str:
        """Namespace for an entity, e.g. ``why-designers-bookings``."""
        return f"{self.table_prefix}-{entity}"


settings = Settings()
