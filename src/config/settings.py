"""
Application settings - pydantic-settings configuration.

This module defines application configuration using pydantic-settings
for environment variable loading with validation and defaults.

Secrets are required: a missing JWT signing key or mail token aborts
startup instead of falling back to a generated value.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database configuration
    database_url: str = Field(..., min_length=1)
    pool_min_size: int = 2  # Minimum connections in pool
    pool_max_size: int = 10  # Maximum connections in pool

    # Outbound mail
    email_auth_token: str = Field(..., min_length=1)
    email_dkim_private_key: str | None = None
    email_api_url: str = "https://email.riskymh.workers.dev"
    email_transport: Literal["http", "console"] = "http"

    # Session signing
    jwt_token: str = Field(..., min_length=1)
    session_ttl_days: int = 30

    # Push notifications
    web_notifications_private_key: str = Field(..., min_length=1)
    notifications_public_key: str = Field(..., min_length=1)

    # Object storage (optional)
    s3_key_id: str | None = None
    s3_secret_access_key: str | None = None
    s3_url: str | None = None

    # Product identity
    app_url: str = Field(..., min_length=1)
    mail_domain: str = "emailthing.xyz"
    system_sender: str = "system@emailthing.dev"
    contact_address: str = "contact@emailthing.xyz"

    # Security settings
    bcrypt_cost: int = Field(default=10, ge=10)

    # Outbox delivery
    outbox_max_attempts: int = 5
    outbox_batch_size: int = 20
    outbox_retry_delay_seconds: int = 60
    outbox_poll_interval_seconds: float = 15.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
