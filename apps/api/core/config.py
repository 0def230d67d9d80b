"""Centralized application configuration via Pydantic Settings.

Loads all env vars into a typed Settings instance. The statement cutoff
lives here so it can be changed per deployment without touching the
parsers.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = Field(default="budget-email", description="Service name used in greetings and logs")
    APP_VERSION: str = Field(default="0.1.0", description="Application version")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Python log level")
    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )

    # Statement processing
    STATEMENT_CUTOFF: datetime = Field(
        default=datetime(2024, 6, 24),
        description="Transactions dated on or before this local time are ignored",
    )

    # Outbound callbacks
    OUTBOUND_TIMEOUT_SECONDS: Optional[float] = Field(
        default=None,
        description="Timeout for validation, attachment and deletion calls (unset = no timeout)",
    )

    @field_validator("STATEMENT_CUTOFF")
    @classmethod
    def _cutoff_as_local_time(cls, value: datetime) -> datetime:
        # Statement timestamps are parsed as naive local time.
        if value.tzinfo is not None:
            value = value.astimezone().replace(tzinfo=None)
        return value

    @property
    def log_level(self) -> str:
        return self.LOG_LEVEL

    @property
    def json_logs(self) -> bool:
        return self.ENVIRONMENT == "production"

    model_config = {"env_file": ".env", "extra": "ignore"}


def get_settings() -> Settings:
    """Factory for Settings, overridable in tests."""
    return Settings()


settings = get_settings()
