"""Configuration management for kidstreak."""

from enum import StrEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ResetPolicy(StrEnum):
    """What the daily reset does to each task."""

    CLEAR_DONE = "clear_done"
    CLEAR_DONE_AND_DEACTIVATE = "clear_done_and_deactivate"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # SQLite Configuration
    sqlite_db_path: str = Field(default="./kidstreak.db", description="Path to the SQLite database file")

    # Daily Cycle Configuration
    timezone: str = Field(default="America/Chicago", description="IANA timezone that defines the calendar day")
    reset_policy: ResetPolicy = Field(
        default=ResetPolicy.CLEAR_DONE_AND_DEACTIVATE,
        description="Whether the daily reset only clears completion or also deactivates tasks",
    )

    # Access Configuration
    app_password: str | None = Field(default=None, description="Shared app password (open access when unset)")

    # First-run Configuration
    seed_demo_data: bool = Field(default=True, description="Insert demo kids and tasks into an empty database")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="production", description="Deployment environment name")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA zone."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            msg = f"Unknown timezone: {v}"
            raise ValueError(msg) from e
        return v

    @property
    def auth_enabled(self) -> bool:
        """Whether API calls require a bearer token."""
        return bool(self.app_password)


# Application Constants
class Constants:
    """Application-wide constants."""

    # Calendar arithmetic
    MS_PER_DAY: int = 86_400_000
    DATE_FORMAT: str = "%Y-%m-%d"

    # HTTP Status Codes
    HTTP_NOT_FOUND: int = 404
    HTTP_SERVICE_UNAVAILABLE: int = 503

    # Pagination Defaults
    DEFAULT_PER_PAGE_LIMIT: int = 1000

    # Auth token derivation when no password is configured
    OPEN_ACCESS_SECRET: str = "open-access"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
