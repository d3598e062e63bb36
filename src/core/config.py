"""Configuration management for the DaisyDos logbook."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # SQLite Configuration
    sqlite_db_path: str = Field(default="data/daisydos.db", description="Path to the SQLite database file")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment reported to Logfire")


# Application Constants
class Constants:
    """Application-wide constants."""

    # Retention tiers (age in whole days since completion)
    ACTIVE_RETENTION_DAYS: int = 90  # Last day a completed task stays live
    LOG_RETENTION_DAYS: int = 365  # Last day a task is archived / a log entry is kept

    # Query Defaults
    DEFAULT_RECENT_DAYS: int = 30
    DEFAULT_SEARCH_DAYS: int = 90

    # Pagination Defaults
    DEFAULT_PER_PAGE_LIMIT: int = 100  # Batch size for full-list fetches

    # Time
    SECONDS_PER_DAY: int = 86400
    SECONDS_PER_HOUR: int = 3600
    SECONDS_PER_MINUTE: int = 60


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
