"""Tests for configuration loading."""

from src.core.config import Constants, Settings


def test_defaults(monkeypatch) -> None:
    """Test Settings falls back to local defaults when nothing is configured."""
    for name in ("SQLITE_DB_PATH", "LOGFIRE_TOKEN", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)  # type: ignore[call-arg]

    assert settings.sqlite_db_path == "data/daisydos.db"
    assert settings.logfire_token is None
    assert settings.environment == "development"


def test_environment_overrides(monkeypatch) -> None:
    """Test Settings reads values from environment variables (case-insensitive)."""
    monkeypatch.setenv("SQLITE_DB_PATH", "/tmp/other.db")
    monkeypatch.setenv("environment", "production")

    settings = Settings(_env_file=None)  # type: ignore[call-arg]

    assert settings.sqlite_db_path == "/tmp/other.db"
    assert settings.environment == "production"


def test_retention_tiers_are_ordered() -> None:
    """Test the archive window sits between the active window and the log retention limit."""
    assert 0 < Constants.ACTIVE_RETENTION_DAYS < Constants.LOG_RETENTION_DAYS
    assert Constants.ACTIVE_RETENTION_DAYS == 90
    assert Constants.LOG_RETENTION_DAYS == 365

