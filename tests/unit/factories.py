"""In-memory builders and a fixed clock for unit tests."""

from datetime import UTC, datetime, timedelta

from src.domain.log import TaskLogEntry
from src.domain.task import Task


# Fixed reference instant for every age calculation in the unit tests
NOW = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


def days_ago(days: int, *, hours: int = 0) -> datetime:
    """Instant ``days`` (and ``hours``) before NOW."""
    return NOW - timedelta(days=days, hours=hours)


def make_task(**overrides) -> Task:
    """Build a Task without touching the database."""
    data = {
        "id": "1",
        "title": "Task",
        "created_date": days_ago(200),
    }
    data.update(overrides)
    return Task.model_validate(data)


def make_log_entry(**overrides) -> TaskLogEntry:
    """Build a TaskLogEntry without touching the database."""
    data = {
        "original_task_id": "42",
        "title": "Archived Task",
        "completed_date": days_ago(100),
        "created_date": days_ago(105),
    }
    data.update(overrides)
    return TaskLogEntry.model_validate(data)
