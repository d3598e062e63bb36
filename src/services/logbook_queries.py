"""Read-side queries over completed tasks and the logbook.

Every query fetches broadly and filters in memory. Completion dates are optional
on live tasks, and date comparisons against optional columns are never pushed
down to the store's filter layer.
"""

import logging
from datetime import UTC, datetime

from src.core.config import Constants
from src.core.logging import span
from src.domain.log import TaskLogEntry
from src.domain.task import Task, ensure_utc
from src.services import retention_policy, task_service
from src.services.logbook_service import list_log_entries


logger = logging.getLogger(__name__)


def _matches(query: str, *fields: str) -> bool:
    return any(query in field.lower() for field in fields)


def _in_range(value: datetime, start_date: datetime | None, end_date: datetime | None) -> bool:
    value = ensure_utc(value)
    if start_date is not None and value < ensure_utc(start_date):
        return False
    return end_date is None or value <= ensure_utc(end_date)


async def recent_completions(
    *,
    max_age_days: int = Constants.DEFAULT_RECENT_DAYS,
    now: datetime | None = None,
) -> list[Task]:
    """Completed live tasks no older than ``max_age_days``, newest first.

    Includes subtasks as well as root tasks.
    """
    now = now or datetime.now(UTC)
    with span("logbook_queries.recent_completions"):
        tasks = await task_service.list_tasks(completed_only=True)
        recent = [
            task
            for task in tasks
            if retention_policy.is_eligible(task)
            and retention_policy.age_in_days(task.completed_date, now=now) <= max_age_days
        ]
        return sorted(recent, key=lambda task: task.completed_date, reverse=True)


async def archived_completions(*, start_date: datetime, end_date: datetime) -> list[TaskLogEntry]:
    """Log entries completed within ``[start_date, end_date]`` (inclusive), newest first."""
    with span("logbook_queries.archived_completions"):
        entries = [
            entry for entry in await list_log_entries() if _in_range(entry.completed_date, start_date, end_date)
        ]
        return sorted(entries, key=lambda entry: entry.completed_date, reverse=True)


async def search_completions(
    query: str,
    *,
    max_age_days: int = Constants.DEFAULT_SEARCH_DAYS,
    now: datetime | None = None,
) -> list[Task]:
    """Recent completed tasks whose title or description contains ``query`` (case-insensitive).

    A blank query returns all recent completions.
    """
    needle = query.strip().lower()
    recent = await recent_completions(max_age_days=max_age_days, now=now)
    if not needle:
        return recent
    return [task for task in recent if _matches(needle, task.title, task.description)]


async def search_archived_completions(
    query: str,
    *,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> list[TaskLogEntry]:
    """Log entries whose title, description or any tag name contains ``query`` (case-insensitive)."""
    needle = query.strip().lower()
    with span("logbook_queries.search_archived_completions"):
        entries = [
            entry
            for entry in await list_log_entries()
            if _in_range(entry.completed_date, start_date, end_date)
            and (not needle or _matches(needle, entry.title, entry.task_description, *entry.tag_names))
        ]
        logger.debug("Archived search", extra={"query": needle, "count": len(entries)})
        return sorted(entries, key=lambda entry: entry.completed_date, reverse=True)
