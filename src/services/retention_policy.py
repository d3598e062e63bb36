"""Retention policy: which lifecycle tier a completed task belongs to.

Pure functions; the reference instant ``now`` is always passed in.

Tiers by age (whole days elapsed since completion):
- Active:  age <= 90          task stays live
- Archive: 91 <= age <= 365   task becomes a log entry
- Purge:   age >= 366         task is deleted outright

Log entries are pruned once their age passes 365 days; subtask entries are
aged by the entry of the root they were archived with.
"""

from collections.abc import Iterable
from datetime import datetime
from enum import StrEnum

from src.core.config import Constants
from src.domain.log import TaskLogEntry
from src.domain.task import Task, ensure_utc


class RetentionTier(StrEnum):
    """Lifecycle tier of a completed root task."""

    ACTIVE = "active"
    ARCHIVE = "archive"
    PURGE = "purge"


def age_in_days(completed_date: datetime, *, now: datetime) -> int:
    """Whole days elapsed from ``completed_date`` to ``now`` (floored)."""
    return (ensure_utc(now) - ensure_utc(completed_date)).days


def classify(completed_date: datetime, *, now: datetime) -> RetentionTier:
    """Map a completion timestamp to its tier."""
    age = age_in_days(completed_date, now=now)
    if age <= Constants.ACTIVE_RETENTION_DAYS:
        return RetentionTier.ACTIVE
    if age <= Constants.LOG_RETENTION_DAYS:
        return RetentionTier.ARCHIVE
    return RetentionTier.PURGE


def is_eligible(task: Task) -> bool:
    """Only completed tasks with a completion date are ever touched."""
    return task.is_completed and task.completed_date is not None


def tier_for_task(task: Task, *, now: datetime) -> RetentionTier | None:
    """Tier of a task, or None for tasks the policy never evaluates.

    Subtasks return None: they move with their root, never on their own.
    """
    if not task.is_root or not task.is_completed or task.completed_date is None:
        return None
    return classify(task.completed_date, now=now)


def should_archive(task: Task, *, now: datetime) -> bool:
    return tier_for_task(task, now=now) == RetentionTier.ARCHIVE


def should_purge(task: Task, *, now: datetime) -> bool:
    return tier_for_task(task, now=now) == RetentionTier.PURGE


def should_prune(entry: TaskLogEntry, *, now: datetime) -> bool:
    """Log entries older than the retention window are removed."""
    return age_in_days(entry.completed_date, now=now) > Constants.LOG_RETENTION_DAYS


def prunable_entries(entries: Iterable[TaskLogEntry], *, now: datetime) -> list[TaskLogEntry]:
    """Select the log entries to prune.

    A subtask entry is aged by its root's entry and goes when the root's entry
    goes, whatever its own completion date. A subtask entry whose root entry no
    longer exists is aged on its own.
    """
    entries = list(entries)
    roots = {entry.original_task_id: entry for entry in entries if entry.root_task_id is None}

    def _anchor(entry: TaskLogEntry) -> TaskLogEntry:
        if entry.root_task_id is None:
            return entry
        return roots.get(entry.root_task_id, entry)

    return [entry for entry in entries if should_prune(_anchor(entry), now=now)]
