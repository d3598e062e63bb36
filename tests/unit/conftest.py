"""Pytest configuration and fixtures for unit tests."""

from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime

import pytest

from src.domain.log import TaskLogEntry
from src.domain.task import Priority, Task
from src.services import logbook_service, task_service
from tests.unit.factories import NOW, days_ago, make_log_entry


TaskFactory = Callable[..., Awaitable[Task]]


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def task_factory(sqlite_db) -> TaskFactory:
    """Factory for persisted tasks, returned fully hydrated.

    Usage:
        task = await task_factory(title="Old", completed_days_ago=120, tags=["Work"])
    """

    async def _create_task(
        *,
        title: str = "Task",
        description: str = "",
        completed_days_ago: int | None = None,
        created_days_ago: int | None = None,
        due_days_ago: int | None = None,
        parent_id: str | None = None,
        priority: Priority = Priority.NONE,
        tags: Iterable[str] = (),
    ) -> Task:
        if created_days_ago is None:
            created_days_ago = (completed_days_ago or 0) + 5

        task = await task_service.create_task(
            title=title,
            description=description,
            priority=priority,
            due_date=days_ago(due_days_ago) if due_days_ago is not None else None,
            parent_id=parent_id,
            created_date=days_ago(created_days_ago),
        )
        for tag_name in tags:
            await task_service.tag_task(task_id=task.id, tag_name=tag_name)
        if completed_days_ago is not None:
            await task_service.complete_task(task_id=task.id, completed_date=days_ago(completed_days_ago))
        return await task_service.get_task(task_id=task.id)

    return _create_task


@pytest.fixture
def log_entry_factory(sqlite_db) -> Callable[..., Awaitable[TaskLogEntry]]:
    """Factory for persisted log entries."""

    async def _create_log_entry(**overrides) -> TaskLogEntry:
        return await logbook_service.insert_log_entry(make_log_entry(**overrides))

    return _create_log_entry
