"""Convert live tasks into logbook entries.

Relational data is flattened into plain values: tags become a list of names and
the parent becomes its title. The source task is only read, never modified.
"""

from datetime import datetime

from src.domain.log import TaskLogEntry
from src.domain.task import Task, ensure_utc


def snapshot_task(
    task: Task,
    *,
    parent_title: str | None = None,
    fallback_completed_date: datetime | None = None,
    root_task_id: str | None = None,
) -> TaskLogEntry:
    """Build the log entry for a single task (subtasks not included).

    Args:
        task: Task to snapshot
        parent_title: Title of the immediate parent, for subtasks
        fallback_completed_date: Used when the task has no completion date of
            its own, e.g. an unfinished subtask carried along with its root
        root_task_id: Original ID of the root a subtask is archived with

    Returns:
        The log entry

    Raises:
        ValueError: If no completion date is available
    """
    completed_date = task.completed_date or fallback_completed_date
    if completed_date is None:
        msg = f"Cannot archive task {task.id}: missing completion date"
        raise ValueError(msg)
    completed_date = ensure_utc(completed_date)

    return TaskLogEntry(
        original_task_id=task.id,
        title=task.title,
        task_description=task.description,
        completed_date=completed_date,
        created_date=task.created_date,
        due_date=task.due_date,
        priority=task.priority,
        was_overdue=task.due_date is not None and completed_date > task.due_date,
        subtask_count=task.subtask_count,
        completed_subtask_count=task.completed_subtask_count,
        was_subtask=task.parent_id is not None,
        parent_task_title=parent_title,
        root_task_id=root_task_id,
        tag_names=tuple(task.tag_names),
        completion_duration=completed_date - task.created_date,
    )


def snapshot_task_tree(task: Task) -> list[TaskLogEntry]:
    """Snapshot a root task and all of its subtasks, depth-first, root first."""
    root_entry = snapshot_task(task)
    entries = [root_entry]
    _snapshot_subtasks(task, root_id=task.id, completed_date=root_entry.completed_date, entries=entries)
    return entries


def _snapshot_subtasks(
    parent: Task, *, root_id: str, completed_date: datetime, entries: list[TaskLogEntry]
) -> None:
    for subtask in parent.subtasks:
        entry = snapshot_task(
            subtask,
            parent_title=parent.title,
            fallback_completed_date=completed_date,
            root_task_id=root_id,
        )
        entries.append(entry)
        _snapshot_subtasks(subtask, root_id=root_id, completed_date=entry.completed_date, entries=entries)
