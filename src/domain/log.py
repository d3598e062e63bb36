"""Logbook entry model: the archived snapshot of a completed task."""

import json
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.config import Constants
from src.domain.task import Priority, UtcDatetime


class TaskLogEntry(BaseModel):
    """Immutable snapshot of a completed task kept in the logbook.

    Holds copied values only. Nothing here refers back to a live task, tag or
    parent, so an entry stays valid after all of those are deleted.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Unique log entry ID")
    original_task_id: str = Field(..., description="ID the task had while it was live")
    title: str = Field(..., description="Task title at archival time")
    task_description: str = Field(default="", description="Task description at archival time")
    completed_date: UtcDatetime = Field(..., description="When the task was completed")
    created_date: UtcDatetime = Field(..., description="When the task was created")
    due_date: UtcDatetime | None = Field(default=None, description="Due date, if the task had one")
    priority: Priority = Field(default=Priority.NONE, description="Task priority")
    was_overdue: bool = Field(default=False, description="Completed after its due date")
    subtask_count: int = Field(default=0, description="Number of subtasks at archival time")
    completed_subtask_count: int = Field(default=0, description="Completed subtasks at archival time")
    was_subtask: bool = Field(default=False, description="Whether the task had a parent")
    parent_task_title: str | None = Field(default=None, description="Title of the parent task, if any")
    root_task_id: str | None = Field(default=None, description="Original ID of the root a subtask was archived with")
    tag_names: tuple[str, ...] = Field(default=(), description="Tag names copied at archival time")
    completion_duration: timedelta | None = Field(default=None, description="Completion minus creation")

    @field_validator("tag_names", mode="before")
    @classmethod
    def _decode_tag_names(cls, value: Any) -> Any:
        # Stored as a JSON array
        if isinstance(value, str):
            return json.loads(value) if value else ()
        return value

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "TaskLogEntry":
        """Build an entry from a task_logs row."""
        return cls.model_validate(record)

    def to_record(self) -> dict[str, Any]:
        """Serialize for the task_logs collection."""
        return {
            "id": self.id,
            "original_task_id": self.original_task_id,
            "title": self.title,
            "task_description": self.task_description,
            "completed_date": self.completed_date,
            "created_date": self.created_date,
            "due_date": self.due_date,
            "priority": self.priority,
            "was_overdue": self.was_overdue,
            "subtask_count": self.subtask_count,
            "completed_subtask_count": self.completed_subtask_count,
            "was_subtask": self.was_subtask,
            "parent_task_title": self.parent_task_title,
            "root_task_id": self.root_task_id,
            "tag_names": list(self.tag_names),
            "completion_duration": (
                self.completion_duration.total_seconds() if self.completion_duration is not None else None
            ),
        }

    @property
    def display_title(self) -> str:
        return self.title or "Untitled Task"

    @property
    def completion_duration_formatted(self) -> str:
        """Short human form of the completion duration, e.g. "3d 4h", "5h" or "12m"."""
        if self.completion_duration is None:
            return "N/A"

        total_seconds = int(self.completion_duration.total_seconds())
        days = total_seconds // Constants.SECONDS_PER_DAY
        hours = (total_seconds % Constants.SECONDS_PER_DAY) // Constants.SECONDS_PER_HOUR

        if days > 0:
            return f"{days}d {hours}h"
        if hours > 0:
            return f"{hours}h"
        return f"{total_seconds // Constants.SECONDS_PER_MINUTE}m"

    def formatted_completed_date(self, now: datetime | None = None) -> str:
        """Completion date relative to ``now``: "Today", "Yesterday", "Mar 4" or "Mar 4, 2025"."""
        now = now or datetime.now(UTC)
        completed = self.completed_date
        if completed.tzinfo is not None and now.tzinfo is not None:
            completed = completed.astimezone(now.tzinfo)

        days_ago = (now.date() - completed.date()).days
        if days_ago == 0:
            return "Today"
        if days_ago == 1:
            return "Yesterday"
        if completed.year == now.year:
            return f"{completed:%b} {completed.day}"
        return f"{completed:%b} {completed.day}, {completed.year}"
