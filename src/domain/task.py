"""Task domain models and enums."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


# Every stored timestamp is timezone-aware once loaded
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class Priority(StrEnum):
    """Task priority, lowest first."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Tag(BaseModel):
    """Tag data transfer object."""

    id: str = Field(..., description="Unique tag ID from database")
    name: str = Field(..., description="Tag display name")


class Attachment(BaseModel):
    """Attachment metadata (content bytes are not loaded)."""

    id: str = Field(..., description="Unique attachment ID from database")
    task_id: str = Field(..., description="Owning task ID")
    file_name: str = Field(..., description="Original file name")
    size: int = Field(default=0, description="Content size in bytes")


class Task(BaseModel):
    """Live task with its subtasks and tags loaded."""

    id: str = Field(..., description="Unique task ID from database")
    title: str = Field(..., description="Task title")
    description: str = Field(default="", description="Free-text description")
    is_completed: bool = Field(default=False, description="Whether the task is done")
    completed_date: UtcDatetime | None = Field(default=None, description="When the task was completed")
    created_date: UtcDatetime = Field(..., description="When the task was created")
    due_date: UtcDatetime | None = Field(default=None, description="Optional due date")
    priority: Priority = Field(default=Priority.NONE, description="Task priority")
    parent_id: str | None = Field(default=None, description="Parent task ID; None for root tasks")
    subtask_order: int = Field(default=0, description="Position among siblings")
    subtasks: list["Task"] = Field(default_factory=list, description="Direct subtasks, ordered")
    tags: list[Tag] = Field(default_factory=list, description="Tags applied to this task")

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def subtask_count(self) -> int:
        return len(self.subtasks)

    @property
    def completed_subtask_count(self) -> int:
        return sum(1 for subtask in self.subtasks if subtask.is_completed)

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]
