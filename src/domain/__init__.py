"""Domain models and DTOs."""

from src.domain.log import TaskLogEntry
from src.domain.task import Attachment, Priority, Tag, Task


__all__ = [
    "Attachment",
    "Priority",
    "Tag",
    "Task",
    "TaskLogEntry",
]
