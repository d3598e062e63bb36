"""Task persistence plumbing: create, tag, attach, load and delete tasks.

Tasks are always returned fully hydrated (subtasks and tags loaded), so callers
such as the archival transformer can read the whole graph without further queries.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from src.core import db_client
from src.core.logging import span
from src.domain.task import Attachment, Priority, Tag, Task


logger = logging.getLogger(__name__)


async def create_task(
    *,
    title: str,
    description: str = "",
    priority: Priority = Priority.NONE,
    due_date: datetime | None = None,
    parent_id: str | None = None,
    created_date: datetime | None = None,
) -> Task:
    """Create a new, incomplete task.

    Subtasks are appended after their existing siblings.

    Args:
        title: Task title
        description: Optional free-text description
        priority: Task priority
        due_date: Optional due date
        parent_id: Parent task ID when creating a subtask
        created_date: Creation timestamp (defaults to now)

    Returns:
        The created task
    """
    with span("task_service.create_task"):
        subtask_order = 0
        if parent_id is not None:
            siblings = await db_client.get_full_list(
                collection="tasks",
                filter_query=f'parent_id = "{db_client.sanitize_param(parent_id)}"',
            )
            subtask_order = len(siblings)

        record = await db_client.create_record(
            collection="tasks",
            data={
                "title": title,
                "description": description,
                "is_completed": False,
                "created_date": created_date or datetime.now(UTC),
                "due_date": due_date,
                "priority": priority,
                "parent_id": parent_id,
                "subtask_order": subtask_order,
            },
        )

        logger.info("Created task", extra={"task_id": record["id"], "parent_id": parent_id})
        return Task.model_validate(record)


async def complete_task(*, task_id: str, completed_date: datetime | None = None) -> Task:
    """Mark a task as completed.

    Raises:
        KeyError: If the task does not exist
    """
    with span("task_service.complete_task"):
        await db_client.update_record(
            collection="tasks",
            record_id=task_id,
            data={"is_completed": True, "completed_date": completed_date or datetime.now(UTC)},
        )
        return await get_task(task_id=task_id)


async def _get_or_create_tag(name: str) -> dict[str, Any]:
    """Find a tag by name, creating it when missing."""
    for tag in await db_client.get_full_list(collection="tags"):
        if tag["name"] == name:
            return tag
    return await db_client.create_record(collection="tags", data={"name": name})


async def tag_task(*, task_id: str, tag_name: str) -> Tag:
    """Apply a tag (by name) to a task. Tagging twice is a no-op."""
    with span("task_service.tag_task"):
        tag = await _get_or_create_tag(tag_name)

        links = await db_client.get_full_list(
            collection="task_tags",
            filter_query=f'task_id = "{db_client.sanitize_param(task_id)}"',
        )
        if not any(link["tag_id"] == tag["id"] for link in links):
            await db_client.create_record(collection="task_tags", data={"task_id": task_id, "tag_id": tag["id"]})

        return Tag.model_validate(tag)


async def list_tags() -> list[Tag]:
    """List every tag."""
    return [Tag.model_validate(record) for record in await db_client.get_full_list(collection="tags")]


async def delete_tag(*, tag_id: str) -> None:
    """Delete a tag; its links to tasks go with it."""
    with span("task_service.delete_tag"):
        await db_client.delete_record(collection="tags", record_id=tag_id)


async def add_attachment(*, task_id: str, file_name: str, content: bytes) -> Attachment:
    """Store an attachment owned by a task."""
    with span("task_service.add_attachment"):
        record = await db_client.create_record(
            collection="attachments",
            data={
                "task_id": task_id,
                "file_name": file_name,
                "content": content,
                "created_date": datetime.now(UTC),
            },
        )
        return Attachment(id=record["id"], task_id=record["task_id"], file_name=file_name, size=len(content))


async def list_attachments(*, task_id: str | None = None) -> list[Attachment]:
    """List attachment metadata, optionally for a single task."""
    filter_query = f'task_id = "{db_client.sanitize_param(task_id)}"' if task_id is not None else ""
    records = await db_client.get_full_list(collection="attachments", filter_query=filter_query)
    return [
        Attachment(
            id=record["id"],
            task_id=record["task_id"],
            file_name=record["file_name"],
            size=len(record["content"] or b""),
        )
        for record in records
    ]


def _build_task(
    record: dict[str, Any],
    *,
    children: dict[str, list[dict[str, Any]]],
    tags_by_task: dict[str, list[Tag]],
) -> Task:
    """Recursively hydrate a task record with its subtasks and tags."""
    subtasks = [
        _build_task(child, children=children, tags_by_task=tags_by_task)
        for child in sorted(children.get(record["id"], []), key=lambda r: (r["subtask_order"], int(r["id"])))
    ]
    return Task.model_validate(
        {
            **record,
            "subtasks": subtasks,
            "tags": tags_by_task.get(record["id"], []),
        }
    )


async def list_tasks(*, completed_only: bool = False) -> list[Task]:
    """Fetch every task as a hydrated graph.

    Every task appears in the result, roots and subtasks alike, each carrying
    its own subtree. Filtering happens in memory so that completion state of
    subtasks does not affect what a root's subtree contains.

    Args:
        completed_only: Only return tasks marked completed

    Returns:
        Tasks in creation order
    """
    with span("task_service.list_tasks"):
        task_records = await db_client.get_full_list(collection="tasks")
        tag_records = await db_client.get_full_list(collection="tags")
        link_records = await db_client.get_full_list(collection="task_tags")

        tags_by_id = {record["id"]: Tag.model_validate(record) for record in tag_records}
        tags_by_task: dict[str, list[Tag]] = {}
        for link in link_records:
            tag = tags_by_id.get(link["tag_id"])
            if tag is not None:
                tags_by_task.setdefault(link["task_id"], []).append(tag)

        children: dict[str, list[dict[str, Any]]] = {}
        for record in task_records:
            if record["parent_id"] is not None:
                children.setdefault(record["parent_id"], []).append(record)

        tasks = [_build_task(record, children=children, tags_by_task=tags_by_task) for record in task_records]
        if completed_only:
            tasks = [task for task in tasks if task.is_completed]
        return tasks


async def get_task(*, task_id: str) -> Task:
    """Fetch a single hydrated task.

    Raises:
        KeyError: If the task does not exist
    """
    for task in await list_tasks():
        if task.id == task_id:
            return task
    msg = f"Record not found in tasks: {task_id}"
    raise KeyError(msg)


async def delete_task(*, task_id: str, commit: bool = True) -> None:
    """Delete a task together with its subtasks, attachments and tag links.

    Args:
        task_id: Task to delete
        commit: Commit immediately; pass False to defer to db_client.save()

    Raises:
        KeyError: If the task does not exist
    """
    await db_client.delete_record(collection="tasks", record_id=task_id, commit=commit)
    logger.debug("Deleted task", extra={"task_id": task_id})
