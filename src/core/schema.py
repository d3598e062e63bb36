"""SQLite schema management (code-first approach)."""

import logging

from src.core import db_client


logger = logging.getLogger(__name__)


# Central list of all collections in the schema, in dependency order
COLLECTIONS = [
    "tasks",
    "tags",
    "task_tags",
    "attachments",
    "task_logs",
]


_TABLES: dict[str, str] = {
    # Subtasks, attachments and tag links are owned by their task and go with it
    "tasks": """
        CREATE TABLE IF NOT EXISTS tasks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            is_completed INTEGER NOT NULL DEFAULT 0,
            completed_date TEXT,
            created_date TEXT NOT NULL,
            due_date TEXT,
            priority TEXT NOT NULL DEFAULT 'none',
            parent_id INTEGER REFERENCES tasks(id) ON DELETE CASCADE,
            subtask_order INTEGER NOT NULL DEFAULT 0
        )
    """,
    "tags": """
        CREATE TABLE IF NOT EXISTS tags (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE
        )
    """,
    "task_tags": """
        CREATE TABLE IF NOT EXISTS task_tags (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            task_id INTEGER NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
            tag_id INTEGER NOT NULL REFERENCES tags(id) ON DELETE CASCADE,
            UNIQUE (task_id, tag_id)
        )
    """,
    "attachments": """
        CREATE TABLE IF NOT EXISTS attachments (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            task_id INTEGER NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
            file_name TEXT NOT NULL,
            content BLOB NOT NULL,
            created_date TEXT NOT NULL
        )
    """,
    # Log entries hold copied values only, no foreign keys
    "task_logs": """
        CREATE TABLE IF NOT EXISTS task_logs (
            id TEXT PRIMARY KEY,
            original_task_id TEXT NOT NULL,
            title TEXT NOT NULL,
            task_description TEXT NOT NULL DEFAULT '',
            completed_date TEXT NOT NULL,
            created_date TEXT NOT NULL,
            due_date TEXT,
            priority TEXT NOT NULL DEFAULT 'none',
            was_overdue INTEGER NOT NULL DEFAULT 0,
            subtask_count INTEGER NOT NULL DEFAULT 0,
            completed_subtask_count INTEGER NOT NULL DEFAULT 0,
            was_subtask INTEGER NOT NULL DEFAULT 0,
            parent_task_title TEXT,
            root_task_id TEXT,
            tag_names TEXT NOT NULL DEFAULT '[]',
            completion_duration REAL
        )
    """,
}

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_parent_id ON tasks (parent_id)",
    "CREATE INDEX IF NOT EXISTS idx_task_tags_task_id ON task_tags (task_id)",
    "CREATE INDEX IF NOT EXISTS idx_attachments_task_id ON attachments (task_id)",
    "CREATE INDEX IF NOT EXISTS idx_task_logs_original_task_id ON task_logs (original_task_id)",
]


async def init_db(*, db_path: str | None = None) -> None:
    """Create all tables and indexes if they don't exist yet."""
    conn = await db_client.get_connection(db_path=db_path)

    for collection in COLLECTIONS:
        await conn.execute(_TABLES[collection])
    for index in _INDEXES:
        await conn.execute(index)
    await conn.commit()

    logger.info("Database schema initialized", extra={"collections": COLLECTIONS})
