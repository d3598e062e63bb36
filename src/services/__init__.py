from src.services import (
    archival_service,
    logbook_queries,
    logbook_service,
    retention_policy,
    task_service,
)


__all__ = [
    "archival_service",
    "logbook_queries",
    "logbook_service",
    "retention_policy",
    "task_service",
]
