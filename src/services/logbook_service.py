"""Logbook housekeeping: archive, purge and prune completed work.

A housekeeping run executes three phases, always in this order:

1. Archive - completed root tasks aged 91-365 days become log entries
   (root and every subtask) and the live task is deleted.
2. Purge - completed root tasks aged 366+ days are deleted, no log entry.
3. Prune - log entries aged 366+ days are deleted.

Each phase fetches everything and filters in memory, then writes its changes as
one unit of work (a single save at the end). A failing phase is rolled back
and aborts the run; phases already saved stay saved. Every phase is idempotent,
so a failed run is safe to repeat.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from src.core import db_client
from src.core.errors import HousekeepingPhase, StoreOperationError
from src.core.logging import log_with_context, span
from src.domain.log import TaskLogEntry
from src.models.service_models import HousekeepingResult, HousekeepingStats
from src.services import archival_service, retention_policy, task_service


logger = logging.getLogger(__name__)

_housekeeping_lock = asyncio.Lock()


class _PhaseContext:
    """Tracks the store operation in progress so failures can name it."""

    def __init__(self, phase: HousekeepingPhase) -> None:
        self.phase = phase
        self.operation = "start"


async def insert_log_entry(entry: TaskLogEntry, *, commit: bool = True) -> TaskLogEntry:
    """Persist a log entry."""
    record = await db_client.create_record(collection="task_logs", data=entry.to_record(), commit=commit)
    return TaskLogEntry.from_record(record)


async def list_log_entries() -> list[TaskLogEntry]:
    """Fetch every log entry (unfiltered)."""
    records = await db_client.get_full_list(collection="task_logs")
    return [TaskLogEntry.from_record(record) for record in records]


async def delete_log_entry(*, entry_id: str, commit: bool = True) -> None:
    """Delete a log entry.

    Raises:
        KeyError: If the entry does not exist
    """
    await db_client.delete_record(collection="task_logs", record_id=entry_id, commit=commit)


async def _rollback_phase(ctx: _PhaseContext) -> None:
    """Discard the phase's pending writes; a failing rollback must not mask the original error."""
    try:
        await db_client.rollback()
    except RuntimeError as rollback_error:
        logger.warning(
            "Rollback after failed housekeeping phase also failed",
            extra={"phase": str(ctx.phase), "operation": ctx.operation, "error": str(rollback_error)},
        )


async def _run_phase(phase: HousekeepingPhase, body: Callable[[_PhaseContext], Awaitable[int]]) -> int:
    """Run one phase as a unit of work.

    Store failures (KeyError, RuntimeError from db_client) are rolled back and
    wrapped in StoreOperationError. Anything else is rolled back and re-raised.
    """
    ctx = _PhaseContext(phase)
    with span(f"logbook_service.{phase}_phase"):
        try:
            count = await body(ctx)
        except (KeyError, RuntimeError) as e:
            await _rollback_phase(ctx)
            raise StoreOperationError(phase=phase, operation=ctx.operation, cause=e) from e
        except Exception:
            await _rollback_phase(ctx)
            raise

    logger.debug("Housekeeping phase complete", extra={"phase": str(phase), "count": count})
    return count


async def _archive_phase(ctx: _PhaseContext, *, now: datetime) -> int:
    ctx.operation = "fetch completed tasks"
    tasks = await task_service.list_tasks(completed_only=True)
    candidates = [task for task in tasks if retention_policy.should_archive(task, now=now)]
    if not candidates:
        return 0

    ctx.operation = "fetch log entries"
    archived_ids = {entry.original_task_id for entry in await list_log_entries()}

    for task in candidates:
        ctx.operation = f"snapshot task {task.id}"
        for entry in archival_service.snapshot_task_tree(task):
            # A task id never appears in the logbook twice
            if entry.original_task_id in archived_ids:
                continue
            ctx.operation = f"insert log entry for task {entry.original_task_id}"
            await insert_log_entry(entry, commit=False)
            archived_ids.add(entry.original_task_id)

        ctx.operation = f"delete task {task.id}"
        await task_service.delete_task(task_id=task.id, commit=False)

    ctx.operation = "save archived tasks"
    await db_client.save()
    return len(candidates)


async def _purge_phase(ctx: _PhaseContext, *, now: datetime) -> int:
    ctx.operation = "fetch completed tasks"
    tasks = await task_service.list_tasks(completed_only=True)
    candidates = [task for task in tasks if retention_policy.should_purge(task, now=now)]
    if not candidates:
        return 0

    for task in candidates:
        ctx.operation = f"delete task {task.id}"
        await task_service.delete_task(task_id=task.id, commit=False)

    ctx.operation = "save purged tasks"
    await db_client.save()
    return len(candidates)


async def _prune_phase(ctx: _PhaseContext, *, now: datetime) -> int:
    ctx.operation = "fetch log entries"
    entries = retention_policy.prunable_entries(await list_log_entries(), now=now)
    if not entries:
        return 0

    for entry in entries:
        ctx.operation = f"delete log entry {entry.id}"
        await delete_log_entry(entry_id=entry.id, commit=False)

    ctx.operation = "save pruned log entries"
    await db_client.save()
    # Stats count root entries only
    return sum(1 for entry in entries if entry.root_task_id is None)


async def perform_housekeeping(*, now: datetime) -> HousekeepingResult:
    """Run the archive, purge and prune phases against the store.

    Args:
        now: Reference instant used for every age calculation in this run

    Returns:
        HousekeepingResult. On failure, ``stats`` holds the counts of the
        phases that were saved before the failing one.
    """
    stats = HousekeepingStats()

    with span("logbook_service.perform_housekeeping"):
        try:
            stats.tasks_archived = await _run_phase(
                HousekeepingPhase.ARCHIVE, lambda ctx: _archive_phase(ctx, now=now)
            )
            stats.tasks_deleted = await _run_phase(HousekeepingPhase.PURGE, lambda ctx: _purge_phase(ctx, now=now))
            stats.logs_deleted = await _run_phase(HousekeepingPhase.PRUNE, lambda ctx: _prune_phase(ctx, now=now))
        except StoreOperationError as e:
            log_with_context(
                logger,
                "error",
                "Logbook housekeeping failed",
                phase=str(e.phase),
                operation=e.operation,
                error=str(e.cause),
                **stats.model_dump(),
            )
            return HousekeepingResult(success=False, stats=stats, failed_phase=e.phase, error=e)

    log_with_context(logger, "info", "Logbook housekeeping completed", **stats.model_dump())
    return HousekeepingResult(success=True, stats=stats)


async def run_housekeeping(*, now: datetime | None = None) -> HousekeepingResult | None:
    """Run housekeeping unless a run is already in progress.

    Callers that may trigger housekeeping from several places (startup, timers)
    should go through here. Store failures are logged and returned, never raised.

    Returns:
        The run's result, or None if another run was in progress
    """
    if _housekeeping_lock.locked():
        logger.info("Logbook housekeeping already running, skipping")
        return None

    async with _housekeeping_lock:
        return await perform_housekeeping(now=now or datetime.now(UTC))


async def clear_logbook() -> int:
    """Delete every log entry in a single unit of work.

    Returns:
        Number of entries deleted

    Raises:
        RuntimeError: If the store fails (nothing is deleted in that case)
    """
    with span("logbook_service.clear_logbook"):
        entries = await list_log_entries()
        if not entries:
            return 0

        try:
            for entry in entries:
                await delete_log_entry(entry_id=entry.id, commit=False)
            await db_client.save()
        except (KeyError, RuntimeError):
            await db_client.rollback()
            raise

        logger.info("Cleared logbook", extra={"count": len(entries)})
        return len(entries)
