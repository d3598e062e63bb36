"""Error types for logbook housekeeping."""

from enum import StrEnum


class HousekeepingPhase(StrEnum):
    """The three phases of a housekeeping run, in execution order."""

    ARCHIVE = "archive"
    PURGE = "purge"
    PRUNE = "prune"


class StoreOperationError(Exception):
    """A store call failed while a housekeeping phase was running.

    This is the only failure housekeeping reports. The underlying exception is
    kept on ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, *, phase: HousekeepingPhase, operation: str, cause: BaseException) -> None:
        self.phase = phase
        self.operation = operation
        self.cause = cause
        super().__init__(f"Housekeeping {phase} phase failed during '{operation}': {cause}")
