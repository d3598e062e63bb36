"""Pydantic models for service layer return types."""

from pydantic import BaseModel, ConfigDict, Field

from src.core.errors import HousekeepingPhase, StoreOperationError


class HousekeepingStats(BaseModel):
    """Root-level counts from one housekeeping run (subtask cascades are not counted)."""

    tasks_archived: int = 0
    tasks_deleted: int = 0
    logs_deleted: int = 0

    @property
    def is_empty(self) -> bool:
        return self.tasks_archived == 0 and self.tasks_deleted == 0 and self.logs_deleted == 0


class HousekeepingResult(BaseModel):
    """Outcome of a housekeeping run.

    ``stats`` always reflects what was committed: on failure it holds the
    counts of the phases that finished before ``failed_phase``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool = Field(..., description="Whether all three phases completed")
    stats: HousekeepingStats = Field(default_factory=HousekeepingStats)
    failed_phase: HousekeepingPhase | None = Field(default=None, description="Phase that failed, if any")
    error: StoreOperationError | None = Field(default=None, description="Store failure that aborted the run")
