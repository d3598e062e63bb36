"""Unit tests for housekeeping error types."""

import pytest

from src.core.errors import HousekeepingPhase, StoreOperationError


@pytest.mark.unit
class TestStoreOperationError:
    """Tests for StoreOperationError."""

    def test_message_names_phase_and_operation(self):
        error = StoreOperationError(
            phase=HousekeepingPhase.PURGE,
            operation="delete task 7",
            cause=RuntimeError("disk I/O error"),
        )

        assert str(error) == "Housekeeping purge phase failed during 'delete task 7': disk I/O error"

    def test_keeps_cause(self):
        cause = KeyError("missing")
        error = StoreOperationError(phase=HousekeepingPhase.ARCHIVE, operation="fetch log entries", cause=cause)

        assert error.phase == HousekeepingPhase.ARCHIVE
        assert error.operation == "fetch log entries"
        assert error.cause is cause

    def test_phases_in_execution_order(self):
        assert list(HousekeepingPhase) == [
            HousekeepingPhase.ARCHIVE,
            HousekeepingPhase.PURGE,
            HousekeepingPhase.PRUNE,
        ]
        assert HousekeepingPhase.PRUNE == "prune"
