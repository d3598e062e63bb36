"""Tests for the maintenance entry point."""

from datetime import UTC, datetime, timedelta

import pytest

from src import main
from src.models.service_models import HousekeepingResult
from src.services import task_service


@pytest.fixture
def no_logfire(monkeypatch):
    monkeypatch.setattr("src.main.configure_logfire", lambda: None)


@pytest.mark.unit
class TestRun:
    """Tests for the run coroutine."""

    async def test_runs_housekeeping_against_configured_db(self, sqlite_db, no_logfire):
        # run() uses the wall clock
        now = datetime.now(UTC)
        task = await task_service.create_task(title="Old", created_date=now - timedelta(days=130))
        await task_service.complete_task(task_id=task.id, completed_date=now - timedelta(days=120))

        result = await main.run()

        assert isinstance(result, HousekeepingResult)
        assert result.success is True
        assert result.stats.tasks_archived == 1

    async def test_reports_failure(self, sqlite_db, no_logfire, monkeypatch):
        async def failing_list_records(**kwargs):
            raise RuntimeError("database is locked")

        monkeypatch.setattr("src.core.db_client.list_records", failing_list_records)

        result = await main.run()

        assert result.success is False
        assert result.failed_phase is not None


@pytest.mark.unit
class TestMain:
    """Tests for the synchronous main wrapper."""

    def test_exit_code_zero_on_success(self, monkeypatch):
        async def fake_run():
            return HousekeepingResult(success=True)

        monkeypatch.setattr(main, "run", fake_run)

        assert main.main() == 0

    def test_exit_code_zero_when_run_skipped(self, monkeypatch):
        async def fake_run():
            return None

        monkeypatch.setattr(main, "run", fake_run)

        assert main.main() == 0

    def test_exit_code_one_on_failure(self, monkeypatch):
        async def fake_run():
            return HousekeepingResult(success=False)

        monkeypatch.setattr(main, "run", fake_run)

        assert main.main() == 1
