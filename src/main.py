"""DaisyDos logbook - one-shot maintenance entry point."""

import asyncio
import logging

from src.core import db_client
from src.core.logging import configure_logfire
from src.models.service_models import HousekeepingResult
from src.services import logbook_service


logger = logging.getLogger(__name__)


async def run() -> HousekeepingResult | None:
    """Prepare the database and run logbook housekeeping once."""
    configure_logfire()
    await db_client.init_db()
    try:
        return await logbook_service.run_housekeeping()
    finally:
        await db_client.close_connection()


def main() -> int:
    """Run housekeeping; exit status is non-zero if a phase failed."""
    logging.basicConfig(level=logging.INFO)
    result = asyncio.run(run())
    return 0 if result is None or result.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
