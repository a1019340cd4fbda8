"""Purge users soft-deleted longer than USER_DELETE_DELAY_DAYS (one-off, e.g. from cron).

Usage:
    python -m scripts.run_user_delete_check
Runs the user-deletion handler inline for each due user, each in its own
transaction, instead of going through the in-process queue of a server.
"""

import asyncio
import sys
from datetime import timedelta

from app.application.dtos.job import JobItem
from app.application.services.user_job_service import UserJobService
from app.core.config import get_settings
from app.infrastructure.external.storage import LocalStorageService
from app.infrastructure.persistence import database
from app.infrastructure.persistence.database import session_scope
from app.infrastructure.persistence.repositories import AlbumRepository, UserRepository
from app.infrastructure.services import LogOnlyNotificationService
from app.shared.telemetry.logging import get_logger, setup_logging

logger = get_logger(__name__)


class _CollectingJobQueue:
    """IJobRepository that keeps queued jobs for inline execution."""

    def __init__(self) -> None:
        self.items: list[JobItem] = []

    async def queue(self, item: JobItem) -> None:
        self.items.append(item)


class _LogOnlyPublisher:
    """IEventPublisher with no connected clients."""

    async def publish(self, event: str, payload: dict) -> None:
        logger.info("Event %s: %s", event, payload)


def _service(session, job_repo) -> UserJobService:
    settings = get_settings()
    return UserJobService(
        UserRepository(session),
        AlbumRepository(session),
        job_repo,
        LocalStorageService(settings.storage_root),
        LogOnlyNotificationService(),
        _LogOnlyPublisher(),
        delete_delay=timedelta(days=settings.user_delete_delay_days),
    )


async def main() -> None:
    """Find due users, then purge each one in a separate transaction."""
    setup_logging()
    collected = _CollectingJobQueue()
    async with session_scope() as session:
        await _service(session, collected).user_delete_check()

    purged = 0
    for item in collected.items:
        try:
            async with session_scope() as session:
                if await _service(session, _CollectingJobQueue()).user_deletion(item.data):
                    purged += 1
        except Exception:
            logger.exception("Failed to purge user %s", item.data.get("id"))
    await database.dispose_engine()
    print(f"Purged {purged} of {len(collected.items)} due users")
    if purged < len(collected.items):
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
