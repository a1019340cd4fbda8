"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (WebSocket manager, storage,
job queue worker and scheduler, DB engine dispose).
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from datetime import timedelta
from typing import AsyncIterator

from fastapi import FastAPI

from app.api.websocket import ConnectionManager, WebSocketEventPublisher
from app.application.dtos.job import JobItem
from app.core.config import get_settings
from app.domain.enums import JobName
from app.infrastructure.external.storage import LocalStorageService
from app.infrastructure.jobs import (
    InProcessJobQueue,
    register_user_job_handlers,
    run_periodic,
)
from app.infrastructure.persistence import database
from app.infrastructure.services import LogOnlyNotificationService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: WebSocket manager, storage and notifications, job queue
    worker, delete-check scheduler. Shutdown order: scheduler, worker, SQL
    engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    app.state.ws_manager = ConnectionManager()
    app.state.event_publisher = WebSocketEventPublisher(app.state.ws_manager)
    app.state.storage = LocalStorageService(settings.storage_root)
    app.state.notifications = LogOnlyNotificationService()

    job_queue = InProcessJobQueue(max_size=settings.job_queue_max_size)
    register_user_job_handlers(
        job_queue,
        storage=app.state.storage,
        notifications=app.state.notifications,
        publisher=app.state.event_publisher,
        delete_delay=timedelta(days=settings.user_delete_delay_days),
    )
    job_queue.start()
    app.state.job_queue = job_queue

    scheduler = None
    if settings.user_delete_check_interval_seconds > 0:
        scheduler = asyncio.create_task(
            run_periodic(
                job_queue,
                JobItem(JobName.USER_DELETE_CHECK),
                settings.user_delete_check_interval_seconds,
            ),
            name="user-delete-check-scheduler",
        )
        logger.info(
            "User delete check scheduled every %ds",
            settings.user_delete_check_interval_seconds,
        )

    yield

    # ---- Shutdown ----
    if scheduler is not None:
        scheduler.cancel()
        with suppress(asyncio.CancelledError):
            await scheduler
        logger.info("User delete check scheduler stopped")

    await job_queue.stop()

    if database.engine is not None:
        await database.dispose_engine()
        logger.info("Database engine disposed")
