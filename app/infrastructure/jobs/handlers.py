"""Job handler registration: one database transaction per job."""

from __future__ import annotations

from datetime import timedelta

from app.application.dtos.job import JobItem
from app.application.interfaces.services import (
    IEventPublisher,
    INotificationService,
    IStorageService,
)
from app.application.services.user_job_service import UserJobService
from app.domain.enums import JobName
from app.infrastructure.jobs.queue import InProcessJobQueue, TransactionalJobQueue
from app.infrastructure.persistence.database import session_scope
from app.infrastructure.persistence.repositories import AlbumRepository, UserRepository


def register_user_job_handlers(
    job_queue: InProcessJobQueue,
    *,
    storage: IStorageService,
    notifications: INotificationService,
    publisher: IEventPublisher,
    delete_delay: timedelta,
) -> None:
    """Register notify-signup, user-deletion and user-delete-check on job_queue."""

    async def run_user_job(item: JobItem) -> bool | int:
        async with session_scope() as db:
            service = UserJobService(
                UserRepository(db),
                AlbumRepository(db),
                TransactionalJobQueue(db, job_queue),
                storage,
                notifications,
                publisher,
                delete_delay=delete_delay,
            )
            if item.name is JobName.NOTIFY_SIGNUP:
                return await service.notify_signup(item.data)
            if item.name is JobName.USER_DELETION:
                return await service.user_deletion(item.data)
            return await service.user_delete_check(item.data)

    for name in (JobName.NOTIFY_SIGNUP, JobName.USER_DELETION, JobName.USER_DELETE_CHECK):
        job_queue.register(name, run_user_job)
