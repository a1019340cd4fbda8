"""Background jobs: in-process queue, worker and handler registration."""

from app.infrastructure.jobs.handlers import register_user_job_handlers
from app.infrastructure.jobs.queue import (
    InProcessJobQueue,
    TransactionalJobQueue,
    run_periodic,
)

__all__ = [
    "InProcessJobQueue",
    "TransactionalJobQueue",
    "register_user_job_handlers",
    "run_periodic",
]
