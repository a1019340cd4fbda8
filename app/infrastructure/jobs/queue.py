"""In-process job queue: asyncio.Queue drained by one worker task.

Handlers are registered per JobName. Each handler opens its own database
transaction (see handlers.py); a failing job is logged and the worker moves
on to the next item.

Request code does not put items here directly: TransactionalJobQueue holds
them until the request session commits, so a worker never sees a job whose
rows are not yet visible, and a rolled-back request queues nothing.

Each item remembers the request id current when it was queued; the worker
restores it while the handler runs so job log lines match the request.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from contextlib import suppress
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.job import JobItem
from app.domain.enums import JobName
from app.domain.exceptions import JobQueueClosedException
from app.shared.telemetry.logging import get_logger, request_id_var

logger = get_logger(__name__)

JobHandler = Callable[[JobItem], Awaitable[Any]]


class InProcessJobQueue:
    """IJobRepository backed by an asyncio.Queue and a single worker task."""

    def __init__(self, max_size: int = 0) -> None:
        self._queue: asyncio.Queue[tuple[JobItem, str | None]] = asyncio.Queue(maxsize=max_size)
        self._handlers: dict[JobName, JobHandler] = {}
        self._worker: asyncio.Task[None] | None = None

    def register(self, name: JobName, handler: JobHandler) -> None:
        """Route jobs named name to handler (replaces any earlier handler)."""
        self._handlers[name] = handler

    @property
    def accepting(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def put(self, item: JobItem) -> None:
        """Enqueue without waiting. Raises JobQueueClosedException when stopped or full."""
        if not self.accepting:
            raise JobQueueClosedException(item.name.value)
        try:
            self._queue.put_nowait((item, request_id_var.get()))
        except asyncio.QueueFull as e:
            raise JobQueueClosedException(item.name.value) from e
        logger.debug("Queued job %s", item.name.value)

    async def queue(self, item: JobItem) -> None:
        self.put(item)

    def start(self) -> None:
        if self.accepting:
            return
        self._worker = asyncio.create_task(self._run(), name="job-queue-worker")
        logger.info("Job queue worker started")

    async def stop(self) -> None:
        """Cancel the worker; items still queued are dropped."""
        worker, self._worker = self._worker, None
        if worker is None:
            return
        worker.cancel()
        with suppress(asyncio.CancelledError):
            await worker
        dropped = self._queue.qsize()
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()
        logger.info("Job queue worker stopped (%d pending jobs dropped)", dropped)

    async def join(self) -> None:
        """Wait until every queued job has been processed."""
        await self._queue.join()

    async def _run(self) -> None:
        while True:
            item, request_id = await self._queue.get()
            token = request_id_var.set(request_id)
            try:
                await self._dispatch(item)
            except Exception:
                logger.exception("Job %s failed (data keys: %s)", item.name.value, sorted(item.data))
            finally:
                request_id_var.reset(token)
                self._queue.task_done()

    async def _dispatch(self, item: JobItem) -> None:
        handler = self._handlers.get(item.name)
        if handler is None:
            logger.warning("No handler registered for job %s", item.name.value)
            return
        result = await handler(item)
        logger.debug("Job %s done: %r", item.name.value, result)


class TransactionalJobQueue:
    """IJobRepository bound to a session: jobs reach the worker only after commit.

    Closed-queue errors are raised at queue() time so the caller's transaction
    rolls back. Jobs buffered in a transaction that rolls back are discarded.
    """

    def __init__(self, db: AsyncSession, job_queue: InProcessJobQueue) -> None:
        self._job_queue = job_queue
        self._pending: list[JobItem] = []
        event.listen(db.sync_session, "after_commit", self._flush)
        event.listen(db.sync_session, "after_rollback", self._discard)

    async def queue(self, item: JobItem) -> None:
        if not self._job_queue.accepting:
            raise JobQueueClosedException(item.name.value)
        self._pending.append(item)

    def _flush(self, _session: Any) -> None:
        items, self._pending = self._pending, []
        for item in items:
            try:
                self._job_queue.put(item)
            except JobQueueClosedException:
                logger.error("Job %s lost: queue closed after commit", item.name.value)

    def _discard(self, _session: Any) -> None:
        if self._pending:
            logger.info("Discarding %d jobs from rolled back transaction", len(self._pending))
        self._pending.clear()


async def run_periodic(job_queue: InProcessJobQueue, item: JobItem, interval_seconds: float) -> None:
    """Queue item every interval_seconds until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            job_queue.put(item)
        except JobQueueClosedException:
            logger.warning("Scheduler: queue closed, skipping %s", item.name.value)
