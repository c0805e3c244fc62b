"""Strict FIFO queue that serializes every ``aid`` invocation.

The external tool shares an on-disk cache between runs, so at most one
process may exist at a time. The queue owns its pending jobs and the single
running slot; callers only ever await their own job's future.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

from distiller_mcp.execution.errors import DistillerError
from distiller_mcp.execution.executor import CommandRunner
from distiller_mcp.execution.models import JobStatus, QueuedJob
from distiller_mcp.util import utc_now

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QueueStats:
    """Aggregate queue counters for diagnostics."""

    submitted: int = 0
    succeeded: int = 0
    failed: int = 0
    canceled: int = 0


class ExecutionQueue:
    """Run submitted argument vectors one at a time in arrival order."""

    def __init__(
        self,
        runner: CommandRunner,
        *,
        default_timeout_seconds: float | None = None,
    ) -> None:
        self.runner = runner
        self.default_timeout_seconds = default_timeout_seconds
        self.stats = QueueStats()
        self._pending: deque[QueuedJob] = deque()
        self._running: QueuedJob | None = None
        self._drain_task: asyncio.Task[None] | None = None
        self._job_ids = itertools.count(1)
        self._closed = False

    @property
    def is_draining(self) -> bool:
        return self._drain_task is not None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def running_job(self) -> QueuedJob | None:
        return self._running

    async def submit(
        self,
        argv: Sequence[str],
        *,
        timeout_seconds: float | None = None,
    ) -> str:
        """Queue one invocation and wait for its payload.

        Args:
            argv: Argument vector for the external tool.
            timeout_seconds: Optional deadline for this job once it starts
                running. Falls back to the queue default; ``None`` waits
                indefinitely.
        """

        job = self.enqueue(argv, timeout_seconds=timeout_seconds)
        return await job.future

    def enqueue(
        self,
        argv: Sequence[str],
        *,
        timeout_seconds: float | None = None,
    ) -> QueuedJob:
        """Append a pending job and start draining if idle."""

        if self._closed:
            raise DistillerError("Execution queue is closed.")

        loop = asyncio.get_running_loop()
        job = QueuedJob(
            job_id=next(self._job_ids),
            argv=tuple(argv),
            future=loop.create_future(),
            timeout_seconds=(
                timeout_seconds if timeout_seconds is not None else self.default_timeout_seconds
            ),
            submitted_at=utc_now(),
        )
        self._pending.append(job)
        self.stats.submitted += 1
        logger.debug("Job %d queued (%d pending)", job.job_id, len(self._pending))

        if self._drain_task is None:
            self._drain_task = loop.create_task(self._drain(), name="aid-execution-queue")
        return job

    async def aclose(self) -> None:
        """Stop draining and cancel every job that has not settled."""

        self._closed = True
        drain_task = self._drain_task
        if drain_task is not None:
            drain_task.cancel()
            try:
                await drain_task
            except asyncio.CancelledError:
                pass
        while self._pending:
            job = self._pending.popleft()
            self._cancel(job)

    async def _drain(self) -> None:
        try:
            while self._pending:
                job = self._pending.popleft()
                if job.future.done():
                    self._cancel(job)
                    continue
                await self._run_job(job)
        finally:
            self._drain_task = None

    async def _run_job(self, job: QueuedJob) -> None:
        job.status = JobStatus.RUNNING
        job.started_at = utc_now()
        self._running = job
        logger.debug("Job %d running: %r", job.job_id, list(job.argv))
        try:
            payload = await self.runner.run(job.argv, timeout_seconds=job.timeout_seconds)
        except asyncio.CancelledError:
            self._cancel(job)
            raise
        except Exception as error:  # noqa: BLE001
            job.status = JobStatus.FAILED
            self.stats.failed += 1
            logger.debug("Job %d failed: %s", job.job_id, error)
            if not job.future.done():
                job.future.set_exception(error)
        else:
            job.status = JobStatus.SUCCEEDED
            self.stats.succeeded += 1
            logger.debug("Job %d succeeded (%d bytes)", job.job_id, len(payload))
            if not job.future.done():
                job.future.set_result(payload)
        finally:
            job.finished_at = utc_now()
            self._running = None

    def _cancel(self, job: QueuedJob) -> None:
        if job.status is not JobStatus.CANCELED:
            job.status = JobStatus.CANCELED
            self.stats.canceled += 1
        job.finished_at = job.finished_at or utc_now()
        if not job.future.done():
            job.future.cancel()
        logger.debug("Job %d canceled", job.job_id)
