# src/cachebench_api/infrastructure/scheduling/write_behind.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""In-process write-behind scheduler.

Synopsis:
    Runs deferred store writes on their own asyncio tasks. Tasks are created
    from the scheduler, not awaited by the request, so a client disconnect or
    request cancellation never cancels them.

Design:
    * Strong references to pending tasks are kept until they settle.
    * A bounded ledger retains recent jobs for status lookups; settled jobs
      are evicted oldest-first once ``max_jobs`` is exceeded.
    * No retry and no persistence. On shutdown pending jobs are cancelled,
      marked ``LOST`` and logged one by one.
    * Every transition is logged and counted in Prometheus.

Layer:
    infrastructure/scheduling
"""

from __future__ import annotations

import asyncio
import uuid
from collections import OrderedDict
from datetime import UTC, datetime

from cachebench_api.application.interfaces.write_behind import (
    DeferredOperation,
    JobState,
    WriteBehindJob,
)
from cachebench_api.infrastructure.logging.logger import get_json_logger
from cachebench_api.infrastructure.observability.metrics import get_write_behind_jobs_total

__all__ = ["InProcessWriteBehindScheduler"]

logger = get_json_logger(__name__)


def _count(state: JobState) -> None:
    try:
        get_write_behind_jobs_total().labels(state=state.value).inc()
    except Exception as exc:  # pragma: no cover - metrics must not break scheduling
        logger.debug("write_behind.metrics_failed", extra={"extra": {"error": str(exc)}})


class InProcessWriteBehindScheduler:
    """WriteBehindScheduler backed by detached asyncio tasks."""

    def __init__(self, *, max_jobs: int = 1000) -> None:
        """Initialize the scheduler.

        Args:
            max_jobs: Number of jobs retained in the status ledger.
        """
        if max_jobs < 1:
            raise ValueError("max_jobs must be >= 1")
        self._max_jobs = max_jobs
        self._jobs: OrderedDict[str, WriteBehindJob] = OrderedDict()
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._closed = False

    @property
    def pending_count(self) -> int:
        """Number of jobs that have not settled yet."""
        return len(self._tasks)

    def schedule(
        self,
        *,
        record_id: str,
        operation: DeferredOperation,
        delay_s: float,
    ) -> WriteBehindJob:
        """Run ``operation`` once after ``delay_s`` seconds on a detached task.

        Raises:
            RuntimeError: If the scheduler has been closed.
        """
        if self._closed:
            raise RuntimeError("write-behind scheduler is closed")

        job = WriteBehindJob(
            job_id=uuid.uuid4().hex,
            record_id=record_id,
            delay_s=delay_s,
            scheduled_at=datetime.now(UTC),
        )
        self._remember(job)

        task = asyncio.create_task(self._run(job, operation), name=f"write-behind:{job.job_id}")
        self._tasks[job.job_id] = task
        task.add_done_callback(lambda _t, jid=job.job_id: self._tasks.pop(jid, None))

        _count(JobState.SCHEDULED)
        logger.info(
            "write_behind.scheduled",
            extra={"extra": {"job_id": job.job_id, "record_id": record_id, "delay_s": delay_s}},
        )
        return job

    def get_job(self, job_id: str) -> WriteBehindJob | None:
        """Return a job from the ledger, if still retained."""
        return self._jobs.get(job_id)

    async def join(self) -> None:
        """Wait until every currently pending job has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel pending jobs and mark them ``LOST``.

        Pending writes are not flushed: they are logged at WARNING so the lost
        updates are visible to operators.
        """
        self._closed = True
        pending_ids = list(self._tasks)
        pending = list(self._tasks.values())
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        # A task cancelled before its first step never enters _run.
        for jid in pending_ids:
            job = self._jobs.get(jid)
            if job is not None and not job.settled:
                self._mark_lost(job)
        logger.info("write_behind.closed", extra={"extra": {"lost": len(pending)}})

    async def _run(self, job: WriteBehindJob, operation: DeferredOperation) -> None:
        try:
            await asyncio.sleep(job.delay_s)
            await operation()
        except asyncio.CancelledError:
            self._mark_lost(job)
            raise
        except Exception as exc:
            # No retry and no caller to report to: record and log only.
            self._settle(job, JobState.FAILED, error=str(exc) or type(exc).__name__)
            logger.exception(
                "write_behind.failed",
                extra={"extra": {"job_id": job.job_id, "record_id": job.record_id}},
            )
        else:
            self._settle(job, JobState.SUCCEEDED)
            logger.info(
                "write_behind.succeeded",
                extra={"extra": {"job_id": job.job_id, "record_id": job.record_id}},
            )

    def _mark_lost(self, job: WriteBehindJob) -> None:
        self._settle(job, JobState.LOST, error="cancelled before completion")
        logger.warning(
            "write_behind.lost",
            extra={"extra": {"job_id": job.job_id, "record_id": job.record_id}},
        )

    def _settle(self, job: WriteBehindJob, state: JobState, *, error: str | None = None) -> None:
        job.state = state
        job.error = error
        job.settled_at = datetime.now(UTC)
        _count(state)

    def _remember(self, job: WriteBehindJob) -> None:
        self._jobs[job.job_id] = job
        if len(self._jobs) <= self._max_jobs:
            return
        for jid in [jid for jid, j in self._jobs.items() if j.settled]:
            if len(self._jobs) <= self._max_jobs:
                break
            del self._jobs[jid]
