# src/cachebench_api/application/interfaces/write_behind.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Application Interface: Write-Behind Scheduler.

Synopsis:
    Contract for running a deferred store write after a fixed delay, detached
    from the request that scheduled it, with an observable completion state.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol


class JobState(str, Enum):
    """Lifecycle of a deferred write."""

    SCHEDULED = "scheduled"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    LOST = "lost"
    """Cancelled before running (e.g. process shutdown)."""


@dataclass(slots=True)
class WriteBehindJob:
    """Bookkeeping for one deferred write.

    Attributes:
        job_id: Opaque job identifier.
        record_id: Record the deferred write targets.
        delay_s: Delay applied before the write runs.
        scheduled_at: UTC time the job was scheduled.
        state: Current lifecycle state.
        settled_at: UTC time the job left ``SCHEDULED``, if it has.
        error: Failure text for ``FAILED``/``LOST`` jobs.
    """

    job_id: str
    record_id: str
    delay_s: float
    scheduled_at: datetime
    state: JobState = JobState.SCHEDULED
    settled_at: datetime | None = None
    error: str | None = None

    @property
    def settled(self) -> bool:
        """Return True once the job is no longer pending."""
        return self.state is not JobState.SCHEDULED


DeferredOperation = Callable[[], Awaitable[object]]


class WriteBehindScheduler(Protocol):
    """Schedules deferred writes and exposes their state."""

    def schedule(
        self,
        *,
        record_id: str,
        operation: DeferredOperation,
        delay_s: float,
    ) -> WriteBehindJob:
        """Run ``operation`` once after ``delay_s`` seconds, detached from the caller.

        The operation is never retried. Its outcome is recorded on the
        returned job and logged; it is never reported back to the caller.
        """
        ...

    def get_job(self, job_id: str) -> WriteBehindJob | None:
        """Return a job from the ledger, if still retained."""
        ...
