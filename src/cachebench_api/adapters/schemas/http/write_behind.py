# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""HTTP schema for write-behind job status."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from cachebench_api.adapters.schemas.http.base import BaseHTTPSchema
from cachebench_api.application.interfaces.write_behind import WriteBehindJob


class WriteBehindJobHTTP(BaseHTTPSchema):
    """Status of one deferred store write."""

    job_id: str
    record_id: str
    state: Literal["scheduled", "succeeded", "failed", "lost"]
    delay_s: float
    scheduled_at: datetime
    settled_at: datetime | None = None
    error: str | None = None

    @classmethod
    def from_job(cls, job: WriteBehindJob) -> WriteBehindJobHTTP:
        return cls(
            job_id=job.job_id,
            record_id=job.record_id,
            state=job.state.value,
            delay_s=job.delay_s,
            scheduled_at=job.scheduled_at,
            settled_at=job.settled_at,
            error=job.error,
        )
