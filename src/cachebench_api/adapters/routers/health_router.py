# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Health endpoints (Adapters Layer).

Purpose:
    Expose liveness and readiness signals suitable for container orchestrators and
    load balancers while keeping this adapters layer decoupled from infrastructure.

Design:
    * Adapters boundary respected: no direct DB/Redis imports. Probes are injected.
    * Non-blocking: probes run concurrently; latencies recorded to Prometheus.
    * Testability: a provider instance (`probe_provider`) is the DI token so overrides
      match by identity reliably; `use_cache=False` honors late overrides.
"""

from __future__ import annotations

import asyncio
import typing as t
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Annotated, Protocol

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import Field

from cachebench_api.adapters.schemas.http.base import BaseHTTPSchema
from cachebench_api.infrastructure.logging.logger import get_json_logger
from cachebench_api.infrastructure.observability.metrics import (
    get_readyz_db_latency_seconds,
    get_readyz_redis_latency_seconds,
)

logger = get_json_logger(__name__)
router = APIRouter()


class HealthState(str, Enum):
    """Overall service health classification."""

    OK = "ok"
    DEGRADED = "degraded"


class CheckResult(BaseHTTPSchema):
    """Result of a single dependency check.

    Attributes:
        name: Logical name for the dependency ("db" or "redis").
        status: "ok" when the probe succeeded, otherwise "down".
        detail: Optional diagnostic detail (e.g., exception message).
        duration_ms: Time spent on the probe in milliseconds.
    """

    name: str = Field(..., examples=["db", "redis"])
    status: t.Literal["ok", "down"]
    detail: str | None = None
    duration_ms: float


class ReadinessResponse(BaseHTTPSchema):
    """Aggregated readiness response."""

    status: HealthState
    checks: list[CheckResult] = Field(default_factory=list)


class LivenessResponse(BaseHTTPSchema):
    """Liveness response indicating the process is running."""

    status: t.Literal["ok"] = "ok"


class HealthProbe(Protocol):
    """Minimal, non-destructive dependency checks returning ``(is_ok, detail)``."""

    async def db(self) -> tuple[bool, str | None]: ...

    async def redis(self) -> tuple[bool, str | None]: ...


class NoopProbe:
    """Probe that performs no external I/O and always reports failure.

    Readiness surfaces as "degraded" until a real probe is published on
    ``app.state.health_probe``.
    """

    async def db(self) -> tuple[bool, str | None]:
        return False, "no db probe configured"

    async def redis(self) -> tuple[bool, str | None]:
        return False, "no redis probe configured"


class ProbeProvider:
    """Dependency token object for readiness routes."""

    def __call__(self, request: Request) -> HealthProbe:
        probe = getattr(request.app.state, "health_probe", None)
        return probe if probe is not None else NoopProbe()


probe_provider = ProbeProvider()


@router.get(
    "/liveness",
    summary="Liveness",
    operation_id="health_liveness",
    response_model=LivenessResponse,
    status_code=status.HTTP_200_OK,
)
async def liveness() -> LivenessResponse:
    """Return a fast liveness signal (no external I/O)."""
    return LivenessResponse()


@router.get(
    "/readiness",
    summary="Readiness",
    operation_id="health_readiness",
    response_model=ReadinessResponse,
    responses={503: {"description": "Service degraded", "model": ReadinessResponse}},
)
async def readiness(
    response: Response,
    probe: Annotated[HealthProbe, Depends(probe_provider, use_cache=False)],
) -> ReadinessResponse:
    """Run the store and Redis probes concurrently; 503 unless both pass."""
    loop = asyncio.get_running_loop()

    async def _time(
        name: str,
        fn: Callable[[], Awaitable[tuple[bool, str | None]]],
        observe_seconds: Callable[[float], None],
    ) -> CheckResult:
        start = loop.time()
        ok, detail = await fn()
        elapsed = loop.time() - start
        observe_seconds(elapsed)
        return CheckResult(
            name=name,
            status="ok" if ok else "down",
            detail=detail,
            duration_ms=elapsed * 1000.0,
        )

    results = await asyncio.gather(
        _time("db", probe.db, get_readyz_db_latency_seconds().observe),
        _time("redis", probe.redis, get_readyz_redis_latency_seconds().observe),
    )

    all_ok = all(r.status == "ok" for r in results)
    if not all_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    payload = ReadinessResponse(
        status=HealthState.OK if all_ok else HealthState.DEGRADED,
        checks=list(results),
    )
    logger.info(
        "readiness_probe",
        extra={
            "extra": {
                "overall": payload.status,
                "checks": [r.model_dump() for r in payload.checks],
            }
        },
    )
    return payload
