# src/cachebench_api/adapters/routers/metrics_router.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Prometheus scrape endpoint (`/metrics`).

Collectors are created lazily by their accessors. The scrape handler touches
the unlabelled readiness histograms first so their `_bucket`/`_count`/`_sum`
series exist on the very first scrape (cold start).

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from cachebench_api.infrastructure.logging.logger import get_json_logger
from cachebench_api.infrastructure.observability.metrics import (
    get_readyz_db_latency_seconds,
    get_readyz_redis_latency_seconds,
)

logger = get_json_logger(__name__)
router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics_probe() -> Response:
    """Expose Prometheus metrics in the text exposition format."""
    for getter in (get_readyz_db_latency_seconds, get_readyz_redis_latency_seconds):
        try:
            getter()
        except Exception as exc:  # pragma: no cover
            logger.debug(
                "metrics_router: failed creating histogram",
                extra={"extra": {"metric": getter.__name__, "error": str(exc)}},
            )
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
