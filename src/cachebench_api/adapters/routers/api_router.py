# src/cachebench_api/adapters/routers/api_router.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""API Router Aggregator (Adapters Layer).

Responsibilities:
    • Mount health endpoints under `/health`.
    • Mount the consistency-pattern endpoints under `/test/...`.

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter

from cachebench_api.adapters.routers.cache_patterns_router import router as cache_patterns_router
from cachebench_api.adapters.routers.health_router import router as health_router

router = APIRouter()

# Health endpoints (liveness/readiness) under /health.
router.include_router(health_router, prefix="/health", tags=["Health"])

# /test/cache-aside, /test/write-through, /test/write-behind.
router.include_router(cache_patterns_router)
