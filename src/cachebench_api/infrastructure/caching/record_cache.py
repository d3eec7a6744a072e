# src/cachebench_api/infrastructure/caching/record_cache.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Record Cache (Redis-backed).

Synopsis:
    Thin adapter that implements the application CachePort Protocol on top of
    a shared ``redis.asyncio`` client. Values are opaque bytes; keys are used
    exactly as given (``record:<id>``).

Design:
    * The Redis client is injected (constructed once by bootstrap).
    * Any client failure (Redis, socket, timeout or otherwise) is raised as
      CacheUnavailable so use cases never handle driver exceptions.
    * Each call is timed and counted in Prometheus by operation and outcome.

Layer:
    infrastructure/caching

See Also:
    - cachebench_api.infrastructure.caching.redis_client
    - cachebench_api.application.interfaces.cache_port.CachePort
"""

from __future__ import annotations

import time
from contextlib import suppress

from cachebench_api.application.interfaces.cache_port import CachePort
from cachebench_api.domain.exceptions.records import CacheUnavailable
from cachebench_api.infrastructure.caching.redis_client import RedisClient
from cachebench_api.infrastructure.observability.metrics import (
    get_cache_operation_duration_seconds,
    get_cache_operations_total,
)

__all__ = ["RedisRecordCache"]

def _observe(operation: str, outcome: str, started: float) -> None:
    duration = time.perf_counter() - started
    # Metrics must never break the cache path.
    with suppress(Exception):
        get_cache_operation_duration_seconds().labels(
            operation=operation, outcome=outcome
        ).observe(duration)
        get_cache_operations_total().labels(operation=operation, outcome=outcome).inc()


class RedisRecordCache(CachePort):
    """Redis-backed implementation of the CachePort Protocol."""

    def __init__(self, client: RedisClient) -> None:
        """Initialize the cache adapter.

        Args:
            client: Shared async Redis client.
        """
        self._client = client

    async def get(self, key: str) -> bytes | None:
        """Get the value stored under ``key``.

        Args:
            key: Fully-qualified cache key.

        Returns:
            Stored bytes if present, else None.

        Raises:
            CacheUnavailable: If the Redis client fails for any reason.
        """
        started = time.perf_counter()
        try:
            raw = await self._client.get(key)
        except Exception as exc:
            _observe("get", "error", started)
            raise CacheUnavailable(
                f"cache read failed: {exc}", details={"key": key, "operation": "get"}
            ) from exc

        if raw is None:
            _observe("get", "miss", started)
            return None

        _observe("get", "hit", started)
        if isinstance(raw, str):
            return raw.encode("utf-8")
        return bytes(raw)

    async def set(self, key: str, value: bytes, *, ttl: int) -> None:
        """Store ``value`` under ``key`` with a TTL.

        Args:
            key: Fully-qualified cache key.
            value: Opaque payload.
            ttl: Time-to-live in seconds (must be positive).

        Raises:
            ValueError: If ``ttl`` is not positive.
            CacheUnavailable: If the Redis client fails for any reason.
        """
        if ttl <= 0:
            raise ValueError("ttl must be a positive number of seconds")

        started = time.perf_counter()
        try:
            await self._client.set(key, value, ex=ttl)
        except Exception as exc:
            _observe("set", "error", started)
            raise CacheUnavailable(
                f"cache write failed: {exc}", details={"key": key, "operation": "set"}
            ) from exc
        _observe("set", "ok", started)
