# src/cachebench_api/infrastructure/caching/redis_client.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Async Redis client factory.

Owns the process-global ``redis.asyncio`` client. The client is created once
during bootstrap and shared by every request; per-command timeouts come from
Settings so no cache call can hang indefinitely.
"""

from __future__ import annotations

from contextlib import suppress
from typing import Any, Protocol, runtime_checkable

import redis.asyncio as aioredis

from cachebench_api.config.settings import Settings, get_settings

__all__ = [
    "RedisClient",
    "init_redis",
    "close_redis",
    "get_redis_client",
]


@runtime_checkable
class RedisClient(Protocol):
    """Minimal async Redis protocol used by Cache-Bench."""

    async def ping(self) -> Any: ...
    async def aclose(self) -> None: ...

    async def get(self, key: str) -> Any: ...
    async def set(
        self,
        key: str,
        value: Any,
        *,
        ex: int | None = None,
    ) -> Any: ...


_client: RedisClient | None = None


def _create_aioredis_client(settings: Settings) -> RedisClient:
    """Build the concrete asyncio Redis client from settings.

    Responses are left as bytes: cache values are opaque payloads.
    """
    client: Any = aioredis.from_url(
        settings.redis_url,
        decode_responses=False,
        health_check_interval=settings.redis_health_check_interval_s,
        socket_timeout=settings.redis_socket_timeout_s,
        socket_connect_timeout=settings.redis_socket_connect_timeout_s,
    )
    return client


def init_redis(settings: Settings) -> None:
    """Initialize the global async Redis client (idempotent)."""
    global _client
    if _client is not None:
        return
    _client = _create_aioredis_client(settings)


async def close_redis() -> None:
    """Close the global Redis client at shutdown."""
    global _client
    if _client is not None:
        with suppress(RuntimeError):
            await _client.aclose()
        _client = None


def get_redis_client() -> RedisClient:
    """Return the initialized Redis client (lazy-inits outside lifespan)."""
    if _client is None:
        init_redis(get_settings())
    if _client is None:
        raise RuntimeError("Redis client not initialized (init_redis failed)")
    return _client
