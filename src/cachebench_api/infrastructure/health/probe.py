# src/cachebench_api/infrastructure/health/probe.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Readiness probes for the record store & Redis.

Design:
    * Small public surface: `DbRedisProbe.db()` and `.redis()` returning
      `(success: bool, detail: str | None)`.
    * Probes never raise; failures are reported through ``detail``.
    * Latency is recorded by the health router, not here.

Dependencies:
    - SQLAlchemy async_sessionmaker for DB checks
    - Redis client typed via our RedisClient Protocol (no concrete imports)
"""

from __future__ import annotations

import asyncio

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cachebench_api.infrastructure.caching.redis_client import RedisClient as RedisProto

__all__ = ["DbRedisProbe"]


class DbRedisProbe:
    """Readiness probe for the relational store and Redis."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        redis: RedisProto,
        *,
        timeout_s: float = 2.0,
    ) -> None:
        """Initialize the probe.

        Args:
            session_factory: Async SQLAlchemy session factory bound to the DB.
            redis: Async Redis client instance for connectivity checks (Protocol).
            timeout_s: Upper bound for each individual probe.
        """
        self._session_factory = session_factory
        self._redis: RedisProto = redis
        self._timeout_s = timeout_s

    async def db(self) -> tuple[bool, str | None]:
        """Probe the store using a trivial ``SELECT 1``."""
        try:
            async with asyncio.timeout(self._timeout_s), self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as exc:  # reported, not raised
            return False, str(exc) or type(exc).__name__
        return True, None

    async def redis(self) -> tuple[bool, str | None]:
        """Probe Redis using ``PING``."""
        try:
            async with asyncio.timeout(self._timeout_s):
                pong = await self._redis.ping()
        except Exception as exc:  # reported, not raised
            return False, str(exc) or type(exc).__name__
        if not pong:
            return False, "unexpected PONG value"
        return True, None
