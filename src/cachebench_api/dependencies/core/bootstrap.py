# src/cachebench_api/dependencies/core/bootstrap.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Core bootstrap for infrastructure (DB, Redis, write-behind scheduler).

This module owns the lifecycle of shared infrastructure used by the FastAPI app.
Configuration is read from Settings, and all heavy lifting is delegated to the
infrastructure modules.

The single public surface is :func:`bootstrap`, an async context manager that
yields the resolved Settings and the process-wide ports.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI

from cachebench_api.adapters.repositories.record_repository import SqlRecordStore
from cachebench_api.config.settings import Settings, get_settings
from cachebench_api.infrastructure.caching.record_cache import RedisRecordCache
from cachebench_api.infrastructure.health.probe import DbRedisProbe
from cachebench_api.infrastructure.logging.logger import get_json_logger
from cachebench_api.infrastructure.scheduling.write_behind import InProcessWriteBehindScheduler

logger = get_json_logger(__name__)


@dataclass
class BootstrapState:
    """State yielded by the bootstrap context manager."""

    settings: Settings
    record_cache: RedisRecordCache
    record_store: SqlRecordStore
    write_behind: InProcessWriteBehindScheduler
    health_probe: DbRedisProbe


@asynccontextmanager
async def bootstrap(app: FastAPI) -> AsyncGenerator[BootstrapState, None]:
    """Initialize and teardown shared infrastructure.

    Responsibilities:
        * Load application settings.
        * Initialize DB engine/sessionmaker and the Redis client.
        * Build the cache port, the store port and the write-behind scheduler.
        * On exit, cancel pending write-behind jobs (marked lost), then close
          Redis and dispose the DB engine, even on error.

    Args:
        app: FastAPI application instance.

    Yields:
        BootstrapState: Resolved settings and shared ports.
    """
    settings: Settings = get_settings()
    logger.info("bootstrap.start")

    # Import infrastructure modules here so tests can monkeypatch their functions.
    import cachebench_api.infrastructure.caching.redis_client as redis_client
    import cachebench_api.infrastructure.database.session as db_session

    db_session.init_engine_and_sessionmaker(settings)
    redis_client.init_redis(settings)

    sessionmaker = db_session.get_sessionmaker()
    redis = redis_client.get_redis_client()

    scheduler = InProcessWriteBehindScheduler(max_jobs=settings.write_behind_max_jobs)
    state = BootstrapState(
        settings=settings,
        record_cache=RedisRecordCache(redis),
        record_store=SqlRecordStore(sessionmaker, timeout_s=settings.store_timeout_s),
        write_behind=scheduler,
        health_probe=DbRedisProbe(sessionmaker, redis, timeout_s=settings.store_timeout_s),
    )

    try:
        yield state
    finally:
        # Pending deferred writes are lost on shutdown; each is logged.
        try:
            await scheduler.aclose()
        except Exception:
            logger.exception("bootstrap.write_behind_close_failed")

        try:
            await redis_client.close_redis()
        except Exception:
            logger.exception("bootstrap.redis_close_failed")

        try:
            await db_session.dispose_engine()
        except Exception:
            logger.exception("bootstrap.db_dispose_failed")

        logger.info("bootstrap.stop")

