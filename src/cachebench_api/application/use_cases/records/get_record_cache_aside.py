# src/cachebench_api/application/use_cases/records/get_record_cache_aside.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""
Use Case: Get Record (Cache-Aside)

Purpose:
    Serve a record from the cache when present; otherwise read the store,
    warm the cache on a best-effort basis, and serve the store's value.

Behavior:
    * Hit: cached bytes are returned verbatim; the store is not consulted,
      so a changed store row stays invisible until the entry expires.
    * Cache read errors count as misses.
    * Not found in the store: RecordNotFound, and nothing is cached.
    * Cache population failures are logged and never fail the read.

Layer: application/use_cases
"""

from __future__ import annotations

from contextlib import suppress

from cachebench_api.application.interfaces.cache_port import CachePort
from cachebench_api.application.schemas.dto.records import RecordDTO
from cachebench_api.application.use_cases.records.cache_keys import (
    RECORD_CACHE_TTL_S,
    record_cache_key,
)
from cachebench_api.domain.exceptions.records import (
    CacheUnavailable,
    InvalidRecordRequest,
    RecordNotFound,
)
from cachebench_api.domain.interfaces.repositories.record_store import RecordStore
from cachebench_api.infrastructure.logging.logger import get_json_logger
from cachebench_api.infrastructure.observability.metrics import (
    get_cache_population_failures_total,
)

logger = get_json_logger(__name__)


class GetRecordCacheAside:
    """Use case to read a record through the cache-aside pattern.

    Args:
        cache: Cache port.
        store: Record store (system of record).

    Raises:
        InvalidRecordRequest: If the identifier is empty.
        RecordNotFound: If the store has no row for the identifier.
        StoreUnavailable: If the store read fails.
    """

    def __init__(self, cache: CachePort, store: RecordStore) -> None:
        self._cache = cache
        self._store = store

    async def execute(self, record_id: str | None) -> bytes:
        """Return the serialized record for ``record_id``.

        Args:
            record_id: Record identifier.

        Returns:
            bytes: JSON wire form of the record.
        """
        if not record_id:
            raise InvalidRecordRequest("record id is required")

        key = record_cache_key(record_id)

        # 1. Cache lookup; any cache failure degrades to a miss.
        cached: bytes | None = None
        try:
            cached = await self._cache.get(key)
        except CacheUnavailable as exc:
            logger.warning(
                "cache_aside.cache_read_failed",
                extra={"extra": {"key": key, "error": str(exc)}},
            )

        if cached is not None:
            logger.info("cache_aside.hit", extra={"extra": {"key": key}})
            return cached

        logger.info("cache_aside.miss", extra={"extra": {"key": key}})

        # 2. Store read.
        record = await self._store.get_by_id(record_id)
        if record is None:
            raise RecordNotFound(f"record {record_id!r} not found", details={"id": record_id})

        payload = RecordDTO.from_record(record).to_wire()

        # 3. Best-effort cache population.
        try:
            await self._cache.set(key, payload, ttl=RECORD_CACHE_TTL_S)
        except CacheUnavailable as exc:
            with suppress(Exception):
                get_cache_population_failures_total().inc()
            logger.warning(
                "cache_aside.cache_populate_failed",
                extra={"extra": {"key": key, "error": str(exc)}},
            )

        return payload
