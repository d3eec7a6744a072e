# src/cachebench_api/application/use_cases/records/update_record_write_through.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""
Use Case: Update Record (Write-Through)

Purpose:
    Update the store, then mirror the full record into the cache, before
    acknowledging.

Failure semantics:
    * Store failure: StoreUnavailable; the cache is not touched.
    * Cache failure after the store committed: CacheUnavailable. The store
      keeps the new values and the cache entry may be stale or absent. This
      inconsistency is logged at CRITICAL and not repaired (no rollback,
      no retry).

Layer: application/use_cases
"""

from __future__ import annotations

from cachebench_api.application.interfaces.cache_port import CachePort
from cachebench_api.application.schemas.dto.records import RecordDTO
from cachebench_api.application.use_cases.records.cache_keys import (
    RECORD_CACHE_TTL_S,
    record_cache_key,
)
from cachebench_api.domain.exceptions.records import CacheUnavailable, StoreUnavailable
from cachebench_api.domain.interfaces.repositories.record_store import RecordStore
from cachebench_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


class UpdateRecordWriteThrough:
    """Use case to update a record through the write-through pattern."""

    def __init__(self, cache: CachePort, store: RecordStore) -> None:
        """Initialize the use case.

        Args:
            cache: Cache port.
            store: Record store (system of record).
        """
        self._cache = cache
        self._store = store

    async def execute(self, dto: RecordDTO) -> None:
        """Apply ``dto`` to the store, then to the cache.

        Args:
            dto: Full record payload.

        Raises:
            StoreUnavailable: If the store update fails (cache untouched).
            CacheUnavailable: If the cache write fails after the store committed.
        """
        record = dto.to_record()
        key = record_cache_key(record.id)

        try:
            matched = await self._store.update_by_id(
                record.id, name=record.name, price=record.price
            )
        except StoreUnavailable:
            logger.error("write_through.store_failed", extra={"extra": {"id": record.id}})
            raise

        if not matched:
            logger.warning("write_through.no_row_matched", extra={"extra": {"id": record.id}})

        payload = RecordDTO.from_record(record).to_wire()
        try:
            await self._cache.set(key, payload, ttl=RECORD_CACHE_TTL_S)
        except CacheUnavailable as exc:
            logger.critical(
                "write_through.store_updated_cache_failed",
                extra={"extra": {"id": record.id, "key": key, "error": str(exc)}},
            )
            raise

        logger.info("write_through.succeeded", extra={"extra": {"id": record.id}})
