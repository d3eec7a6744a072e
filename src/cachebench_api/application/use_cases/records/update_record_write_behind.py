# src/cachebench_api/application/use_cases/records/update_record_write_behind.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""
Use Case: Update Record (Write-Behind)

Purpose:
    Write the record to the cache, hand a delayed store update to the
    write-behind scheduler, and return so the caller can be acknowledged
    before the store is touched.

Failure semantics:
    * Cache failure: CacheUnavailable and nothing is scheduled, so an
      acknowledgement always implies the cache holds the new value.
    * Deferred store failure: recorded on the job and logged by the
      scheduler; never retried and never reported to the caller.
    * Pending writes are lost if the process stops before the delay elapses.

Layer: application/use_cases
"""

from __future__ import annotations

from cachebench_api.application.interfaces.cache_port import CachePort
from cachebench_api.application.interfaces.write_behind import (
    WriteBehindJob,
    WriteBehindScheduler,
)
from cachebench_api.application.schemas.dto.records import RecordDTO
from cachebench_api.application.use_cases.records.cache_keys import (
    RECORD_CACHE_TTL_S,
    record_cache_key,
)
from cachebench_api.domain.entities.record import Record
from cachebench_api.domain.exceptions.records import CacheUnavailable
from cachebench_api.domain.interfaces.repositories.record_store import RecordStore
from cachebench_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


class UpdateRecordWriteBehind:
    """Use case to update a record through the write-behind pattern.

    Args:
        cache: Cache port.
        store: Record store used by the deferred write.
        scheduler: Runs the deferred write detached from the request.
        delay_s: Fixed delay before the store update is attempted.
    """

    def __init__(
        self,
        cache: CachePort,
        store: RecordStore,
        scheduler: WriteBehindScheduler,
        *,
        delay_s: float,
    ) -> None:
        self._cache = cache
        self._store = store
        self._scheduler = scheduler
        self._delay_s = delay_s

    async def execute(self, dto: RecordDTO) -> WriteBehindJob:
        """Cache ``dto`` now and schedule the store update.

        Args:
            dto: Full record payload.

        Returns:
            WriteBehindJob: Handle for the deferred store update.

        Raises:
            CacheUnavailable: If the cache write fails (nothing scheduled).
        """
        record = dto.to_record()
        key = record_cache_key(record.id)

        payload = RecordDTO.from_record(record).to_wire()
        try:
            await self._cache.set(key, payload, ttl=RECORD_CACHE_TTL_S)
        except CacheUnavailable as exc:
            logger.error(
                "write_behind.cache_failed",
                extra={"extra": {"id": record.id, "key": key, "error": str(exc)}},
            )
            raise

        job = self._scheduler.schedule(
            record_id=record.id,
            operation=lambda: self._persist(record),
            delay_s=self._delay_s,
        )
        logger.info(
            "write_behind.cache_updated",
            extra={"extra": {"id": record.id, "job_id": job.job_id}},
        )
        return job

    async def _persist(self, record: Record) -> None:
        """Deferred step: mirror ``record`` into the store."""
        matched = await self._store.update_by_id(record.id, name=record.name, price=record.price)
        if not matched:
            logger.warning("write_behind.no_row_matched", extra={"extra": {"id": record.id}})
