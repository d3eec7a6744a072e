# src/cachebench_api/adapters/repositories/record_repository.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""
Record Repository (SQLAlchemy) and the Store Port adapter built on it.

Purpose:
    * ``RecordRepository``: session-scoped point read/update on ``records``.
    * ``SqlRecordStore``: long-lived implementation of the domain
      ``RecordStore`` Protocol. Opens one session per call from the shared
      sessionmaker, commits updates, bounds every call with a timeout, and
      translates driver failures into ``StoreUnavailable``.

Layer:
    adapters

Notes:
    ``SqlRecordStore`` holds no session between calls, so it is safe to share
    across concurrent requests and with detached write-behind tasks.
"""

from __future__ import annotations

import asyncio
import time
from contextlib import suppress

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cachebench_api.adapters.repositories.base_repository import BaseRepository
from cachebench_api.domain.entities.record import Record
from cachebench_api.domain.exceptions.records import StoreUnavailable
from cachebench_api.infrastructure.database.models.records import RecordRow
from cachebench_api.infrastructure.observability.metrics import (
    get_store_operation_duration_seconds,
    get_store_operations_total,
)

_STORE_ERRORS = (SQLAlchemyError, OSError, TimeoutError)


class RecordRepository(BaseRepository[RecordRow]):
    """SQLAlchemy repository for the ``records`` table."""

    async def get(self, record_id: str) -> RecordRow | None:
        """Return the row for ``record_id``, or ``None``."""
        stmt = select(RecordRow).where(RecordRow.id == record_id).limit(1)
        return await self.fetch_optional(stmt)

    async def update_fields(self, record_id: str, *, name: str, price: float) -> int:
        """Update ``name`` and ``price`` for ``record_id``.

        Returns:
            Number of rows matched (0 or 1).
        """
        stmt = (
            update(RecordRow)
            .where(RecordRow.id == record_id)
            .values(name=name, price=price)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return int(result.rowcount or 0)


def _observe(operation: str, outcome: str, started: float) -> None:
    duration = time.perf_counter() - started
    with suppress(Exception):
        get_store_operation_duration_seconds().labels(
            operation=operation, outcome=outcome
        ).observe(duration)
        get_store_operations_total().labels(operation=operation, outcome=outcome).inc()


class SqlRecordStore:
    """RecordStore implementation backed by an async SQLAlchemy sessionmaker."""

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        *,
        timeout_s: float,
    ) -> None:
        """Initialize the store.

        Args:
            sessionmaker: Shared async session factory.
            timeout_s: Upper bound in seconds for each read or update.
        """
        self._sessionmaker = sessionmaker
        self._timeout_s = timeout_s

    async def get_by_id(self, record_id: str) -> Record | None:
        """Return the record stored under ``record_id``, or ``None``.

        Raises:
            StoreUnavailable: On driver failure or timeout.
        """
        started = time.perf_counter()
        try:
            async with asyncio.timeout(self._timeout_s), self._sessionmaker() as session:
                row = await RecordRepository(session).get(record_id)
                record = (
                    Record(id=row.id, name=row.name, price=float(row.price))
                    if row is not None
                    else None
                )
        except _STORE_ERRORS as exc:
            _observe("read", "error", started)
            raise StoreUnavailable(
                f"store read failed: {exc!r}", details={"id": record_id, "operation": "read"}
            ) from exc

        _observe("read", "found" if record is not None else "not_found", started)
        return record

    async def update_by_id(self, record_id: str, *, name: str, price: float) -> bool:
        """Update ``name``/``price`` for ``record_id`` and commit.

        Returns:
            ``True`` if a row matched, ``False`` otherwise.

        Raises:
            StoreUnavailable: On driver failure or timeout (transaction rolled back).
        """
        started = time.perf_counter()
        try:
            async with asyncio.timeout(self._timeout_s), self._sessionmaker() as session:
                async with session.begin():
                    matched = await RecordRepository(session).update_fields(
                        record_id, name=name, price=price
                    )
        except _STORE_ERRORS as exc:
            _observe("update", "error", started)
            raise StoreUnavailable(
                f"store update failed: {exc!r}",
                details={"id": record_id, "operation": "update"},
            ) from exc

        _observe("update", "updated" if matched else "no_row", started)
        return matched > 0
