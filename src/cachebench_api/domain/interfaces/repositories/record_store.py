# src/cachebench_api/domain/interfaces/repositories/record_store.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Domain-facing interface for the record store (system of record).

Notes:
    * This interface is persistence-agnostic. The concrete adapter in
      ``adapters/repositories/record_repository.py`` satisfies it with
      SQLAlchemy; tests satisfy it with in-memory fakes.
    * Implementations own their connections and must return or fail within
      a bounded time. Every failure, including a timeout, is raised as
      :class:`~cachebench_api.domain.exceptions.records.StoreUnavailable`.
"""

from __future__ import annotations

from typing import Protocol

from cachebench_api.domain.entities.record import Record


class RecordStore(Protocol):
    """Point read/update by primary key."""

    async def get_by_id(self, record_id: str) -> Record | None:
        """Return the record stored under ``record_id``.

        Args:
            record_id: Primary key.

        Returns:
            The record, or ``None`` when no row exists.

        Raises:
            StoreUnavailable: On any store failure.
        """
        raise NotImplementedError

    async def update_by_id(self, record_id: str, *, name: str, price: float) -> bool:
        """Update ``name`` and ``price`` of the row matching ``record_id``.

        Rows are never created here. Updating an id with no row is not an
        error; the return value reports whether a row matched.

        Args:
            record_id: Primary key.
            name: New name.
            price: New price.

        Returns:
            ``True`` if a row was updated, ``False`` if none matched.

        Raises:
            StoreUnavailable: On any store failure.
        """
        raise NotImplementedError
