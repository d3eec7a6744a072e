# src/cachebench_api/adapters/repositories/base_repository.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""
BaseRepository: shared repository foundation.

Purpose:
    Shared mechanics for repositories: session ownership and safe fetch
    helpers.

Layer: adapters / repositories

Notes:
    * No business logic, no domain decisions.
    * Repositories never commit; the caller owning the session does.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

TModel = TypeVar("TModel")


class BaseRepository(Generic[TModel]):  # noqa: UP046
    """Abstract base class for all repositories."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session bound to the target database.
        """
        self._session: AsyncSession = session

    async def fetch_optional(self, stmt: Select[Any]) -> TModel | None:
        """Execute ``stmt`` and return the single scalar result or ``None``."""
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()
