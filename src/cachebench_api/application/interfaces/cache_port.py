# src/cachebench_api/application/interfaces/cache_port.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Application Interface: Cache Port.

Synopsis:
    Minimal byte-oriented cache behavior used by the consistency-pattern use
    cases. Enables swapping Redis, in-memory, or other cache implementations.

Layer:
    application/interfaces
"""

from __future__ import annotations

from typing import Protocol


class CachePort(Protocol):
    """Key-value cache with TTL semantics.

    Implementations store opaque bytes, apply TTL in seconds, and raise
    :class:`~cachebench_api.domain.exceptions.records.CacheUnavailable` on
    any backend failure (including timeouts).
    """

    async def get(self, key: str) -> bytes | None:
        """Get the value stored under ``key``.

        Args:
            key: Fully-qualified cache key.

        Returns:
            Stored bytes if present, else ``None``.
        """

    async def set(self, key: str, value: bytes, *, ttl: int) -> None:
        """Store ``value`` under ``key`` with a TTL.

        Args:
            key: Fully-qualified cache key.
            value: Opaque payload.
            ttl: Time-to-live in seconds.
        """
