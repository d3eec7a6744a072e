# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""
Record Domain Exceptions

Purpose:
    Error conditions raised by the consistency-pattern use cases and the
    cache/store adapters. Mapped to HTTP by the cache patterns router.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class InvalidRecordRequest(DomainError):
    """Client supplied a missing identifier or an unusable payload."""

    code = "BAD_REQUEST"


class RecordNotFound(DomainError):
    """The store has no row for the requested identifier."""

    code = "RECORD_NOT_FOUND"


class StoreUnavailable(DomainError):
    """The relational store failed or timed out."""

    code = "STORE_UNAVAILABLE"


class CacheUnavailable(DomainError):
    """The key-value cache failed or timed out."""

    code = "CACHE_UNAVAILABLE"
