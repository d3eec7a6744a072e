# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Cache key and TTL policy shared by the record use cases.

Layer: application/use_cases
"""

from __future__ import annotations

from typing import Final

#: Fixed TTL applied to every record cache write (5 minutes).
RECORD_CACHE_TTL_S: Final[int] = 300

_RECORD_KEY_PREFIX: Final[str] = "record:"


def record_cache_key(record_id: str) -> str:
    """Return the cache key for ``record_id`` (``record:<id>``)."""
    return _RECORD_KEY_PREFIX + record_id
