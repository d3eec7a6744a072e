# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""
Record Entity

Purpose:
    Immutable domain representation of a cacheable record (no I/O). The store
    row is the system of record; cache entries are derived projections of the
    full field set.

Layer: domain/entities
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class Record(BaseEntity):
    """Cacheable record.

    Args:
        id: Opaque, non-empty identifier. Store primary key and cache key suffix.
        name: Human-readable label.
        price: Numeric value. Negative values are accepted; non-finite are not.

    Raises:
        ValueError: If ``id`` is empty or ``price`` is NaN/infinite.
    """

    id: str
    name: str
    price: float

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id must be a non-empty string")
        if not math.isfinite(self.price):
            raise ValueError("price must be a finite number")
