# src/cachebench_api/infrastructure/database/models/records.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Record Models.

Purpose:
    SQLAlchemy model for the ``records`` table, the system of record behind
    every cache entry.

Layer:
    infrastructure

Notes:
    Rows are provisioned outside the service (migrations, seed scripts). The
    service only reads and updates them.
"""

from __future__ import annotations

from sqlalchemy import Double, String
from sqlalchemy.orm import Mapped, mapped_column

from cachebench_api.infrastructure.database.models.base import Base, ReprMixin


class RecordRow(Base, ReprMixin):
    """Persistence model for a record.

    Attributes:
        id: Opaque string primary key.
        name: Human-readable label.
        price: 64-bit floating point value.
    """

    __tablename__ = "records"

    id: Mapped[str] = mapped_column(
        String(length=255),
        primary_key=True,
        nullable=False,
        doc="Opaque record identifier.",
    )
    name: Mapped[str] = mapped_column(
        String(length=255),
        nullable=False,
        doc="Human-readable label.",
    )
    price: Mapped[float] = mapped_column(
        Double(),
        nullable=False,
        doc="Record price (no range constraint).",
    )
