# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Declarative Base for Cache-Bench persistence models.

Defines a project-wide SQLAlchemy Declarative Base with deterministic naming
conventions so Alembic diffs stay stable. Persistence only; no domain logic.
"""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

__all__ = ["metadata", "Base", "ReprMixin"]

#: Deterministic naming conventions for Alembic-friendly diffs.
#: Ref: https://alembic.sqlalchemy.org/en/latest/naming.html
NAMING_CONVENTIONS: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTIONS)


class Base(DeclarativeBase):
    """Declarative Base for all ORM models."""

    metadata = metadata


class ReprMixin:
    """Mixin providing a concise column-based ``__repr__``."""

    def __repr__(self) -> str:
        table = getattr(self, "__table__", None)
        if table is None:
            return f"{type(self).__name__}()"
        attrs = ", ".join(f"{col.key}={getattr(self, col.key, None)!r}" for col in table.columns)
        return f"{type(self).__name__}({attrs})"
