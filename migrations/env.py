# migrations/env.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Alembic Environment (migrations/env.py)

Purpose:
    Configure Alembic for the Cache-Bench SQLAlchemy models across offline and
    online (async) migration runs.

Design:
    - Loads the database URL from environment variables or alembic.ini.
    - Refuses to run if ENVIRONMENT is missing (prevents "wrong DB" footguns).
    - Uses the project Declarative Base for autogenerate (`target_metadata`).
    - Supports async engines for "online" migrations while keeping "offline"
      output stable and deterministic.
    - Emits masked connection information to the log (no credentials).

Environment variables:
    ENVIRONMENT         Required. Any of the Settings environments.
    DATABASE_URL        Primary database URL (preferred).
    ECHO_SQL            If "1", enable SQL echo in online runs.
    ALEMBIC_SHOW_URL    If "1", log masked URL during runs.

Usage:
    ENVIRONMENT=development alembic upgrade head
"""

from __future__ import annotations

import asyncio
import logging
import logging.config
import os
from typing import Any
from urllib.parse import urlparse, urlunparse

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from cachebench_api.infrastructure.database.models import records as _record_models  # noqa: F401
from cachebench_api.infrastructure.database.models.base import metadata as BaseMetadata

config = context.config

if config.config_file_name is not None:
    logging.config.fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")


def _mask_url(url: str) -> str:
    """Return a masked representation of a database URL for safe logging."""
    try:
        parts = urlparse(url)
        user = parts.username or ""
        host = parts.hostname or ""
        port = f":{parts.port}" if parts.port else ""
        auth = f"{user}:****@" if user else ""
        return urlunparse((parts.scheme, f"{auth}{host}{port}", parts.path or "", "", "", ""))
    except ValueError:  # pragma: no cover
        return "<masked>"


def _get_db_url() -> str:
    """Resolve the database URL (`DATABASE_URL`, then alembic.ini `sqlalchemy.url`)."""
    env_url = os.getenv("DATABASE_URL")
    if env_url:
        return env_url

    ini_url = config.get_main_option("sqlalchemy.url")
    if ini_url:
        return ini_url

    raise RuntimeError("Database URL not configured (DATABASE_URL/sqlalchemy.url).")


def _require_environment() -> str:
    env = (os.getenv("ENVIRONMENT") or "").strip().lower()
    if not env:
        raise RuntimeError(
            "ENVIRONMENT is required for migrations (e.g., ENVIRONMENT=development). "
            "Refusing to run without an explicit environment."
        )
    return env


def _maybe_log_url(url: str) -> None:
    if os.getenv("ALEMBIC_SHOW_URL") == "1":
        logger.info("Using DATABASE_URL (masked): %s", _mask_url(url))


target_metadata = BaseMetadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (SQL script output)."""
    _require_environment()
    url = _get_db_url()
    _maybe_log_url(url)

    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def _online_engine_kwargs() -> dict[str, Any]:
    return {
        "echo": os.getenv("ECHO_SQL") == "1",
        "poolclass": pool.NullPool,
    }


def _configure_and_run(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


async def _run_migrations_async() -> None:
    """Run migrations in 'online' mode using an async engine."""
    _require_environment()
    url = _get_db_url()
    _maybe_log_url(url)

    connectable: AsyncEngine = create_async_engine(url, **_online_engine_kwargs())

    async with connectable.connect() as connection:
        await connection.run_sync(_configure_and_run)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Entry point used by Alembic for online migrations (async safe)."""
    asyncio.run(_run_migrations_async())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
