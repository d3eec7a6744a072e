# src/cachebench_api/dependencies/records.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Dependency wiring for the record consistency handlers.

Overview:
    Provides FastAPI dependency providers that build the three use cases from
    the shared ports published on ``app.state`` by the bootstrap lifespan.

Layer:
    dependencies

Design:
    * Ports (cache, store, scheduler) are process-wide and shared by all
      requests; use cases are cheap and built per request.
    * Tests either set ``app.state`` attributes directly or override the
      use-case providers through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from cachebench_api.application.interfaces.cache_port import CachePort
from cachebench_api.application.interfaces.write_behind import WriteBehindScheduler
from cachebench_api.application.schemas.dto.records import RecordDTO
from cachebench_api.application.use_cases.records.get_record_cache_aside import (
    GetRecordCacheAside,
)
from cachebench_api.application.use_cases.records.update_record_write_behind import (
    UpdateRecordWriteBehind,
)
from cachebench_api.application.use_cases.records.update_record_write_through import (
    UpdateRecordWriteThrough,
)
from cachebench_api.config.settings import Settings
from cachebench_api.domain.interfaces.repositories.record_store import RecordStore


def _state_attr(request: Request, name: str) -> object:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"app.state.{name} is not initialized; is the lifespan running?")
    return value


def get_app_settings(request: Request) -> Settings:
    return _state_attr(request, "settings")  # type: ignore[return-value]


def get_record_cache(request: Request) -> CachePort:
    return _state_attr(request, "record_cache")  # type: ignore[return-value]


def get_record_store(request: Request) -> RecordStore:
    return _state_attr(request, "record_store")  # type: ignore[return-value]


def get_write_behind_scheduler(request: Request) -> WriteBehindScheduler:
    return _state_attr(request, "write_behind")  # type: ignore[return-value]


async def get_record_body(request: Request) -> RecordDTO:
    """Decode the request body as a record document.

    The body is read as JSON whatever the declared ``Content-Type`` (or none),
    and on any HTTP method the write routes accept.

    Raises:
        RequestValidationError: If the body is not a valid record document.
    """
    raw = await request.body()
    try:
        return RecordDTO.from_wire(raw)
    except ValidationError as exc:
        raise RequestValidationError(
            [{**err, "loc": ("body", *err["loc"])} for err in exc.errors(include_url=False)]
        ) from exc


def get_cache_aside_uc(
    cache: Annotated[CachePort, Depends(get_record_cache)],
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> GetRecordCacheAside:
    """Provide the cache-aside read use case."""
    return GetRecordCacheAside(cache=cache, store=store)


def get_write_through_uc(
    cache: Annotated[CachePort, Depends(get_record_cache)],
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> UpdateRecordWriteThrough:
    """Provide the write-through update use case."""
    return UpdateRecordWriteThrough(cache=cache, store=store)


def get_write_behind_uc(
    cache: Annotated[CachePort, Depends(get_record_cache)],
    store: Annotated[RecordStore, Depends(get_record_store)],
    scheduler: Annotated[WriteBehindScheduler, Depends(get_write_behind_scheduler)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UpdateRecordWriteBehind:
    """Provide the write-behind update use case with the configured delay."""
    return UpdateRecordWriteBehind(
        cache=cache,
        store=store,
        scheduler=scheduler,
        delay_s=settings.write_behind_delay_s,
    )
