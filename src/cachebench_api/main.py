# src/cachebench_api/main.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""
Application Entry (Adapters Bootstrap)

Synopsis:
    FastAPI bootstrap that wires middleware, exception handlers, and all
    routers. Provides an application factory (`create_app`) used by uvicorn.

Design:
    • Bootstrap only (no business logic): routers + middleware + handlers.
    • Lifespan initializes DB/Redis/scheduler and tears them down safely;
      the resulting ports are published on ``app.state``.
    • Root JSON logging configured when the factory runs.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response as StarletteResponse

from cachebench_api.adapters.routers import api_router, metrics_router
from cachebench_api.config.settings import Settings, get_settings
from cachebench_api.dependencies.core.bootstrap import bootstrap
from cachebench_api.domain.exceptions.base import DomainError
from cachebench_api.infrastructure.http.errors import (
    handle_domain_error,
    handle_http_exception,
    handle_unhandled_exception,
    handle_validation_error,
)
from cachebench_api.infrastructure.logging.logger import (
    configure_root_logging,
    get_json_logger,
)
from cachebench_api.infrastructure.middleware.request_id import RequestIdMiddleware

logger = get_json_logger(__name__)


def _stable_operation_id(route: APIRoute) -> str:
    """Deterministic operationId, e.g. ``"get,post,put__test_write-through"``."""
    methods = ",".join(sorted(route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "")
    return f"{methods.lower()}_{path.lower()}"


@asynccontextmanager
async def runtime_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize and teardown shared infrastructure via the core bootstrap.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control back to FastAPI to serve requests.
    """
    async with bootstrap(app) as state:
        app.state.settings = state.settings
        app.state.record_cache = state.record_cache
        app.state.record_store = state.record_store
        app.state.write_behind = state.write_behind
        app.state.health_probe = state.health_probe
        yield


def _patch_exception_handlers(app: FastAPI) -> None:
    """Install structured (error envelope) exception handlers."""

    async def _http_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, HTTPException):
            raise exc
        return await handle_http_exception(request, exc)

    async def _validation_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, RequestValidationError):
            raise exc
        return await handle_validation_error(request, exc)

    async def _domain_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, DomainError):
            raise exc
        return await handle_domain_error(request, exc)

    async def _unhandled_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        return await handle_unhandled_exception(request, exc)

    app.add_exception_handler(HTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override; defaults to :func:`get_settings`.

    Returns:
        FastAPI: Fully configured application instance.
    """
    settings = settings or get_settings()
    configure_root_logging(settings.log_level)

    service_version = settings.service_version or "0.0.0"

    app = FastAPI(
        title="Cache-Bench API",
        version=service_version,
        description="Cache-aside, write-through and write-behind over Redis and a SQL store.",
        lifespan=runtime_lifespan,
        docs_url=settings.docs_url,
        openapi_url=settings.openapi_url,
        generate_unique_id_function=_stable_operation_id,
    )

    _patch_exception_handlers(app)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)
    app.include_router(metrics_router)

    logger.info(
        "service_startup",
        extra={
            "extra": {
                "service": settings.service_name,
                "env": settings.environment.value,
                "version": service_version,
                "write_behind_delay_s": settings.write_behind_delay_s,
            }
        },
    )
    return app


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(
        "cachebench_api.main:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
    )
