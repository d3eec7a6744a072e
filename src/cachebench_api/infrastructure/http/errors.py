# src/cachebench_api/infrastructure/http/errors.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""HTTP error envelope and exception handlers.

Every error response has the shape::

    {"error": {"code": str, "http_status": int, "message": str,
               "details": {...}?, "trace_id": str?}}

Request validation failures (including malformed JSON bodies) are client
errors and map to 400.
"""

from __future__ import annotations

import math
from typing import Any, Final

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.responses import Response

from cachebench_api.domain.exceptions.base import DomainError
from cachebench_api.domain.exceptions.records import (
    CacheUnavailable,
    InvalidRecordRequest,
    RecordNotFound,
    StoreUnavailable,
)
from cachebench_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

_DOMAIN_STATUS: Final[dict[type[DomainError], int]] = {
    InvalidRecordRequest: 400,
    RecordNotFound: 404,
    StoreUnavailable: 500,
    CacheUnavailable: 500,
}


def _trace_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
    }
    if details is not None:
        err["details"] = details
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


def _finite(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return repr(value)
    if isinstance(value, dict):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_finite(v) for v in value]
    return value


def validation_error_details(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Return the validation errors in strict-JSON form.

    The rejected ``input`` is not echoed, and any non-finite float left in
    the error context is rendered as its ``repr``.
    """
    return [
        _finite(jsonable_encoder({k: v for k, v in err.items() if k not in ("input", "url")}))
        for err in exc.errors()
    ]


def status_for(exc: DomainError) -> int:
    """Return the HTTP status for a domain error (500 when unmapped)."""
    for exc_type, status in _DOMAIN_STATUS.items():
        if isinstance(exc, exc_type):
            return status
    return 500


def domain_error_response(request: Request, exc: DomainError) -> JSONResponse:
    """Build the error envelope response for a domain error.

    Server-side failure details (driver messages) are not echoed to clients.
    """
    status = status_for(exc)
    message = str(exc) if status < 500 else "Internal server error"
    payload = error_envelope(
        code=exc.code,
        http_status=status,
        message=message,
        details=jsonable_encoder(exc.details) if status < 500 and exc.details else None,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=status, content=payload)


async def handle_domain_error(request: Request, exc: DomainError) -> Response:
    return domain_error_response(request, exc)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> Response:
    payload = error_envelope(
        code="BAD_REQUEST",
        http_status=400,
        message="Request validation failed",
        details={"errors": validation_error_details(exc)},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=400, content=payload)


async def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    payload = error_envelope(
        code="HTTP_ERROR",
        http_status=exc.status_code,
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        details=None if isinstance(exc.detail, str) else {"detail": exc.detail},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    logger.exception(
        "unhandled_exception",
        exc_info=exc,
        extra={"extra": {"path": request.url.path}},
    )
    payload = error_envelope(
        code="INTERNAL_ERROR",
        http_status=500,
        message="Internal server error",
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=500, content=payload)
