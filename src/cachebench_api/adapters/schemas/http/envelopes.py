# src/cachebench_api/adapters/schemas/http/envelopes.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""HTTP Envelopes (Adapters Layer).

Purpose:
    OpenAPI models for the error envelope produced by
    ``infrastructure/http/errors.py``.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from cachebench_api.adapters.schemas.http.base import BaseHTTPSchema

__all__ = ["ErrorObject", "ErrorEnvelope"]


class ErrorObject(BaseHTTPSchema):
    """Structured error object inside ErrorEnvelope."""

    code: str = Field(
        ...,
        description=(
            "Stable machine-readable error code, e.g. BAD_REQUEST, RECORD_NOT_FOUND, "
            "STORE_UNAVAILABLE, CACHE_UNAVAILABLE, INTERNAL_ERROR."
        ),
    )
    http_status: int = Field(..., description="Associated HTTP status.")
    message: str = Field(..., description="Human-readable message.")
    details: dict[str, Any] | None = Field(default=None, description="Optional details.")
    trace_id: str | None = Field(default=None, description="Request correlation id.")


class ErrorEnvelope(BaseHTTPSchema):
    """Top-level error envelope."""

    error: ErrorObject
