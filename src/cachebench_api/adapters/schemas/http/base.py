# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""
Base HTTP Schema (Adapters Layer)

Purpose:
    Canonical Pydantic base for adapter-layer HTTP schemas.

Layer: adapters/schemas/http

Notes:
    Transport-facing only. Application DTOs must not import from this module.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseHTTPSchema(BaseModel):
    """Base class for all HTTP-facing schemas."""

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        use_enum_values=True,
    )
