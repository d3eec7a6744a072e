# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Shared Pydantic configuration for application DTOs.

DTOs here describe the record documents that cross the cache and HTTP
boundaries. They stay free of FastAPI imports so use cases can build and
parse them without a web stack.

Layer: application/schemas/dto
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseDTO(BaseModel):
    """Closed-schema DTO base: unknown keys are rejected, never dropped."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)
