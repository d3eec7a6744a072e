# src/cachebench_api/application/schemas/dto/records.py
# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Application DTOs for Records.

Synopsis:
    Strict (Pydantic v2) DTO for the record wire form. The same JSON bytes are
    written to the cache and returned to HTTP callers, so serialization lives
    here and nowhere else.

Wire form:
    ``{"id": string, "name": string, "price": number}``

Layer:
    application/schemas/dto
"""

from __future__ import annotations

from typing import Annotated, Final

from pydantic import Field, StrictFloat, StrictStr

from cachebench_api.application.schemas.dto.base import BaseDTO
from cachebench_api.domain.entities.record import Record

#: Width of the `records.id` and `records.name` columns.
RECORD_TEXT_MAX_LENGTH: Final[int] = 255


class RecordDTO(BaseDTO):
    """Record wire DTO.

    Attributes:
        id: Non-empty record identifier of at most 255 characters (JSON string;
            numbers are rejected).
        name: Human-readable label of at most 255 characters, kept verbatim.
        price: Finite JSON number. Negative values are accepted.
    """

    id: Annotated[
        StrictStr, Field(min_length=1, max_length=RECORD_TEXT_MAX_LENGTH, examples=["42"])
    ]
    name: Annotated[StrictStr, Field(max_length=RECORD_TEXT_MAX_LENGTH, examples=["Widget"])]
    price: Annotated[StrictFloat, Field(allow_inf_nan=False, examples=[9.99])]

    @classmethod
    def from_record(cls, record: Record) -> RecordDTO:
        """Build the DTO for a domain record."""
        return cls(id=record.id, name=record.name, price=record.price)

    @classmethod
    def from_wire(cls, raw: bytes | str) -> RecordDTO:
        """Parse the JSON wire form.

        Raises:
            pydantic.ValidationError: If ``raw`` is not a valid record document.
        """
        return cls.model_validate_json(raw)

    def to_record(self) -> Record:
        """Return the domain record for this DTO."""
        return Record(id=self.id, name=self.name, price=self.price)

    def to_wire(self) -> bytes:
        """Serialize to the compact JSON wire form (UTF-8)."""
        return self.model_dump_json().encode("utf-8")


__all__ = ["RECORD_TEXT_MAX_LENGTH", "RecordDTO"]
