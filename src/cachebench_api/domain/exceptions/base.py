# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Root of the Cache-Bench error hierarchy.

Use cases raise subclasses of :class:`DomainError`; the HTTP layer turns them
into error envelopes by class (see ``infrastructure/http/errors.py``).

Layer:
    domain/exceptions
"""
from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """A failure the HTTP boundary knows how to report.

    Attributes:
        code: Machine-readable error code, copied into ``error.code``.
        details: Structured context. Echoed to clients only for 4xx errors;
            server-side failures keep it for logs.
    """

    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = dict(details) if details else {}
