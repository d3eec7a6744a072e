# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""HTTP Schemas package (Adapters Layer).

Purpose:
    Public, adapter-facing HTTP schema surface: the error envelope and the
    write-behind job status model. BaseHTTPSchema stays internal.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from cachebench_api.adapters.schemas.http.envelopes import ErrorEnvelope, ErrorObject
from cachebench_api.adapters.schemas.http.write_behind import WriteBehindJobHTTP

__all__ = ["ErrorObject", "ErrorEnvelope", "WriteBehindJobHTTP"]
