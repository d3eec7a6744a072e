# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""
Cache Patterns Router.

Summary:
    Exercise endpoints for the three cache/store consistency patterns:

        GET           /test/cache-aside?id=<id>         -> 200 record JSON | 400 | 404 | 500
        GET|POST|PUT  /test/write-through               -> 200 empty | 400 | 500
        GET|POST|PUT  /test/write-behind                -> 202 empty | 400 | 500
        GET           /test/write-behind/jobs/{job_id}  -> 200 job status | 404

Notes:
    * The cache-aside body is the exact cached/serialized bytes, served with
      ``Content-Type: application/json``.
    * Write bodies are decoded as JSON regardless of ``Content-Type``, and
      GET is accepted alongside POST and PUT.
    * The write-behind acknowledgement carries the deferred job id in the
      ``X-Write-Behind-Job`` header.

Layer:
    adapters/routers
"""
from __future__ import annotations

from typing import Annotated, Any, Final

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse

from cachebench_api.adapters.schemas.http.envelopes import ErrorEnvelope
from cachebench_api.adapters.schemas.http.write_behind import WriteBehindJobHTTP
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
from cachebench_api.dependencies.records import (
    get_cache_aside_uc,
    get_record_body,
    get_write_behind_scheduler,
    get_write_behind_uc,
    get_write_through_uc,
)
from cachebench_api.domain.exceptions.base import DomainError
from cachebench_api.infrastructure.http.errors import domain_error_response, error_envelope

WRITE_BEHIND_JOB_HEADER: Final[str] = "X-Write-Behind-Job"

router = APIRouter(prefix="/test", tags=["Cache Patterns"])

_ERRORS: Final[dict[int | str, dict[str, Any]]] = {
    400: {"model": ErrorEnvelope, "description": "Bad request"},
    500: {"model": ErrorEnvelope, "description": "Cache or store failure"},
}

_RECORD_BODY: Final[dict[str, Any]] = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": RecordDTO.model_json_schema()}},
    }
}


@router.get(
    "/cache-aside",
    summary="Read a record through the cache (cache-aside)",
    response_class=Response,
    responses={
        200: {"content": {"application/json": {}}, "description": "Record JSON"},
        404: {"model": ErrorEnvelope, "description": "Record not found"},
        **_ERRORS,
    },
)
async def cache_aside(
    request: Request,
    uc: Annotated[GetRecordCacheAside, Depends(get_cache_aside_uc)],
    record_id: Annotated[str | None, Query(alias="id")] = None,
) -> Response:
    """Return the record for ``id``, from the cache when present."""
    try:
        payload = await uc.execute(record_id)
    except DomainError as exc:
        return domain_error_response(request, exc)
    return Response(content=payload, media_type="application/json")


@router.api_route(
    "/write-through",
    methods=["GET", "POST", "PUT"],
    summary="Update a record in the store, then the cache (write-through)",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    responses=_ERRORS,
    openapi_extra=_RECORD_BODY,
)
async def write_through(
    request: Request,
    body: Annotated[RecordDTO, Depends(get_record_body)],
    uc: Annotated[UpdateRecordWriteThrough, Depends(get_write_through_uc)],
) -> Response:
    """Acknowledge with 200 once both the store and the cache hold ``body``."""
    try:
        await uc.execute(body)
    except DomainError as exc:
        return domain_error_response(request, exc)
    return Response(status_code=status.HTTP_200_OK)


@router.api_route(
    "/write-behind",
    methods=["GET", "POST", "PUT"],
    summary="Update a record in the cache and defer the store write (write-behind)",
    status_code=status.HTTP_202_ACCEPTED,
    response_class=Response,
    responses=_ERRORS,
    openapi_extra=_RECORD_BODY,
)
async def write_behind(
    request: Request,
    body: Annotated[RecordDTO, Depends(get_record_body)],
    uc: Annotated[UpdateRecordWriteBehind, Depends(get_write_behind_uc)],
) -> Response:
    """Acknowledge with 202 once the cache holds ``body``; the store follows later."""
    try:
        job = await uc.execute(body)
    except DomainError as exc:
        return domain_error_response(request, exc)
    return Response(
        status_code=status.HTTP_202_ACCEPTED,
        headers={WRITE_BEHIND_JOB_HEADER: job.job_id},
    )


@router.get(
    "/write-behind/jobs/{job_id}",
    summary="Inspect a deferred write",
    response_model=WriteBehindJobHTTP,
    responses={404: {"model": ErrorEnvelope, "description": "Unknown or evicted job"}},
)
async def write_behind_job(
    request: Request,
    job_id: str,
    scheduler: Annotated[WriteBehindScheduler, Depends(get_write_behind_scheduler)],
) -> WriteBehindJobHTTP | Response:
    job = scheduler.get_job(job_id)
    if job is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=error_envelope(
                code="JOB_NOT_FOUND",
                http_status=404,
                message=f"write-behind job {job_id!r} not found",
                trace_id=getattr(request.state, "request_id", None),
            ),
        )
    return WriteBehindJobHTTP.from_job(job)
