"""
teamtacles_api.api.errors

Boundary mapping from domain error kinds to HTTP responses.

Responsibilities:
- Translate `DomainError.kind` into a status code (the only place this happens).
- Render request validation failures as INVALID_REQUEST / 400.
- Render anything unhandled as UNMAPPED / 500.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from teamtacles_api.errors import DomainError, ErrorKind
from teamtacles_api.observability.logging import get_logger

log = get_logger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.not_found: HTTP_404_NOT_FOUND,
    ErrorKind.forbidden: HTTP_403_FORBIDDEN,
    ErrorKind.conflict: HTTP_409_CONFLICT,
    ErrorKind.invalid_request: HTTP_400_BAD_REQUEST,
    # Remote failures are server-side from the caller's point of view.
    ErrorKind.access_denied: HTTP_502_BAD_GATEWAY,
    ErrorKind.service_unavailable: HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.remote_operation_failed: HTTP_502_BAD_GATEWAY,
    ErrorKind.network_error: HTTP_502_BAD_GATEWAY,
    ErrorKind.unmapped: HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_body(kind: ErrorKind, detail: object) -> dict[str, object]:
    return {"error": kind.value, "detail": detail}


async def _domain_error(_: Request, exc: DomainError) -> JSONResponse:
    status = STATUS_BY_KIND.get(exc.kind, HTTP_500_INTERNAL_SERVER_ERROR)
    if exc.is_remote:
        # Tell well-behaved clients when a cascade delete is worth retrying.
        headers = {"Retry-After": "30"} if exc.kind is ErrorKind.service_unavailable else None
        return JSONResponse(error_body(exc.kind, exc.message), status_code=status, headers=headers)
    return JSONResponse(error_body(exc.kind, exc.message), status_code=status)


async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        error_body(ErrorKind.invalid_request, jsonable_encoder(exc.errors())),
        status_code=HTTP_400_BAD_REQUEST,
    )


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled_error", path=request.url.path, method=request.method)
    return JSONResponse(
        error_body(ErrorKind.unmapped, "Internal Server Error: unmapped error"),
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, _domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error)


# --- Module Notes -----------------------------------------------------------
# 401/403 from auth dependencies are plain `HTTPException`s and keep FastAPI's
# default `{"detail": ...}` body.
