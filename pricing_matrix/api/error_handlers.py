# This file defines the API error payload shape and the exception handlers that produce it.
# Every failure, from a rejected matrix to an unreadable document store, leaves as the same JSON body.
# Unexpected errors are logged with the request id and answered with a generic message.

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pricing_matrix.api.document_store import DocumentStoreError

LOGGER = logging.getLogger("api")


class APIError(Exception):
    """Domain error type with structured API details."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(message)


def _request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def _error_response(
    *,
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    body = {
        "error_code": error_code,
        "message": message,
        "details": details,
        "request_id": _request_id(request),
        "timestamp": datetime.now(tz=UTC).isoformat(),
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return _error_response(
            request=request,
            status_code=exc.status_code,
            error_code=exc.error_code,
            message=exc.message,
            details=exc.details,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(
            request=request,
            status_code=422,
            error_code="VALIDATION_ERROR",
            message="The pricing matrix was rejected.",
            details=exc.errors(),
        )

    @app.exception_handler(DocumentStoreError)
    async def store_error_handler(request: Request, exc: DocumentStoreError) -> JSONResponse:
        LOGGER.error("Document store failure request_id=%s: %s", _request_id(request), exc)
        return _error_response(
            request=request,
            status_code=503,
            error_code="MATRIX_STORE_UNAVAILABLE",
            message="The pricing matrix store is unavailable.",
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(
            request=request,
            status_code=exc.status_code,
            error_code="HTTP_ERROR",
            message=str(exc.detail),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.error(
            "Unhandled error request_id=%s", _request_id(request), exc_info=exc
        )
        return _error_response(
            request=request,
            status_code=500,
            error_code="INTERNAL_SERVER_ERROR",
            message="The server encountered an unexpected error.",
        )
