from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from domain.errors import ErrorKind, WatchlistAppError
from infrastructure.utils import format_kv

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = str(first.get("msg") or "invalid value")
    return f"{loc}: {msg}" if loc else msg


def register_exception_handlers(app: FastAPI) -> None:
    """Map typed service errors to status codes and log each failure once."""

    @app.exception_handler(WatchlistAppError)
    async def _app_error(request: Request, exc: WatchlistAppError) -> JSONResponse:
        logger.warning(
            "request failed %s",
            format_kv(
                method=request.method,
                path=request.url.path,
                kind=exc.kind.value,
                status=exc.status_code,
                error=exc.message,
            ),
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _validation_message(exc)
        logger.warning(
            "request rejected %s",
            format_kv(method=request.method, path=request.url.path, status=400, error=message),
        )
        return JSONResponse(status_code=ErrorKind.VALIDATION.status_code, content={"error": message})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled error %s",
            format_kv(method=request.method, path=request.url.path, status=500, error=str(exc)),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})
