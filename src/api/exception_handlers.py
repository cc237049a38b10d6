"""Exception handlers for the FastAPI application.

Every error leaves the API in the same envelope::

    {"error_code": "...", "message": "...", "details": ...}
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.exceptions import AppException, ErrorCode

logger = structlog.get_logger()

# Seconds a client should wait before retrying a transient storage failure
RETRY_AFTER_SECONDS = 1

_RETRYABLE = frozenset({ErrorCode.CONCURRENT_MODIFICATION, ErrorCode.REPOSITORY_UNAVAILABLE})


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Any | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a response in the standard error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": message, "details": details},
        headers=headers,
    )


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Map domain and storage errors onto their HTTP status."""
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "app_exception",
            error_code=exc.error_code.value,
            message=exc.message,
            status_code=exc.status_code,
            request_id=_request_id(request),
        )
        headers = None
        if exc.error_code in _RETRYABLE:
            headers = {"Retry-After": str(RETRY_AFTER_SECONDS)}
        return error_response(
            exc.status_code, exc.error_code.value, exc.message, exc.details, headers
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Routing errors such as unknown paths or methods."""
        return error_response(exc.status_code, "HTTP_ERROR", str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed request bodies."""
        details = _field_errors(exc)
        logger.info("validation_error", errors=details, request_id=_request_id(request))
        return error_response(
            422, ErrorCode.VALIDATION_ERROR.value, "Request validation failed", details
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Anything else is a bug; hide the message outside development."""
        request_id = _request_id(request)
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
            exc_info=True,
        )
        message = "An unexpected error occurred" if settings.is_production else str(exc)
        return error_response(
            500, ErrorCode.INTERNAL_ERROR.value, message, {"request_id": request_id}
        )
