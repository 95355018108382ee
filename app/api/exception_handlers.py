"""
Exception handlers for the telehealth bridge.

Every error body has the same shape: ``error``, ``message``, ``status_code``
and, when RequestLoggingMiddleware ran, the ``request_id`` echoed in the
X-Request-ID header. Telehealth domain errors also carry ``code`` and
``details`` so callers can branch on the machine-readable code.
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.domains.telehealth.domain.exceptions import (
    BackendError,
    BackendRejected,
    ConfigurationMissing,
    MalformedResponse,
    MeetingRecordNotFound,
    NotFound,
    TelehealthError,
)

logger = logging.getLogger(__name__)

TELEHEALTH_BACKEND_ERRORS = (BackendError, BackendRejected, MalformedResponse, NotFound)


def error_response(
    request: Request,
    status_code: int,
    message: Any,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    content: dict[str, Any] = {"error": True, "message": message, "status_code": status_code}
    content.update(extra)
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        content["request_id"] = request_id
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def describe_errors(errors: list[Any]) -> list[dict[str, str]]:
    """Flatten pydantic error entries into field/message/type triples."""
    return [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in errors
    ]


def telehealth_error_status(exc: TelehealthError) -> int:
    """HTTP status for a telehealth domain error."""
    if isinstance(exc, ConfigurationMissing):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, MeetingRecordNotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, TELEHEALTH_BACKEND_ERRORS):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_400_BAD_REQUEST


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, HTTPException):
        return await global_exception_handler(request, exc)
    return error_response(request, exc.status_code, exc.detail, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Request body, path or query parameters failed validation (422)."""
    if not isinstance(exc, RequestValidationError | ValidationError):
        return await global_exception_handler(request, exc)

    details = describe_errors(list(exc.errors()))
    logger.warning(f"Validation error on {request.method} {request.url.path}: {details}")
    message = "Validation error" if isinstance(exc, RequestValidationError) else "Data validation error"
    return error_response(request, status.HTTP_422_UNPROCESSABLE_ENTITY, message, details=details)


async def telehealth_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Telehealth domain errors that escape a route."""
    if not isinstance(exc, TelehealthError):
        return await global_exception_handler(request, exc)

    status_code = telehealth_error_status(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(f"Telehealth error on {request.method} {request.url.path}: {exc.code} {exc.message}")
    return error_response(request, status_code, exc.message, code=exc.code, details=exc.details)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # The traceback goes to the log (and Sentry); the client only sees a generic message.
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc!s}", exc_info=True)
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers above on ``app``, most specific first."""
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(TelehealthError, telehealth_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("Exception handlers registered")
