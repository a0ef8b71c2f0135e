"""Translate faults into the uniform error envelope.

Every error response has the shape ``{timestamp, status, error, message, path}``.
"""
import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Dict, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import ConstraintViolation, NotFound, UniquenessConflict, ValidationFailure
from .models import ErrorResponse
from .validation import field_errors

logger = logging.getLogger(__name__)

EMAIL_COLUMN = "primary_email"
EMAIL_IN_USE_MESSAGE = "Email address is already in use"


def error_response(
    request: Request,
    status_code: int,
    error: str,
    message: Union[Dict[str, str], str],
) -> JSONResponse:
    body = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status_code,
        error=error,
        message=message,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def validation_failure_handler(request: Request, exc: ValidationFailure) -> JSONResponse:
    logger.error("Validation error: %s", exc.errors)
    return error_response(request, 400, "Validation Error", exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = field_errors(exc.errors())
    logger.error("Validation error: %s", errors)
    return error_response(request, 400, "Validation Error", errors)


async def constraint_violation_handler(request: Request, exc: ConstraintViolation) -> JSONResponse:
    logger.error("Constraint violation: %s", exc)
    return error_response(request, 400, "Constraint Violation", str(exc))


async def uniqueness_conflict_handler(request: Request, exc: UniquenessConflict) -> JSONResponse:
    logger.error("Data integrity violation: %s", exc)
    message = str(exc)
    if EMAIL_COLUMN in message:
        message = EMAIL_IN_USE_MESSAGE
    return error_response(request, 409, "Data Integrity Violation", message)


async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    logger.error("Resource not found: %s", exc)
    return error_response(request, 404, "Resource Not Found", str(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors raised by the framework itself, e.g. unknown path or method."""
    try:
        error = HTTPStatus(exc.status_code).phrase
    except ValueError:
        error = "Error"
    logger.error("HTTP error %s: %s", exc.status_code, exc.detail)
    response = error_response(request, exc.status_code, error, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception: %s", exc, exc_info=exc)
    return error_response(request, 500, "Internal Server Error", str(exc) or type(exc).__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationFailure, validation_failure_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ConstraintViolation, constraint_violation_handler)
    app.add_exception_handler(UniquenessConflict, uniqueness_conflict_handler)
    app.add_exception_handler(NotFound, not_found_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
