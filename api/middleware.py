"""
Request logging middleware and the centralized error responder for the API.

Every non-2xx response body has the shape::

    {"errors": [{"message": "...", "field": "..."}]}

with ``field`` present only when the error concerns a single input field.
"""

import time
import logging
from typing import Any, Optional, Sequence
from uuid import uuid4

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.exceptions import AppError, ErrorKind, FieldError

logger = logging.getLogger("mealtrack.middleware")

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
}

_LOCATIONS = {"body", "path", "query", "header", "cookie"}


# ============================================================================
# Helper Functions
# ============================================================================


def error_field(loc: Sequence[Any]) -> Optional[str]:
    """Field name for a pydantic error location, e.g. ("body", "email") -> "email" """
    names = [str(part) for part in loc if isinstance(part, str)]
    if names and names[0] in _LOCATIONS:
        names = names[1:]
    return ".".join(names) or None


def validation_errors(errors: Sequence[dict]) -> list[FieldError]:
    return [FieldError(err["msg"], error_field(err.get("loc", ()))) for err in errors]


def error_payload(message: str) -> dict:
    return {"errors": [{"message": message}]}


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all HTTP requests and responses"""

    async def dispatch(self, request: Request, call_next):
        # Generate unique request ID
        request_id = str(uuid4())
        request.state.request_id = request_id

        logger.info(
            f"request_started request_id={request_id} method={request.method} "
            f"path={request.url.path}"
        )

        start_time = time.time()

        try:
            response: Response = await call_next(request)
        except Exception:
            process_time = time.time() - start_time
            logger.error(
                f"request_failed request_id={request_id} method={request.method} "
                f"path={request.url.path} process_time={process_time:.4f}s",
                exc_info=True,
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            f"request_completed request_id={request_id} method={request.method} "
            f"path={request.url.path} status_code={response.status_code} "
            f"process_time={process_time:.4f}s"
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


# ============================================================================
# Error Handlers
# ============================================================================


async def app_error_handler(request: Request, exc: AppError):
    """Handle domain errors; the status code follows the error kind"""
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.warning(
        f"{exc.kind.value} error on {request.method} {request.url.path}: {exc.message}"
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors: every violated rule becomes one entry"""
    error = AppError.validation(validation_errors(exc.errors()))
    logger.warning(
        f"Validation error on {request.method} {request.url.path}: "
        f"{[e.get('field') for e in error.errors]}"
    )
    return await app_error_handler(request, error)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions raised by routing (unknown path, wrong method)"""
    logger.warning(f"HTTP {exc.status_code} on {request.method} {request.url.path}")

    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = "Route not found"
    else:
        message = str(exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(message),
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors without leaking internals"""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc!r}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_payload("Something went wrong"),
    )
