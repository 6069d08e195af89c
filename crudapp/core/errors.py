"""Error taxonomy and exception handler registration."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
import logging
from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from crudapp.core.responses import failure
from crudapp.core.responses import render
from crudapp.schemas.envelope import ErrorDetail

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Closed set of error categories exposed to API consumers."""

    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL_ERROR = "internal_error"


ERROR_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class APIError(Exception):
    """Base application exception rendered through the response envelope."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR
    default_message = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: Sequence[ErrorDetail] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.status_code = ERROR_STATUS_CODES[self.kind]
        self.code = self.kind.value
        self.details = list(details) if details else None


class BadRequestError(APIError):
    kind = ErrorKind.BAD_REQUEST
    default_message = "Bad request"


class UnauthorizedError(APIError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(APIError):
    kind = ErrorKind.FORBIDDEN
    default_message = "You are not authorized to access this resource."


class NotFoundError(APIError):
    """Convenience exception for missing resources."""

    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class ConflictError(APIError):
    kind = ErrorKind.CONFLICT
    default_message = "Conflict"


class InternalServerError(APIError):
    kind = ErrorKind.INTERNAL_ERROR


def _http_error_message(status_code: int) -> str:
    if status_code == status.HTTP_404_NOT_FOUND:
        return "Not found"
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return "Method not allowed"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "Internal server error"
    return "Request failed"


def _validation_details(exc: RequestValidationError) -> list[ErrorDetail]:
    details: list[ErrorDetail] = []
    for issue in exc.errors():
        location = issue.get("loc", ())
        field = _format_location(location)
        message = str(issue.get("msg", "Invalid value"))
        details.append(ErrorDetail(field=field, message=message))
    return details


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    prefixes = {"body", "query", "path", "header", "cookie"}
    filtered = [str(part) for part in location if part not in prefixes]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "request"

    return str(location[0])


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI request parsing errors to a BadRequest envelope."""

    return render(
        failure(
            status.HTTP_400_BAD_REQUEST,
            "Request validation failed",
            _validation_details(exc),
        )
    )


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap routing-level HTTP errors (unknown route, wrong method) in the envelope."""

    message = exc.detail if isinstance(exc.detail, str) and exc.detail else _http_error_message(exc.status_code)
    return render(failure(exc.status_code, message))


async def api_error_handler(_: Request, exc: APIError) -> JSONResponse:
    """Return taxonomy errors in the shared envelope."""

    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Request failed with %s: %s", exc.code, exc.message)
    return render(failure(exc.status_code, exc.message, exc.details))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Avoid leaking internal exceptions while keeping response shape stable."""

    logger.error(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return render(failure(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalServerError.default_message))


def register_error_handlers(app: FastAPI) -> None:
    """Attach all error handlers to a FastAPI app instance."""

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
