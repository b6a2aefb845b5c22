"""
Error taxonomy and the top-level error converter.

Handlers raise ApiError with one of the ErrorKind members; the exception
handlers registered here turn it into a plain-text body "{Name}: {message}"
with the kind's status code. Request validation failures, unmatched routes and
unhandled exceptions go through the same converter, so every error response
has the same shape.
"""

import logging
from enum import Enum

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """Closed set of client-facing errors: (name, HTTP status, default message)."""

    VALIDATION = (
        "ValidationError",
        422,
        "Invalid data received.",
    )
    AUTHENTICATION = (
        "AuthenticationError",
        status.HTTP_401_UNAUTHORIZED,
        "Username does not exist or password didn't match.",
    )
    NOT_AUTHENTICATED = (
        "NotAuthenticatedError",
        status.HTTP_401_UNAUTHORIZED,
        "Not authenticated.",
    )
    UNAUTHORIZED = (
        "UnauthorizedError",
        status.HTTP_401_UNAUTHORIZED,
        "Not authenticated or unauthorized role.",
    )
    CATEGORY_NOT_FOUND = (
        "CategoryNotFoundError",
        status.HTTP_404_NOT_FOUND,
        "The category was not found.",
    )
    PRODUCT_NOT_FOUND = (
        "ProductNotFoundError",
        status.HTTP_404_NOT_FOUND,
        "The product was not found.",
    )
    NOT_FOUND = (
        "NotFoundError",
        status.HTTP_404_NOT_FOUND,
        "Not found.",
    )
    INTERNAL = (
        "InternalServerError",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error.",
    )

    def __init__(self, error_name: str, status_code: int, default_message: str) -> None:
        self.error_name = error_name
        self.status_code = status_code
        self.default_message = default_message


class ApiError(Exception):
    """Raised by handlers for any expected, client-facing failure."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str | None = None,
        details: str | None = None,
    ) -> None:
        self.kind = kind
        self.message = message or kind.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def name(self) -> str:
        return self.kind.error_name

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def __str__(self) -> str:
        return f"{self.name}: {self.message}"


def error_response(error: ApiError) -> PlainTextResponse:
    """Log error (with details when attached) and build its response."""
    if error.details:
        logger.error("%s\n\t%s", error, error.details)
    else:
        logger.error("%s", error)
    return PlainTextResponse(str(error), status_code=error.status_code)


async def api_error_handler(request: Request, exc: ApiError) -> PlainTextResponse:
    return error_response(exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> PlainTextResponse:
    return error_response(ApiError(ErrorKind.VALIDATION, details=str(exc.errors())))


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> PlainTextResponse:
    # Unmatched routes and methods surface as NotFoundError, like any other miss.
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        error = ApiError(
            ErrorKind.NOT_FOUND,
            details=f"{request.method} {request.url.path}",
        )
    elif exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        error = ApiError(ErrorKind.INTERNAL, details=str(exc.detail))
    else:
        error = ApiError(ErrorKind.VALIDATION, details=str(exc.detail))
    return error_response(error)


def _internal_error_response(request: Request, exc: Exception) -> PlainTextResponse:
    logger.exception(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    error = ApiError(ErrorKind.INTERNAL)
    return PlainTextResponse(str(error), status_code=error.status_code)


async def unhandled_exception_middleware(request: Request, call_next):
    """
    Turn unexpected exceptions into the generic 500 here. Starlette re-raises
    whatever reaches its Exception handler, which would log it a second time.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return _internal_error_response(request, exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    # Only errors raised outside unhandled_exception_middleware get here.
    return _internal_error_response(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the converter to app for every error source."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.middleware("http")(unhandled_exception_middleware)
