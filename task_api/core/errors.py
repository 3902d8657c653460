"""
Error types and the boundary responder for Task API.

Handlers raise one of the ApiError subclasses; the exception handlers
registered here turn them into the ``{"error": {"status", "message"}}``
body every client receives.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    """Malformed, missing or conflicting input."""

    status_code = status.HTTP_400_BAD_REQUEST


class MalformedIdentifier(ApiError):
    """An entity reference failed the format check."""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidCredential(ApiError):
    """Missing, invalid or expired credential token."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundOrUnauthorized(ApiError):
    """The record does not exist or the caller does not own it."""

    status_code = status.HTTP_404_NOT_FOUND


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"status": status_code, "message": message}},
    )


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # Messages raised by our own field validators are returned verbatim.
    ctx_error = (first.get("ctx") or {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"{location}: {first['msg']}"
    return first["msg"]


def register_exception_handlers(app: FastAPI) -> None:
    """Install the single responder that maps every error to its status."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.debug(f"Rejected {request.method} {request.url.path}: {message}")
        return error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
        message = str(exc) if get_settings().debug else "Internal Server Error"
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)
