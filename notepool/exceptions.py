"""
Error types for the Anonymous Notes API and their HTTP translation.

Clients only ever see terse plain-text bodies. Store failures are
logged in full server-side and reported as a generic "Server error".
"""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse


logger = logging.getLogger(__name__)


class NotePoolError(Exception):
    """Base class for errors raised by the service."""

    status_code = 500
    public_message = "Server error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(NotePoolError):
    """Missing or invalid required input."""

    status_code = 400
    public_message = "Bad Request"


class AuthError(NotePoolError):
    """Missing or incorrect admin secret."""

    status_code = 403
    public_message = "Forbidden"


class NotFoundError(NotePoolError):
    """The note a mutation targets does not exist."""

    status_code = 404
    public_message = "Not Found"


class StoreError(NotePoolError):
    """Any persistence failure."""

    status_code = 500
    public_message = "Server error"


# =============================================================================
# FastAPI exception handlers
# =============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Convert service errors into plain-text HTTP responses."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info(f"Rejected {request.method} {request.url.path}: {exc.message}")
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        logger.warning(f"Admin auth failed for {request.method} {request.url.path}")
        return Response(status_code=exc.status_code)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        cause = exc.__cause__ or exc
        logger.error(
            f"Store error on {request.method} {request.url.path}: {exc.message}",
            exc_info=(type(cause), cause, cause.__traceback__),
        )
        return PlainTextResponse(StoreError.public_message, status_code=500)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(
            f"Unhandled exception on {request.method} {request.url.path}: "
            f"{type(exc).__name__}: {exc}"
        )
        return PlainTextResponse(StoreError.public_message, status_code=500)
