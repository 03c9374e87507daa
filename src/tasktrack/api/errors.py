"""Translation of domain errors into HTTP responses."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from tasktrack.core.errors import (
    AssigneeNotFound,
    ConfigurationError,
    DuplicateEmail,
    HashingFailure,
    InvalidCredentials,
    NotPermitted,
    NotVisible,
    TaskTrackError,
    TokenError,
    UnacceptablePassword,
)

logger = logging.getLogger(__name__)

# Most specific classes first; the first isinstance match wins.
ERROR_RESPONSES: list[tuple[type[TaskTrackError], int, str | None]] = [
    (TokenError, status.HTTP_401_UNAUTHORIZED, "Invalid authentication credentials"),
    (InvalidCredentials, status.HTTP_401_UNAUTHORIZED, "Invalid email or password"),
    (DuplicateEmail, status.HTTP_400_BAD_REQUEST, "Email is already registered"),
    (UnacceptablePassword, status.HTTP_400_BAD_REQUEST, None),
    (AssigneeNotFound, status.HTTP_400_BAD_REQUEST, None),
    (NotVisible, status.HTTP_404_NOT_FOUND, "Task not found"),
    (NotPermitted, status.HTTP_403_FORBIDDEN, "Not authorized to modify this task"),
    (HashingFailure, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
]


def error_response(exc: TaskTrackError) -> JSONResponse:
    """
    Build the HTTP response for a domain error.

    A ``None`` detail means the exception message is safe to show.
    """
    for error_type, status_code, detail in ERROR_RESPONSES:
        if isinstance(exc, error_type):
            headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
            return JSONResponse(
                status_code=status_code,
                content={"detail": detail or str(exc)},
                headers=headers,
            )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers for domain errors and unexpected exceptions."""

    @app.exception_handler(TaskTrackError)
    async def domain_exception_handler(request: Request, exc: TaskTrackError):
        """Map a domain error to its HTTP status."""
        response = error_response(exc)
        if response.status_code >= 500:
            logger.error(f"{type(exc).__name__} while handling {request.url.path}: {exc}")
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )
