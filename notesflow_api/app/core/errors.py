"""
Domain exceptions and their HTTP translation.

Services raise these exceptions; ``register_exception_handlers`` maps
them to JSON responses of the form ``{"detail": "..."}`` so the
endpoint modules stay free of storage-specific error handling.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class NotesFlowError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal Server Error") -> None:
        super().__init__(message)
        self.message = message


class StorageUnavailableError(NotesFlowError):
    """No database is configured or the store cannot be opened."""

    def __init__(self, message: str = "Database not connected") -> None:
        super().__init__(message)


class NotFoundError(NotesFlowError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(NotesFlowError):
    status_code = status.HTTP_409_CONFLICT


class ParentNotFoundError(NotesFlowError):
    status_code = status.HTTP_400_BAD_REQUEST


def register_exception_handlers(app: FastAPI) -> None:
    """Attach handlers translating domain errors into HTTP responses."""

    @app.exception_handler(NotesFlowError)
    async def notesflow_error_handler(request: Request, exc: NotesFlowError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal Server Error"},
        )
