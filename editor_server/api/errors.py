"""Domain exceptions and the HTTP error boundary.

Storage backends, connectors and managers raise these (or built-in
``FileNotFoundError`` / ``FileExistsError``) and never HTTP exceptions.  The
handlers installed by :func:`install_error_handlers` turn every failure that
reaches the request boundary into the editor's error shape::

    {"message": "...", "description": "..."}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from editor_server.api.models.editor import ApiErrorData
from editor_server.api.storage.base import InvalidPathError

if TYPE_CHECKING:
    from editor_server.api.reporting import ErrorReporter


class ApiError(Exception):
    """An error that already carries the editor error shape."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, description: str | None = None, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.description = description
        if status_code is not None:
            self.status_code = status_code

    def to_data(self) -> ApiErrorData:
        return ApiErrorData(message=self.message, description=self.description)


class MetadataParseError(ApiError):
    """Raised when a metadata block or YAML file cannot be decoded."""

    status_code = 422


class ConnectorNotFoundError(ApiError):
    """Raised when no connector can handle the repository in storage."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class UnsupportedOperationError(ApiError):
    """Raised for editor operations the storage backend cannot perform."""

    status_code = status.HTTP_501_NOT_IMPLEMENTED


# ---------------------------------------------------------------------------
# Request boundary
# ---------------------------------------------------------------------------


def error_response(exc: Exception) -> tuple[int, ApiErrorData]:
    """Coerce any exception into a status code and the error shape."""
    if isinstance(exc, ApiError):
        return exc.status_code, exc.to_data()
    if isinstance(exc, RequestValidationError):
        return 422, ApiErrorData(
            message="Invalid request.",
            description=str(exc.errors()),
        )
    if isinstance(exc, StarletteHTTPException):
        return exc.status_code, ApiErrorData(message=str(exc.detail))

    if isinstance(exc, FileNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, FileExistsError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, InvalidPathError):
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return code, ApiErrorData(message=str(exc) or exc.__class__.__name__)


def install_error_handlers(app: FastAPI, reporter: ErrorReporter) -> None:
    """Register exception handlers that report and render every error.

    Known exception families are registered individually so they are handled
    inside the exception middleware.  The catch-all ``Exception`` handler runs
    in Starlette's server-error middleware, which re-raises after responding.
    """

    async def _handle(request: Request, exc: Exception) -> JSONResponse:
        code, data = error_response(exc)
        reporter.report(exc, status_code=code, route=request.url.path)
        return JSONResponse(status_code=code, content=data.model_dump(by_alias=True, exclude_none=True))

    for exc_class in (
        ApiError,
        RequestValidationError,
        StarletteHTTPException,
        OSError,
        ValueError,
        LookupError,
        Exception,
    ):
        app.add_exception_handler(exc_class, _handle)
