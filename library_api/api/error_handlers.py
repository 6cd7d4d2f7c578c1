"""Error Handlers — global exception handlers for the Library API.

Invariants:
    - LibraryError → structured JSON with error code, message, severity, plus its headers
    - RequestValidationError → 400 MALFORMED_INPUT with field-level details
    - Unknown path or method → the ROUTE_NOT_FOUND envelope (never the framework default)
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Layered handlers: domain (LibraryError), validation (Pydantic), routing
      (Starlette HTTPException), catch-all (Exception)
    - Extracted from main.py to keep the entry point small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from library_api.core.errors import (
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    LibraryError,
    MalformedInputError,
    RouteNotFoundError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_library_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _error_response(exc: LibraryError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=exc.headers(),
    )


def _register_library_error_handler(app: FastAPI) -> None:

    @app.exception_handler(LibraryError)
    async def library_error_handler(request: Request, exc: LibraryError):
        """Handle all Library domain/infrastructure errors."""
        log = logger.error if exc.category in (
            ErrorCategory.CONFIGURATION, ErrorCategory.DATABASE, ErrorCategory.INTERNAL,
        ) else logger.warning
        log(
            f"LibraryError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "method": request.method,
                "handler": exc.context.handler,
                "api_version": exc.context.api_version,
            },
        )
        return _error_response(exc)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        fields: dict[str, list[str]] = {}
        for error in exc.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            fields.setdefault(field, []).append(error["msg"])
        error = MalformedInputError("Invalid request data", fields=fields)
        error.context = ErrorContext(method=request.method, path=request.url.path)
        return _error_response(error)


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Unknown paths and methods share the routing envelope."""
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            error = RouteNotFoundError(
                request.method, request.url.path,
                ErrorContext(method=request.method, path=request.url.path),
            )
            logger.info(error.message, extra={"error_code": error.code})
            return _error_response(error)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": "HTTP_ERROR",
                    "message": str(exc.detail),
                    "category": ErrorCategory.INTERNAL.value,
                    "severity": ErrorSeverity.WARNING.value,
                },
            },
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": ErrorCategory.INTERNAL.value,
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )
