"""Error Hierarchy — typed, categorized exceptions for every Library API failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Selection/version errors are raised before any handler body runs
    - Patch and validation errors are raised before any persistence call
    - to_response() produces the REST envelope; never carries a stack trace

Design Decisions:
    - Single hierarchy with LibraryError base: FastAPI global handler catches all (ADR: uniform error shape)
    - AmbiguousActionError is a configuration error: raised while the action table is built,
      so a misconfigured process never serves a request
    - details is free-form per subclass: patch failures carry the operation, validation
      failures carry the full field -> messages mapping
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    ROUTING = "routing"
    NEGOTIATION = "negotiation"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    CONFLICT = "conflict"
    CONFIGURATION = "configuration"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Request-side context attached to an error for observability."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    method: str | None = None
    path: str | None = None
    api_version: str | None = None
    handler: str | None = None


class LibraryError(Exception):
    """Base exception for all Library API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details

    def headers(self) -> dict[str, str] | None:
        """Extra response headers for this error (e.g. WWW-Authenticate)."""
        return None

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "method": self.context.method,
                "path": self.context.path,
                "api_version": self.context.api_version,
                "handler": self.context.handler,
            },
        }
        if self.details is not None:
            body["details"] = self.details
        return {"error": body}


# ─── Selection Errors (raised before a handler runs) ─────────────

class RouteNotFoundError(LibraryError):
    """No route group for (method, path)."""
    def __init__(self, method: str, path: str, context: ErrorContext | None = None):
        super().__init__(
            f"No route matches {method} {path}",
            "ROUTE_NOT_FOUND", ErrorCategory.ROUTING,
            ErrorSeverity.WARNING, context, 404,
        )


class NoMatchingVersionError(LibraryError):
    """Route exists but no handler declares the requested API version."""
    def __init__(
        self, requested: str, supported: list[str], context: ErrorContext | None = None,
    ):
        super().__init__(
            f"API version '{requested}' is not supported by this resource",
            "UNSUPPORTED_API_VERSION", ErrorCategory.ROUTING,
            ErrorSeverity.WARNING, context, 400,
            details={"requested": requested, "supported": supported},
        )


class UnsupportedMediaTypeError(LibraryError):
    """No handler consumes the request Content-Type."""
    def __init__(self, content_type: str | None, context: ErrorContext | None = None):
        super().__init__(
            f"Content-Type '{content_type or ''}' is not supported by this resource",
            "UNSUPPORTED_MEDIA_TYPE", ErrorCategory.NEGOTIATION,
            ErrorSeverity.WARNING, context, 415,
        )


class NotAcceptableError(LibraryError):
    """No handler produces a media type the Accept header allows."""
    def __init__(self, accept: str | None, context: ErrorContext | None = None):
        super().__init__(
            f"None of the requested media types '{accept or ''}' can be produced",
            "NOT_ACCEPTABLE", ErrorCategory.NEGOTIATION,
            ErrorSeverity.WARNING, context, 406,
        )


class AmbiguousActionError(LibraryError):
    """Two handlers accept the same (version, media type) combination."""
    def __init__(self, message: str, handlers: list[str]):
        super().__init__(
            message, "AMBIGUOUS_ACTION", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, None, 500,
            details={"handlers": handlers},
        )
        self.handlers = handlers


# ─── Request Errors (raised inside a handler) ────────────────────

class ResourceNotFoundError(LibraryError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


class MalformedInputError(LibraryError):
    """Path parameter or body failed structural parsing."""
    def __init__(
        self, message: str, fields: dict[str, list[str]] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "MALFORMED_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400, details=fields,
        )


class PatchApplicationError(LibraryError):
    """A patch operation could not be applied; nothing was persisted."""
    def __init__(
        self, index: int, op: str, path: str, reason: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Patch operation {index} ({op} {path}) failed: {reason}",
            "PATCH_APPLICATION_FAILED", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 422,
            details={
                "operation_index": index, "op": op,
                "path": path, "reason": reason,
            },
        )
        self.index = index
        self.reason = reason


class ValidationFailedError(LibraryError):
    """Semantic validation produced field errors; nothing was persisted."""
    def __init__(
        self, errors: dict[str, list[str]], context: ErrorContext | None = None,
    ):
        super().__init__(
            "One or more validation errors occurred",
            "VALIDATION_FAILED", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 422, details=errors,
        )
        self.errors = errors


class PreconditionFailedError(LibraryError):
    """If-Match did not match the current entity tag."""
    def __init__(self, expected: str, provided: str, context: ErrorContext | None = None):
        super().__init__(
            "Resource has changed since it was fetched. Re-fetch and retry.",
            "PRECONDITION_FAILED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 412,
            details={"current_etag": expected, "if_match": provided},
        )


class AuthenticationError(LibraryError):
    """Missing or invalid HTTP Basic credentials."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Valid credentials are required to access this resource",
            "AUTHENTICATION_REQUIRED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )

    def headers(self) -> dict[str, str] | None:
        return {"WWW-Authenticate": 'Basic realm="library"'}


# ─── Infrastructure Errors ───────────────────────────────────────

class ConcurrencyError(LibraryError):
    """Concurrent modification detected at persist time."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class DatabaseError(LibraryError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
