"""Error Hierarchy — typed, categorized exceptions for every vidshare failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) are recoverable; infrastructure errors (5xx) are critical
    - to_response() produces the uniform failure envelope:
      {statusCode, data: null, message, success: false, errors: [...]}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with VidshareError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs, never for clients."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    resource_id: str | None = None
    debug_info: dict[str, Any] | None = None


class VidshareError(Exception):
    """Base exception for all vidshare errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        errors: list[dict] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.errors = errors or []

    def to_response(self) -> dict:
        """Convert to the failure envelope."""
        return {
            "statusCode": self.http_status,
            "data": None,
            "message": self.message,
            "success": False,
            "errors": [
                {"code": self.code, "category": self.category.value},
                *self.errors,
            ],
        }


# ─── Domain Errors (4xx) ────────────────────────────────────────

class InputValidationError(VidshareError):
    """Missing or malformed input."""
    def __init__(
        self, message: str, field: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
            errors=[{"field": field, "message": message}] if field else None,
        )
        self.field = field


class SelfSubscriptionError(VidshareError):
    """A user tried to subscribe to their own channel."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Cannot subscribe to yourself",
            "SELF_SUBSCRIPTION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )


class AuthFailureReason(str, Enum):
    """Why a caller could not be authenticated."""
    MISSING = "missing"
    MALFORMED = "malformed"
    EXPIRED = "expired"
    INVALID_CREDENTIALS = "invalid_credentials"


class UnauthenticatedError(VidshareError):
    """Missing, invalid or expired credential."""
    def __init__(
        self,
        message: str = "Unauthorized request",
        reason: AuthFailureReason = AuthFailureReason.MISSING,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
            errors=[{"reason": reason.value}],
        )
        self.reason = reason


class TokenReuseDetectedError(VidshareError):
    """A refresh token that is no longer the stored one was presented."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Refresh token is expired or used",
            "TOKEN_REUSE_DETECTED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.ERROR, context, 401,
        )


class ForbiddenError(VidshareError):
    """Authenticated, but not allowed to act on the target resource."""
    def __init__(
        self, resource_type: str, resource_id: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Not allowed to modify this {resource_type.lower()}",
            "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ResourceNotFoundError(VidshareError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(VidshareError):
    """Uniqueness violation (duplicate registration, email already taken)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Infrastructure Errors (5xx) ────────────────────────────────

class UpstreamFailureError(VidshareError):
    """A dependent external service (media storage) failed."""
    def __init__(self, service: str, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"{service} request failed",
            "UPSTREAM_FAILURE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.service = service
        self.detail = message


class InternalError(VidshareError):
    """Unexpected failure."""
    def __init__(
        self, message: str = "An unexpected error occurred",
        code: str = "INTERNAL_ERROR",
        category: ErrorCategory = ErrorCategory.INTERNAL,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, category, ErrorSeverity.CRITICAL, context, 500,
        )


class DatabaseError(InternalError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed",
            "DATABASE_ERROR", ErrorCategory.DATABASE, context,
        )
        self.operation = operation
        self.detail = message
