"""Error Hierarchy — typed, categorized exceptions for every admissions failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) are terminal for the request and never retried internally
    - to_response() produces the REST envelope clients branch on (error.code)
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with AdmissionsError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
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
    AUTHORIZATION = "authorization"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    student_ref: str | None = None
    caller: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class AdmissionsError(Exception):
    """Base exception for all admissions errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "student_ref": self.context.student_ref,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Gate Errors ────────────────────────────────────────────────

class AuthorizationError(AdmissionsError):
    """Caller lacks the role the operation requires."""
    def __init__(self, required_role: str, context: ErrorContext | None = None):
        super().__init__(
            f"This operation requires the {required_role} role.",
            "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.required_role = required_role


class IdentityMissingError(AdmissionsError):
    """Caller's token lacks the identity an identity-scoped operation needs."""
    def __init__(self, role: str, context: ErrorContext | None = None):
        super().__init__(
            f"{role.capitalize()}s require username in token.",
            "IDENTITY_MISSING", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )
        self.role = role


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(AdmissionsError):
    """Input fails a domain constraint."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class ResourceNotFoundError(AdmissionsError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class InvalidTransitionError(AdmissionsError):
    """Requested status transition is not currently legal."""
    def __init__(self, message: str, current_status: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_TRANSITION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
        self.current_status = current_status


class DuplicateRatingError(AdmissionsError):
    """Reviewer already rated this student."""
    def __init__(self, reviewer: str, student_ref: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.student_ref = student_ref
        ctx.caller = reviewer
        super().__init__(
            f"{reviewer} has already rated this student.",
            "DUPLICATE_RATING", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(AdmissionsError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class SlackAPIError(AdmissionsError):
    """Slack Web API call failed."""
    def __init__(self, method: str, slack_error: str, context: ErrorContext | None = None):
        super().__init__(
            f"Slack API error ({method}): {slack_error}",
            "SLACK_API_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
        self.method = method
        self.slack_error = slack_error
