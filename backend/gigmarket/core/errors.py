"""Error Hierarchy — typed, categorized exceptions for all marketplace failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Caller-facing errors (400-level) carry a human-readable message surfaced verbatim
    - Infrastructure errors (500-level) never include driver or SQL text
    - Losing the accept race is an InvalidStateError, never an internal error

Design Decisions:
    - Single hierarchy with MarketplaceError base: FastAPI global handler catches all
    - InvalidStateError subclasses carry their own stable codes so clients can
      branch on "ALREADY_APPLIED" vs "GIG_NOT_OPEN" without parsing messages
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
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INVALID_STATE = "invalid_state"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    gig_id: str | None = None
    application_id: str | None = None
    review_id: str | None = None
    field: str | None = None
    debug_info: dict[str, Any] | None = None


class MarketplaceError(Exception):
    """Base exception for all marketplace errors."""

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
                    "gig_id": self.context.gig_id,
                    "application_id": self.context.application_id,
                    "review_id": self.context.review_id,
                    "field": self.context.field,
                },
            }
        }


# ─── Caller Errors (400-level) ──────────────────────────────────

class ValidationError(MarketplaceError):
    """Malformed or out-of-range input."""
    def __init__(
        self, message: str, field: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ctx, 400,
        )
        self.field = field


class AuthenticationError(MarketplaceError):
    """No valid caller identity."""
    def __init__(
        self, message: str = "Authentication required",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "AUTHENTICATION_REQUIRED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(MarketplaceError):
    """Valid identity, insufficient privilege or wrong ownership."""
    def __init__(self, message: str = "Access denied", context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(MarketplaceError):
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


class InvalidStateError(MarketplaceError):
    """Operation not permitted given current entity state."""
    def __init__(
        self, message: str, code: str = "INVALID_STATE",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.INVALID_STATE,
            ErrorSeverity.WARNING, context, 400,
        )


class GigNotOpenError(InvalidStateError):
    """Gig is not accepting applications or decisions."""
    def __init__(self, message: str = "Gig is not open for applications",
                 context: ErrorContext | None = None):
        super().__init__(message, "GIG_NOT_OPEN", context)


class OwnGigApplicationError(InvalidStateError):
    """Gig owner tried to apply to their own gig."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Cannot apply to your own gig", "OWN_GIG", context)


class DuplicateApplicationError(InvalidStateError):
    """An application for (gig, author) already exists."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "You have already applied to this gig", "ALREADY_APPLIED", context,
        )


class ApplicationAlreadyDecidedError(InvalidStateError):
    """Application left PENDING already; ACCEPTED and REJECTED are terminal."""
    def __init__(self, current_status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Application has already been decided ({current_status})",
            "APPLICATION_ALREADY_DECIDED", context,
        )
        self.current_status = current_status


class InvalidGigTransitionError(InvalidStateError):
    """Status edit outside the allowed transition table (strict mode only)."""
    def __init__(self, current: str, target: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot change gig status from {current} to {target}",
            "INVALID_GIG_TRANSITION", context,
        )


class GigHasReviewsError(InvalidStateError):
    """Gig deletion refused: reviews reference it."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Cannot delete a gig that has reviews", "GIG_HAS_REVIEWS", context,
        )


class GigNotCompletedError(InvalidStateError):
    """Review attempted before the gig reached COMPLETED."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Can only review completed gigs", "GIG_NOT_COMPLETED", context,
        )


class SelfReviewError(InvalidStateError):
    """Reviewer and reviewee are the same user."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("You cannot review yourself", "SELF_REVIEW", context)


class DuplicateReviewError(InvalidStateError):
    """A review for (gig, reviewer) already exists."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "You have already reviewed this gig", "ALREADY_REVIEWED", context,
        )


class EmailAlreadyRegisteredError(InvalidStateError):
    """Signup with an email that already has an account."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "User with this email already exists", "EMAIL_TAKEN", context,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(MarketplaceError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class EmailDeliveryError(MarketplaceError):
    """Outbound email provider call failed."""
    def __init__(
        self, message: str, status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Email delivery failed: {message}",
            "EMAIL_DELIVERY_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
        self.status_code = status_code
