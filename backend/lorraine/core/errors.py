"""Error Hierarchy — typed, categorized exceptions for all engine failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - Validation errors carry the full list of messages, never just the first one
    - to_response() produces the REST envelope

Design Decisions:
    - Single hierarchy with LorraineError base: the FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Not-found on reads is NOT an error here (unknown concept = untested); ResourceNotFoundError
      is reserved for lookups where absence cannot be answered with a neutral value
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    person_id: str | None = None
    concept_id: str | None = None
    event_id: str | None = None
    debug_info: dict[str, Any] | None = None


class LorraineError(Exception):
    """Base exception for all engine errors."""

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
                    "person_id": self.context.person_id,
                    "concept_id": self.context.concept_id,
                    "event_id": self.context.event_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationFailedError(LorraineError):
    """Base for validation failures that carry a list of messages."""

    def __init__(
        self,
        errors: list[str],
        code: str = "VALIDATION_ERROR",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            "; ".join(errors) or "Validation failed",
            code, ErrorCategory.VALIDATION, ErrorSeverity.ERROR, context, 400,
        )
        self.errors = list(errors)

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = self.errors
        return response


class EventValidationError(ValidationFailedError):
    """A verification or claim payload is out of range or malformed."""
    def __init__(self, errors: list[str], context: ErrorContext | None = None):
        super().__init__(errors, "INVALID_EVENT", context)


class RetractionValidationError(ValidationFailedError):
    """Retraction reason or event type outside the closed sets."""
    def __init__(self, errors: list[str], context: ErrorContext | None = None):
        super().__init__(errors, "INVALID_RETRACTION", context)


class DomainPackValidationError(ValidationFailedError):
    """Domain pack document is malformed."""
    def __init__(self, errors: list[str], context: ErrorContext | None = None):
        super().__init__(errors, "INVALID_DOMAIN_PACK", context)


class ResourceNotFoundError(LorraineError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(LorraineError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
