"""Error Hierarchy: typed, categorized exceptions for all temporary-schedule failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation errors carry every FieldError found, never just the first one
    - Only DatabaseError may be retryable; everything else is final for the caller
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with TempSchedError base: FastAPI global handler catches all
    - FieldError is a plain dataclass, not an exception, so validators can return
      lists of them and the service raises once with the aggregate
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
    PERMISSION = "permission"
    DATABASE = "database"
    DATA_INTEGRITY = "data_integrity"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    schedule_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


@dataclass(frozen=True)
class FieldError:
    """One field-scoped validation problem."""
    field: str
    message: str

    def __str__(self) -> str:
        if not self.field:
            return self.message
        return f"{self.field}: {self.message}"


class TempSchedError(Exception):
    """Base exception for all temporary-schedule errors."""

    retryable: bool = False

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
                "retryable": self.retryable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "schedule_id": self.context.schedule_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ScheduleValidationError(TempSchedError):
    """One or more field validations failed; all of them are reported."""

    def __init__(
        self, errors: list[FieldError], context: ErrorContext | None = None,
    ):
        super().__init__(
            "; ".join(str(e) for e in errors) or "invalid request",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.errors = list(errors)

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["details"] = [
            {"field": e.field, "message": e.message} for e in self.errors
        ]
        return body


class PermissionDeniedError(TempSchedError):
    """The authorization collaborator rejected the caller."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Permission denied: {reason}",
            "PERMISSION_DENIED", ErrorCategory.PERMISSION,
            ErrorSeverity.WARNING, context, 403,
        )


# ─── Integrity Errors (500-level, never retried) ────────────────

class DocumentDecodeError(TempSchedError):
    """Stored schedule bytes could not be decoded into a document."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Stored schedule data is corrupt: {reason}",
            "DOCUMENT_DECODE_ERROR", ErrorCategory.DATA_INTEGRITY,
            ErrorSeverity.CRITICAL, context, 500,
        )


class IntervalInvariantError(TempSchedError):
    """Interval algebra produced an unsorted or overlapping schedule list."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INTERVAL_INVARIANT_VIOLATED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


# ─── Infrastructure Errors ──────────────────────────────────────

class DatabaseError(TempSchedError):
    """Database operation failed; retryable when the failure was transient."""
    def __init__(
        self,
        message: str,
        operation: str,
        retryable: bool = False,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.ERROR if retryable else ErrorSeverity.CRITICAL,
            context, 503 if retryable else 500,
        )
        self.operation = operation
        self.retryable = retryable
