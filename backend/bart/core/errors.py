"""Error Hierarchy — typed, categorized exceptions for the BART service boundaries.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Game commands never raise: invalid-state commands are no-ops, not errors
    - Domain errors (400-level) are recoverable; contract violations (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with BartError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: str | None = None
    round_index: int | None = None
    user_message: str | None = None


class BartError(Exception):
    """Base exception for all BART errors."""

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
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "session_id": self.context.session_id,
                    "round_index": self.context.round_index,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(BartError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class SessionNotCompleteError(BartError):
    """Final report requested before the last balloon resolved."""
    def __init__(
        self, rounds_completed: int, total_rounds: int,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Session still in progress ({rounds_completed}/{total_rounds} balloons).",
            "SESSION_IN_PROGRESS", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.rounds_completed = rounds_completed
        self.total_rounds = total_rounds


# ─── Contract Violations (500-level) ────────────────────────────

class InvalidThresholdError(BartError):
    """Threshold source produced a value outside the allowed range."""
    def __init__(
        self, value: int, low: int, high: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Threshold source returned {value}, expected {low}-{high}",
            "INVALID_THRESHOLD", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.value = value
