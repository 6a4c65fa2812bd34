"""Error Hierarchy - typed, categorized exceptions for all FoodLoop failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation and invalid-state errors are surfaced for correction, never retried
    - ConflictError and StoreError are retryable: no partial mutation survives them
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with FoodLoopError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    BUSINESS_RULE = "business_rule"
    DOMAIN = "domain"
    RESOURCE_NOT_FOUND = "resource_not_found"
    PERMISSION = "permission"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    listing_id: str | None = None
    request_id: str | None = None
    actor_role: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class FoodLoopError(Exception):
    """Base exception for all FoodLoop errors."""

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
                    "listing_id": self.context.listing_id,
                    "request_id": self.context.request_id,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(FoodLoopError):
    """Malformed input: non-positive quantity, missing field, inverted range."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class InvalidStateError(FoodLoopError):
    """Operation not legal from the entity's current state."""
    def __init__(
        self,
        entity: str,
        current: str,
        operation: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Cannot {operation}: {entity} is '{current}'",
            "INVALID_STATE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 409,
        )
        self.entity = entity
        self.current = current
        self.operation = operation


class UnsupportedUnitError(FoodLoopError):
    """Quantity unit outside the declared unit set."""
    def __init__(self, unit: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unsupported quantity unit: '{unit}'",
            "UNSUPPORTED_UNIT", ErrorCategory.DOMAIN,
            ErrorSeverity.WARNING, context, 400,
        )
        self.unit = unit


class DomainError(FoodLoopError):
    """Calculator input outside its declared domain (negative or non-finite)."""
    def __init__(self, message: str, value: float, context: ErrorContext | None = None):
        super().__init__(
            message, "DOMAIN_ERROR", ErrorCategory.DOMAIN,
            ErrorSeverity.WARNING, context, 400,
        )
        self.value = value


class ResourceNotFoundError(FoodLoopError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


class PermissionDeniedError(FoodLoopError):
    """Caller role or ownership does not allow the operation."""
    def __init__(self, role: str, action: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.actor_role = role
        super().__init__(
            f"Role '{role}' is not allowed to {action}",
            "PERMISSION_DENIED", ErrorCategory.PERMISSION,
            ErrorSeverity.WARNING, ctx, 403,
        )
        self.action = action


# ─── Retryable Errors (409/503) ─────────────────────────────────

class ConflictError(FoodLoopError):
    """Concurrent-update guard failed; retry the whole operation."""

    retryable = True

    def __init__(
        self,
        message: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        if retry_after_ms is not None:
            ctx.retry_after_ms = retry_after_ms
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )


class StoreError(FoodLoopError):
    """Data Store operation failed (transient)."""

    retryable = True

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Store {operation} failed: {message}",
            "STORE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
