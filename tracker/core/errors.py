"""Error Hierarchy: typed, categorized exceptions for every tracker-client failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every remote failure is a GatewayError; the store catches that base only
    - to_dict() produces a JSON-safe envelope with no credentials in it

Design Decisions:
    - Single hierarchy with TrackerError base: callers can catch one type
    - ErrorContext as dataclass: observability without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and caller handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level categories matching the remote failure taxonomy."""
    TRANSPORT = "transport"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    VALIDATION = "validation"
    REMOTE = "remote"
    PAYLOAD = "payload"
    LOCAL = "local"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    resource_ids: dict[str, Any] = field(default_factory=dict)
    debug_info: dict[str, Any] | None = None


class TrackerError(Exception):
    """Base exception for all tracker-client errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_dict(self) -> dict:
        """Convert to a standardized error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "operation": self.context.operation,
                "resource_ids": dict(self.context.resource_ids),
            }
        }


# ─── Gateway Errors (remote side) ───────────────────────────────

class GatewayError(TrackerError):
    """A remote gateway call failed. Base for the remote taxonomy."""

    def __init__(
        self,
        message: str,
        code: str = "GATEWAY_ERROR",
        category: ErrorCategory = ErrorCategory.REMOTE,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message, code, category, severity, context)
        self.status_code = status_code

    def to_dict(self) -> dict:
        envelope = super().to_dict()
        envelope["error"]["status_code"] = self.status_code
        return envelope


class TransportFailure(GatewayError):
    """Network-level failure: connection refused, DNS, timeout."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "TRANSPORT_FAILURE", ErrorCategory.TRANSPORT,
            ErrorSeverity.ERROR, None, context,
        )


class UnauthorizedError(GatewayError):
    """Missing, invalid or expired token (401/403)."""
    def __init__(
        self, message: str, status_code: int = 401, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, status_code, context,
        )


class RemoteNotFoundError(GatewayError):
    """Requested resource does not exist on the remote side (404)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, 404, context,
        )


class ValidationRejectedError(GatewayError):
    """The remote side rejected the payload (400/409/422)."""
    def __init__(
        self, message: str, status_code: int = 422,
        details: Any = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_REJECTED", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, status_code, context,
        )
        self.details = details


class RemoteServerError(GatewayError):
    """Any other non-2xx answer, typically 5xx."""
    def __init__(
        self, message: str, status_code: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "REMOTE_SERVER_ERROR", ErrorCategory.REMOTE,
            ErrorSeverity.CRITICAL, status_code, context,
        )


class PayloadError(GatewayError):
    """A 2xx response whose body could not be decoded into the expected model."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "MALFORMED_PAYLOAD", ErrorCategory.PAYLOAD,
            ErrorSeverity.ERROR, None, context,
        )


# ─── Local Errors ───────────────────────────────────────────────

class InvalidReorderError(TrackerError):
    """Reorder indices fall outside the sequence."""
    def __init__(self, from_index: int, to_index: int, length: int):
        super().__init__(
            f"Cannot move item {from_index} -> {to_index} in a sequence of {length}",
            "INVALID_REORDER", ErrorCategory.LOCAL, ErrorSeverity.ERROR,
            ErrorContext(debug_info={
                "from_index": from_index, "to_index": to_index, "length": length,
            }),
        )
        self.from_index = from_index
        self.to_index = to_index


class EntityNotCachedError(TrackerError):
    """A local operation referenced an id that is not in the store."""
    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} '{resource_id}' is not cached",
            "ENTITY_NOT_CACHED", ErrorCategory.LOCAL, ErrorSeverity.ERROR,
            ErrorContext(resource_ids={resource_type: resource_id}),
        )
