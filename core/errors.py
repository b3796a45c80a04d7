"""
Error Code Definitions and Classification.

Centralized error code management with retry logic and the typed
exception hierarchy raised by the seeding pipeline.

Key Features:
    - Explicit error codes for all failure modes
    - Retry classification (PERMANENT, TRANSIENT, THROTTLING)
    - One exception type per pipeline phase, all carrying structured context
    - Messages never embed connection strings

Exports:
    ErrorCode: Standardized error codes enum
    ErrorClassification: Error category enum
    is_retryable: Helper to check if error should be retried
    get_error_classification: Classification lookup
    classify_status_code: Map an HTTP status from an SDK error to an ErrorCode
    SeedingError: Base exception
    ConnectionResolutionError, NamespaceEnsureError, ItemWriteError,
    CancellationError, LifecycleTransitionError: Phase exceptions
"""

from enum import Enum
from typing import Dict, Any, Optional


class ErrorCode(str, Enum):
    """
    Standardized error codes for all seeding failures.
    """

    # ========================================================================
    # CONNECTION RESOLUTION
    # ========================================================================
    TOPOLOGY_INCOMPLETE = "TOPOLOGY_INCOMPLETE"  # Parent chain missing account
    CONNECTION_STRING_MISSING = "CONNECTION_STRING_MISSING"  # Account has no secret
    CONNECTION_STRING_INVALID = "CONNECTION_STRING_INVALID"  # Missing endpoint/key
    CONNECTION_FAILED = "CONNECTION_FAILED"  # Provider raised / endpoint unreachable

    # ========================================================================
    # NAMESPACE ENSURE
    # ========================================================================
    NAMESPACE_UNSUPPORTED = "NAMESPACE_UNSUPPORTED"  # No backend for resource kind
    DATABASE_ENSURE_FAILED = "DATABASE_ENSURE_FAILED"
    CONTAINER_ENSURE_FAILED = "CONTAINER_ENSURE_FAILED"
    QUEUE_ENSURE_FAILED = "QUEUE_ENSURE_FAILED"
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"  # 401/403 from the service

    # ========================================================================
    # ITEM WRITE
    # ========================================================================
    ITEM_CONFLICT = "ITEM_CONFLICT"  # 409 on create
    ITEM_INVALID = "ITEM_INVALID"  # 400 / payload rejected
    ITEM_WRITE_FAILED = "ITEM_WRITE_FAILED"
    RECORD_SOURCE_FAILED = "RECORD_SOURCE_FAILED"  # Generator raised mid-batch

    # ========================================================================
    # LIFECYCLE / GENERIC
    # ========================================================================
    CANCELLED = "CANCELLED"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    READINESS_TIMEOUT = "READINESS_TIMEOUT"
    THROTTLED = "THROTTLED"  # 429
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"  # 503 / emulator still booting
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class ErrorClassification(str, Enum):
    """
    Error classification for retry logic.
    """

    PERMANENT = "PERMANENT"  # Never retry
    TRANSIENT = "TRANSIENT"  # Retry with exponential backoff
    THROTTLING = "THROTTLING"  # Retry with longer delay


_ERROR_CLASSIFICATION: Dict[ErrorCode, ErrorClassification] = {
    ErrorCode.TOPOLOGY_INCOMPLETE: ErrorClassification.PERMANENT,
    ErrorCode.CONNECTION_STRING_MISSING: ErrorClassification.PERMANENT,
    ErrorCode.CONNECTION_STRING_INVALID: ErrorClassification.PERMANENT,
    ErrorCode.NAMESPACE_UNSUPPORTED: ErrorClassification.PERMANENT,
    ErrorCode.AUTHORIZATION_FAILED: ErrorClassification.PERMANENT,
    ErrorCode.ITEM_CONFLICT: ErrorClassification.PERMANENT,
    ErrorCode.ITEM_INVALID: ErrorClassification.PERMANENT,
    ErrorCode.RECORD_SOURCE_FAILED: ErrorClassification.PERMANENT,
    ErrorCode.CANCELLED: ErrorClassification.PERMANENT,
    ErrorCode.INVALID_TRANSITION: ErrorClassification.PERMANENT,

    ErrorCode.CONNECTION_FAILED: ErrorClassification.TRANSIENT,
    ErrorCode.DATABASE_ENSURE_FAILED: ErrorClassification.TRANSIENT,
    ErrorCode.CONTAINER_ENSURE_FAILED: ErrorClassification.TRANSIENT,
    ErrorCode.QUEUE_ENSURE_FAILED: ErrorClassification.TRANSIENT,
    ErrorCode.ITEM_WRITE_FAILED: ErrorClassification.TRANSIENT,
    ErrorCode.READINESS_TIMEOUT: ErrorClassification.TRANSIENT,
    ErrorCode.SERVICE_UNAVAILABLE: ErrorClassification.TRANSIENT,
    ErrorCode.UNEXPECTED_ERROR: ErrorClassification.TRANSIENT,

    ErrorCode.THROTTLED: ErrorClassification.THROTTLING,
}


def is_retryable(error_code: ErrorCode) -> bool:
    """
    Determine if an error code should trigger a retry.

    Example:
        >>> is_retryable(ErrorCode.TOPOLOGY_INCOMPLETE)
        False
        >>> is_retryable(ErrorCode.SERVICE_UNAVAILABLE)
        True
    """
    classification = _ERROR_CLASSIFICATION.get(error_code, ErrorClassification.TRANSIENT)
    return classification != ErrorClassification.PERMANENT


def get_error_classification(error_code: ErrorCode) -> ErrorClassification:
    """Get the classification for an error code."""
    return _ERROR_CLASSIFICATION.get(error_code, ErrorClassification.TRANSIENT)


def classify_status_code(status_code: Optional[int], default: ErrorCode) -> ErrorCode:
    """
    Map an HTTP status code carried by an Azure SDK error to an ErrorCode.

    Args:
        status_code: `status_code` attribute of the SDK exception (may be None)
        default: Code to use for statuses without a specific mapping

    Returns:
        ErrorCode
    """
    if status_code in (401, 403):
        return ErrorCode.AUTHORIZATION_FAILED
    if status_code == 409:
        return ErrorCode.ITEM_CONFLICT
    if status_code in (400, 413):
        return ErrorCode.ITEM_INVALID
    if status_code == 429:
        return ErrorCode.THROTTLED
    if status_code in (502, 503, 504):
        return ErrorCode.SERVICE_UNAVAILABLE
    return default


# ============================================================================
# EXCEPTION HIERARCHY
# ============================================================================

class SeedingError(Exception):
    """
    Base exception for the seeding pipeline.

    Carries the resource and phase it was raised in so the dispatcher can
    log and classify it without parsing messages.
    """

    default_code = ErrorCode.UNEXPECTED_ERROR
    default_phase: Optional[str] = None

    def __init__(
        self,
        message: str,
        resource_name: Optional[str] = None,
        phase: Optional[str] = None,
        error_code: Optional[ErrorCode] = None,
        record_id: Optional[str] = None,
    ):
        self.message = message
        self.resource_name = resource_name
        self.phase = phase or self.default_phase
        self.error_code = error_code or self.default_code
        self.record_id = record_id
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        return is_retryable(self.error_code)

    def __str__(self):
        if self.resource_name:
            return f"[{self.resource_name}:{self.phase}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Structured form for logs and routine reports."""
        result = {
            "error": self.error_code.value,
            "error_type": type(self).__name__,
            "message": self.message,
            "phase": self.phase,
            "retryable": self.retryable,
        }
        if self.resource_name:
            result["resource_name"] = self.resource_name
        if self.record_id:
            result["record_id"] = self.record_id
        return result


class ConnectionResolutionError(SeedingError):
    """Resource could not be turned into a connection target."""

    default_code = ErrorCode.CONNECTION_FAILED
    default_phase = "connect"


class NamespaceEnsureError(SeedingError):
    """Database, container or queue could not be created or confirmed."""

    default_code = ErrorCode.CONTAINER_ENSURE_FAILED
    default_phase = "ensure"


class ItemWriteError(SeedingError):
    """A single record write failed."""

    default_code = ErrorCode.ITEM_WRITE_FAILED
    default_phase = "import"


class CancellationError(SeedingError):
    """The routine's cancellation token was signalled."""

    default_code = ErrorCode.CANCELLED


class LifecycleTransitionError(SeedingError):
    """A resource state machine was asked for a transition it does not allow."""

    default_code = ErrorCode.INVALID_TRANSITION
    default_phase = "lifecycle"
