"""
Domain exceptions.

Typed exceptions for explicit error handling.
Every exception carries an ErrorKind tag so the application layer can
surface failures without inspecting messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed taxonomy of client-side failures."""

    VALIDATION = "validation"  # Input out of bounds, rejected locally
    AUTH = "auth"  # Missing or invalid credential
    NETWORK = "network"  # Transport or timeout failure
    GATEWAY = "gateway"  # Remote call completed but reported failure
    INCOMPLETE_SNAPSHOT = "incomplete_snapshot"  # Mandatory sections missing


class GatewayErrorReason(str, Enum):
    """
    Why the gateway rejected a request.

    Resolved once at the adapter boundary from the wire payload.
    """

    MESSAGE_TOO_SHORT = "message_too_short"
    MESSAGE_TOO_LONG = "message_too_long"
    RATE_LIMITED = "rate_limited"
    DAILY_QUOTA_EXCEEDED = "daily_quota_exceeded"
    UNKNOWN = "unknown"


# ═══════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════


class DomainError(Exception):
    """
    Base exception for all client errors.

    All domain-specific exceptions inherit from this.
    Allows catching all client errors with single except clause.
    """

    kind: ErrorKind = ErrorKind.GATEWAY


# ═══════════════════════════════════════════════════════════
# VALIDATION EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class ValidationError(DomainError):
    """
    Input validation failed before any request was issued.

    Raised when:
    - Weight value is not a finite number
    - Configuration value is malformed
    - Required identifier is empty

    Example:
        >>> raise ValidationError("Please select a valid weight")
    """

    kind = ErrorKind.VALIDATION


class MessageValidationError(ValidationError):
    """
    Chat message length outside the accepted bounds.

    Example:
        >>> raise MessageValidationError(
        ...     "Message too short",
        ...     reason=GatewayErrorReason.MESSAGE_TOO_SHORT,
        ... )
    """

    def __init__(self, message: str, reason: GatewayErrorReason) -> None:
        super().__init__(message)
        self.reason = reason


class IncompleteSnapshotError(DomainError):
    """
    Snapshot would be missing a mandatory section.

    Raised when:
    - First merge lacks weight, calorie or goal analytics
    - Gateway result lacks a section the trigger owns

    Example:
        >>> raise IncompleteSnapshotError("Missing sections: goal_progress")
    """

    kind = ErrorKind.INCOMPLETE_SNAPSHOT


# ═══════════════════════════════════════════════════════════
# EXTERNAL SERVICE EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class AuthError(DomainError):
    """
    Authentication failed.

    Raised when:
    - No token is available
    - Gateway answers 401/403

    Example:
        >>> raise AuthError("User not authenticated")
    """

    kind = ErrorKind.AUTH


class NetworkError(DomainError):
    """
    Transport failure talking to the gateway.

    Raised when:
    - Connection refused or reset
    - Request exceeds the connection timeout

    Example:
        >>> raise NetworkError("Gateway timeout after 30s")
    """

    kind = ErrorKind.NETWORK


class GatewayError(DomainError):
    """
    Gateway call completed but reported failure.

    Example:
        >>> raise GatewayError(
        ...     "Too many requests",
        ...     reason=GatewayErrorReason.RATE_LIMITED,
        ...     status=429,
        ... )
    """

    kind = ErrorKind.GATEWAY

    def __init__(
        self,
        message: str,
        reason: GatewayErrorReason = GatewayErrorReason.UNKNOWN,
        status: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.status = status
