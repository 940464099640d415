"""
Gateway failure classification.

The backend reports failures as {"success": false, "error": "..."} with
an HTTP status. This module turns that into a typed GatewayErrorReason
once, at the adapter boundary, so nothing above it reads error text.
"""

from typing import Any, Mapping, Optional

from nutrition_client.domain.chat.models import MAX_MESSAGE_LENGTH, MIN_MESSAGE_LENGTH
from nutrition_client.domain.shared.errors import GatewayErrorReason

# Explicit machine-readable codes, preferred when the backend sends one.
_CODES: dict[str, GatewayErrorReason] = {
    "MESSAGE_TOO_SHORT": GatewayErrorReason.MESSAGE_TOO_SHORT,
    "MESSAGE_TOO_LONG": GatewayErrorReason.MESSAGE_TOO_LONG,
    "RATE_LIMITED": GatewayErrorReason.RATE_LIMITED,
    "DAILY_QUOTA_EXCEEDED": GatewayErrorReason.DAILY_QUOTA_EXCEEDED,
}

# The backend sends no code for its per-day chat quota, only the text
# "Daily AI request limit reached. Please try again tomorrow or upgrade your plan."
_DAILY_QUOTA_MARKER = "daily ai request limit"


def error_text(payload: Optional[Mapping[str, Any]], status: int) -> str:
    """Best human-readable message from a failure payload."""
    if payload:
        for key in ("error", "message"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Gateway returned HTTP {status}"


def classify_failure(
    status: int,
    payload: Optional[Mapping[str, Any]],
    message_length: Optional[int] = None,
) -> GatewayErrorReason:
    """
    Resolve why the gateway rejected a request.

    Args:
        status: HTTP status
        payload: Decoded JSON body, if any
        message_length: Trimmed length of the chat message sent, for chat calls

    Returns:
        GatewayErrorReason

    Example:
        >>> classify_failure(400, {"error": "Message too short"}, message_length=2)
        <GatewayErrorReason.MESSAGE_TOO_SHORT: 'message_too_short'>
    """
    if payload:
        code = payload.get("code") or payload.get("errorCode")
        if isinstance(code, str) and code.upper() in _CODES:
            return _CODES[code.upper()]

    if status == 400 and message_length is not None:
        if message_length < MIN_MESSAGE_LENGTH:
            return GatewayErrorReason.MESSAGE_TOO_SHORT
        if message_length > MAX_MESSAGE_LENGTH:
            return GatewayErrorReason.MESSAGE_TOO_LONG

    if status == 429:
        # Per-minute burst and per-day quota share the status.
        if _DAILY_QUOTA_MARKER in error_text(payload, status).lower():
            return GatewayErrorReason.DAILY_QUOTA_EXCEEDED
        return GatewayErrorReason.RATE_LIMITED

    return GatewayErrorReason.UNKNOWN
