"""
AI nutrition assistant conversation.

ConversationState holds the transcript and the Idle/Sending status for
one chat screen; ConversationService exchanges turns with the gateway.
Every turn appends exactly one user message and one assistant message,
the latter being a canned reply when the gateway call fails.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import structlog

from nutrition_client.domain.chat.models import (
    MAX_MESSAGE_LENGTH,
    MIN_MESSAGE_LENGTH,
    WELCOME_MESSAGE_ID,
    ChatFailure,
    ChatMessage,
    ChatTranscript,
    MessageCategory,
    MessageOrigin,
    SessionStatus,
)
from nutrition_client.domain.gateway.ports import IChatGateway
from nutrition_client.domain.shared.errors import (
    DomainError,
    GatewayError,
    GatewayErrorReason,
    MessageValidationError,
)

logger = structlog.get_logger(__name__)


QUICK_SUGGESTIONS: tuple[str, ...] = (
    "What should I eat for breakfast?",
    "Suggest a high-protein meal",
    "Low-calorie dinner ideas",
    "Foods to avoid with my allergies",
    "How am I doing with my goals?",
    "Healthy snack recommendations",
)

CANNED_REPLIES: dict[ChatFailure, str] = {
    ChatFailure.TOO_SHORT: (
        "Please ask a longer, more detailed question so I can help you better!"
    ),
    ChatFailure.TOO_LONG: (
        "Your message is a bit too long! Please try breaking it into smaller questions."
    ),
    ChatFailure.RATE_LIMITED: (
        "You're asking questions very quickly! Please wait a moment before asking again."
    ),
    ChatFailure.DAILY_QUOTA_EXCEEDED: (
        "You've reached your daily question limit. Feel free to continue tomorrow!"
    ),
    ChatFailure.GENERIC: (
        "I'm sorry, I'm having trouble connecting right now. Please try again in a moment!"
    ),
}

_FAILURE_BY_REASON: dict[GatewayErrorReason, ChatFailure] = {
    GatewayErrorReason.MESSAGE_TOO_SHORT: ChatFailure.TOO_SHORT,
    GatewayErrorReason.MESSAGE_TOO_LONG: ChatFailure.TOO_LONG,
    GatewayErrorReason.RATE_LIMITED: ChatFailure.RATE_LIMITED,
    GatewayErrorReason.DAILY_QUOTA_EXCEEDED: ChatFailure.DAILY_QUOTA_EXCEEDED,
}


def welcome_text(first_name: Optional[str] = None) -> str:
    """Greeting shown as the first assistant message."""
    return (
        f"Hi {first_name or 'there'}! I'm your AI nutrition assistant. I can help you with:\n\n"
        "- Personalized food recommendations\n"
        "- Nutrition insights based on your goals\n"
        "- Meal planning suggestions\n"
        "- Allergy-safe alternatives\n\n"
        "What would you like to know?"
    )


def failure_from_error(error: DomainError) -> ChatFailure:
    """Map a typed gateway error to the canned reply it deserves."""
    if isinstance(error, GatewayError):
        return _FAILURE_BY_REASON.get(error.reason, ChatFailure.GENERIC)
    return ChatFailure.GENERIC


def validate_message(text: str) -> str:
    """
    Trim and bound-check a chat message.

    Returns:
        Trimmed text

    Raises:
        MessageValidationError: If shorter than 3 or longer than 500 chars
    """
    trimmed = text.strip()
    if len(trimmed) < MIN_MESSAGE_LENGTH:
        raise MessageValidationError(
            f"Please ask a proper question with at least {MIN_MESSAGE_LENGTH} characters.",
            reason=GatewayErrorReason.MESSAGE_TOO_SHORT,
        )
    if len(trimmed) > MAX_MESSAGE_LENGTH:
        raise MessageValidationError(
            f"Please keep your message under {MAX_MESSAGE_LENGTH} characters.",
            reason=GatewayErrorReason.MESSAGE_TOO_LONG,
        )
    return trimmed


class ConversationState:
    """
    Transcript and status of one chat screen.

    Example:
        >>> state = ConversationState.start(first_name="Ada")
        >>> state.transcript.messages[0].id
        'welcome'
    """

    def __init__(self, transcript: Optional[ChatTranscript] = None) -> None:
        self.transcript = transcript if transcript is not None else ChatTranscript()
        self._pending = 0

    @classmethod
    def start(
        cls,
        first_name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ConversationState:
        """New conversation seeded with the welcome message."""
        state = cls()
        state.transcript.append(
            ChatMessage(
                id=WELCOME_MESSAGE_ID,
                text=welcome_text(first_name),
                origin=MessageOrigin.ASSISTANT,
                timestamp=now or datetime.now(timezone.utc),
                category=MessageCategory.GENERAL,
            )
        )
        return state

    @property
    def status(self) -> SessionStatus:
        return SessionStatus.SENDING if self._pending else SessionStatus.IDLE

    @property
    def can_send(self) -> bool:
        """Advisory: the send button is disabled while a reply is awaited."""
        return self.status is SessionStatus.IDLE

    def mark_sending(self) -> None:
        self._pending += 1

    def mark_settled(self) -> None:
        self._pending = max(0, self._pending - 1)


class ConversationService:
    """
    Exchanges chat turns with the gateway.

    The full transcript is resent on every turn; the client never
    truncates or summarizes it. In-flight sends cannot be cancelled.
    """

    def __init__(self, gateway: IChatGateway):
        self._gateway = gateway

    async def send(self, state: ConversationState, text: str) -> ChatMessage:
        """
        Send one user message and append the assistant's answer.

        Args:
            state: Conversation to extend
            text: Raw user input

        Returns:
            The appended assistant message (reply or canned error reply)

        Raises:
            MessageValidationError: If the trimmed text is out of bounds;
                nothing is appended and no request is made
        """
        message_text = validate_message(text)
        history = state.transcript.as_history()

        state.transcript.append(ChatMessage.from_user(message_text))
        state.mark_sending()
        logger.info(
            "Sending chat message",
            message_length=len(message_text),
            history_length=len(history),
        )

        try:
            reply = await self._gateway.ai_chat(message_text, history)
            answer = ChatMessage.from_assistant(reply.response, timestamp=reply.timestamp)
        except DomainError as e:
            failure = failure_from_error(e)
            logger.warning(
                "Chat turn failed",
                failure=failure.value,
                kind=e.kind.value,
                error=str(e),
            )
            answer = ChatMessage.from_assistant(CANNED_REPLIES[failure])
        finally:
            state.mark_settled()

        state.transcript.append(answer)
        return answer
