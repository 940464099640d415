"""
AI chat domain models.

The transcript is append-only: messages are never reordered, edited or
dropped by the client, and the whole history is resent on every turn.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field

WELCOME_MESSAGE_ID = "welcome"

MIN_MESSAGE_LENGTH = 3
MAX_MESSAGE_LENGTH = 500


class MessageOrigin(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class MessageCategory(str, Enum):
    """Kind of assistant message, drives the bubble icon."""

    RECOMMENDATION = "recommendation"
    INSIGHT = "insight"
    GENERAL = "general"


class ChatFailure(str, Enum):
    """Cause of a failed turn, selects the canned assistant reply."""

    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    RATE_LIMITED = "rate_limited"
    DAILY_QUOTA_EXCEEDED = "daily_quota_exceeded"
    GENERIC = "generic"


class SessionStatus(str, Enum):
    """Conversation state machine: Idle -> Sending -> Idle."""

    IDLE = "idle"
    SENDING = "sending"


class ChatMessage(BaseModel):
    """
    One message in the transcript.

    Example:
        >>> msg = ChatMessage.from_user("What should I eat?")
        >>> msg.origin
        <MessageOrigin.USER: 'user'>
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    text: str
    origin: MessageOrigin
    timestamp: datetime
    category: Optional[MessageCategory] = None

    @property
    def is_user(self) -> bool:
        return self.origin is MessageOrigin.USER

    @classmethod
    def from_user(cls, text: str, timestamp: Optional[datetime] = None) -> ChatMessage:
        """Create a user-authored message."""
        return cls(
            id=uuid.uuid4().hex,
            text=text,
            origin=MessageOrigin.USER,
            timestamp=timestamp or datetime.now(timezone.utc),
        )

    @classmethod
    def from_assistant(
        cls,
        text: str,
        timestamp: Optional[datetime] = None,
        category: MessageCategory = MessageCategory.GENERAL,
    ) -> ChatMessage:
        """Create an assistant-authored message."""
        return cls(
            id=uuid.uuid4().hex,
            text=text,
            origin=MessageOrigin.ASSISTANT,
            timestamp=timestamp or datetime.now(timezone.utc),
            category=category,
        )


class ChatTurn(BaseModel):
    """One history entry as the gateway expects it."""

    model_config = ConfigDict(frozen=True)

    role: MessageOrigin
    content: str

    def to_payload(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class ChatReply(BaseModel):
    """Assistant reply returned by the gateway."""

    model_config = ConfigDict(frozen=True)

    response: str
    timestamp: datetime


class ChatTranscript:
    """
    Insertion-ordered, append-only message log.

    Example:
        >>> transcript = ChatTranscript()
        >>> transcript.append(ChatMessage.from_user("Hello there"))
        >>> len(transcript)
        1
    """

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []

    def append(self, message: ChatMessage) -> None:
        self._messages.append(message)

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """Read-only view of the messages in insertion order."""
        return tuple(self._messages)

    def as_history(self) -> list[ChatTurn]:
        """Full transcript re-expressed as role/content pairs."""
        return [ChatTurn(role=m.origin, content=m.text) for m in self._messages]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(tuple(self._messages))
