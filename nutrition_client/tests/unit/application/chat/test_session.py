"""
Tests for the AI chat conversation.
"""

from datetime import datetime, timezone
from typing import Any

import pytest

from nutrition_client.application.chat.session import (
    CANNED_REPLIES,
    QUICK_SUGGESTIONS,
    ConversationService,
    ConversationState,
    failure_from_error,
    validate_message,
    welcome_text,
)
from nutrition_client.domain.chat.models import (
    WELCOME_MESSAGE_ID,
    ChatFailure,
    ChatReply,
    ChatTurn,
    MessageOrigin,
    SessionStatus,
)
from nutrition_client.domain.shared.errors import (
    AuthError,
    DomainError,
    GatewayError,
    GatewayErrorReason,
    MessageValidationError,
    NetworkError,
)

REPLY_TIME = datetime(2024, 5, 1, 12, 0, 5, tzinfo=timezone.utc)


@pytest.fixture
def service(mock_gateway: Any) -> ConversationService:
    return ConversationService(gateway=mock_gateway)


@pytest.fixture
def conversation() -> ConversationState:
    return ConversationState.start(first_name="Ada")


class TestWelcome:
    """Conversation seeding."""

    def test_welcome_message(self, conversation: ConversationState) -> None:
        (message,) = conversation.transcript.messages

        assert message.id == WELCOME_MESSAGE_ID
        assert message.origin is MessageOrigin.ASSISTANT
        assert message.text.startswith("Hi Ada!")
        assert conversation.status is SessionStatus.IDLE

    def test_welcome_fallback_name(self) -> None:
        assert welcome_text(None).startswith("Hi there!")

    def test_quick_suggestions(self) -> None:
        assert len(QUICK_SUGGESTIONS) == 6
        assert "Suggest a high-protein meal" in QUICK_SUGGESTIONS


class TestValidateMessage:
    """Message length bounds on trimmed text."""

    def test_trims(self) -> None:
        assert validate_message("  Hey there  ") == "Hey there"

    def test_too_short(self) -> None:
        with pytest.raises(MessageValidationError) as exc_info:
            validate_message("  hi  ")

        assert exc_info.value.reason is GatewayErrorReason.MESSAGE_TOO_SHORT

    def test_too_long(self) -> None:
        with pytest.raises(MessageValidationError) as exc_info:
            validate_message("x" * 501)

        assert exc_info.value.reason is GatewayErrorReason.MESSAGE_TOO_LONG

    def test_bounds_inclusive(self) -> None:
        assert validate_message("abc") == "abc"
        assert len(validate_message("x" * 500)) == 500


class TestSend:
    """Exchanging turns with the gateway."""

    @pytest.mark.parametrize("text", ["hi", "x" * 501])
    async def test_out_of_bounds_makes_no_call(
        self,
        service: ConversationService,
        mock_gateway: Any,
        conversation: ConversationState,
        text: str,
    ) -> None:
        with pytest.raises(MessageValidationError):
            await service.send(conversation, text)

        mock_gateway.ai_chat.assert_not_called()
        assert len(conversation.transcript) == 1

    async def test_sends_full_prior_transcript(
        self,
        service: ConversationService,
        mock_gateway: Any,
        conversation: ConversationState,
    ) -> None:
        mock_gateway.ai_chat.return_value = ChatReply(
            response="Try eggs and oats.", timestamp=REPLY_TIME
        )
        await service.send(conversation, "What should I eat for breakfast?")
        mock_gateway.ai_chat.reset_mock()
        mock_gateway.ai_chat.return_value = ChatReply(response="Sure.", timestamp=REPLY_TIME)
        question = "q" * 50

        await service.send(conversation, question)

        mock_gateway.ai_chat.assert_awaited_once()
        message, history = mock_gateway.ai_chat.call_args.args
        assert message == question
        assert history == [
            ChatTurn(role=MessageOrigin.ASSISTANT, content=welcome_text("Ada")),
            ChatTurn(role=MessageOrigin.USER, content="What should I eat for breakfast?"),
            ChatTurn(role=MessageOrigin.ASSISTANT, content="Try eggs and oats."),
        ]

    async def test_appends_user_then_reply(
        self,
        service: ConversationService,
        mock_gateway: Any,
        conversation: ConversationState,
    ) -> None:
        mock_gateway.ai_chat.return_value = ChatReply(
            response="Greek yogurt with berries.", timestamp=REPLY_TIME
        )

        answer = await service.send(conversation, "  Healthy snack recommendations  ")

        messages = conversation.transcript.messages
        assert len(messages) == 3
        assert messages[1].origin is MessageOrigin.USER
        assert messages[1].text == "Healthy snack recommendations"
        assert messages[2] is answer
        assert answer.text == "Greek yogurt with berries."
        assert answer.timestamp == REPLY_TIME
        assert conversation.status is SessionStatus.IDLE

    async def test_sending_status_while_awaiting(
        self,
        service: ConversationService,
        mock_gateway: Any,
        conversation: ConversationState,
    ) -> None:
        observed: list[SessionStatus] = []

        async def reply(message: str, history: list[ChatTurn]) -> ChatReply:
            observed.append(conversation.status)
            return ChatReply(response="ok", timestamp=REPLY_TIME)

        mock_gateway.ai_chat.side_effect = reply

        await service.send(conversation, "How am I doing with my goals?")

        assert observed == [SessionStatus.SENDING]
        assert conversation.can_send

    @pytest.mark.parametrize(
        "error,failure",
        [
            (
                GatewayError("Message too short", reason=GatewayErrorReason.MESSAGE_TOO_SHORT),
                ChatFailure.TOO_SHORT,
            ),
            (
                GatewayError("Message too long", reason=GatewayErrorReason.MESSAGE_TOO_LONG),
                ChatFailure.TOO_LONG,
            ),
            (
                GatewayError("Too many requests", reason=GatewayErrorReason.RATE_LIMITED),
                ChatFailure.RATE_LIMITED,
            ),
            (
                GatewayError(
                    "Daily AI request limit reached",
                    reason=GatewayErrorReason.DAILY_QUOTA_EXCEEDED,
                ),
                ChatFailure.DAILY_QUOTA_EXCEEDED,
            ),
            (GatewayError("Internal server error", status=500), ChatFailure.GENERIC),
            (NetworkError("connection reset"), ChatFailure.GENERIC),
            (AuthError("User not authenticated"), ChatFailure.GENERIC),
        ],
    )
    async def test_failure_appends_canned_reply(
        self,
        service: ConversationService,
        mock_gateway: Any,
        conversation: ConversationState,
        error: DomainError,
        failure: ChatFailure,
    ) -> None:
        mock_gateway.ai_chat.side_effect = error

        answer = await service.send(conversation, "Low-calorie dinner ideas")

        assert answer.text == CANNED_REPLIES[failure]
        assert answer.origin is MessageOrigin.ASSISTANT
        assert len(conversation.transcript) == 3
        assert conversation.status is SessionStatus.IDLE

    def test_failure_from_error(self) -> None:
        assert failure_from_error(NetworkError("x")) is ChatFailure.GENERIC
        assert (
            failure_from_error(GatewayError("x", reason=GatewayErrorReason.RATE_LIMITED))
            is ChatFailure.RATE_LIMITED
        )
