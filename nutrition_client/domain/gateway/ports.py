"""
Ports (Interfaces) for the remote analytics gateway.

The backend owns analytics computation, AI replies and persistence; the
client only sees these operations. Implementations raise the typed
errors from domain.shared.errors.

Design Pattern: Ports & Adapters (Hexagonal Architecture)
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from nutrition_client.domain.analytics.models import AnalyticsRequest, AnalyticsSections
from nutrition_client.domain.chat.models import ChatReply, ChatTurn
from nutrition_client.domain.weight.models import WeightEntry


@runtime_checkable
class IAnalyticsGateway(Protocol):
    """Port for progress analytics computed server-side."""

    async def get_analytics(self, request: AnalyticsRequest) -> AnalyticsSections:
        """
        Fetch an analytics result.

        Args:
            request: Timeframe and AI feature flags

        Returns:
            Sections computed by the backend

        Raises:
            AuthError: If no valid credential
            NetworkError: If the transport fails
            GatewayError: If the backend reports failure
        """
        ...


@runtime_checkable
class IChatGateway(Protocol):
    """Port for the AI nutrition assistant."""

    async def ai_chat(self, message: str, history: list[ChatTurn]) -> ChatReply:
        """
        Exchange one chat turn.

        Args:
            message: New user message
            history: Full prior transcript as role/content pairs

        Returns:
            Assistant reply

        Raises:
            AuthError: If no valid credential
            NetworkError: If the transport fails
            GatewayError: If rejected; reason tells why
        """
        ...


@runtime_checkable
class IWeightGateway(Protocol):
    """Port for weight sample storage."""

    async def log_weight(self, value: float, recorded_at: datetime) -> None:
        """Record a weight sample (side effect only)."""
        ...

    async def get_weight_history(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[WeightEntry]:
        """Weight entries in [start, end], everything when unbounded."""
        ...

    async def delete_weight_entry(self, entry_id: str) -> None:
        """Remove one weight entry."""
        ...


@runtime_checkable
class IProgressGateway(IAnalyticsGateway, IChatGateway, IWeightGateway, Protocol):
    """The whole backend surface used by the client."""


@runtime_checkable
class ITokenProvider(Protocol):
    """
    Port for credential lookup.

    Token storage is owned by the auth layer; the gateway adapter only
    asks for the current bearer token.
    """

    async def get_token(self) -> Optional[str]:
        """Current bearer token, None when signed out."""
        ...
