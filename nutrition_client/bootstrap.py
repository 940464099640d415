"""
Service wiring.

ProgressClient opens the HTTP adapter and exposes the application
services built on top of it, configured from ClientSettings.
"""

from typing import Optional

import structlog

from nutrition_client.application.analytics.orchestrator import ProgressAnalyticsOrchestrator
from nutrition_client.application.analytics.state import AnalyticsState
from nutrition_client.application.chat.session import ConversationService, ConversationState
from nutrition_client.application.weight.coordinator import WeightLoggingCoordinator
from nutrition_client.application.weight.history_service import WeightHistoryService
from nutrition_client.config import ClientSettings
from nutrition_client.domain.gateway.ports import IProgressGateway, ITokenProvider
from nutrition_client.infrastructure.gateway.api_client import ProgressApiClient
from nutrition_client.infrastructure.gateway.token_provider import StaticTokenProvider
from nutrition_client.logging_config import configure_logging

logger = structlog.get_logger(__name__)


class ProgressServices:
    """Application services sharing one gateway."""

    def __init__(self, gateway: IProgressGateway, settings: ClientSettings):
        self.settings = settings
        self.analytics = ProgressAnalyticsOrchestrator(
            gateway=gateway,
            fence_stale_responses=settings.fence_stale_responses,
        )
        self.weight_logging = WeightLoggingCoordinator(gateway=gateway, orchestrator=self.analytics)
        self.weight_history = WeightHistoryService(gateway=gateway)
        self.chat = ConversationService(gateway=gateway)

    def new_progress_state(self) -> AnalyticsState:
        """Fresh state for a newly mounted progress screen."""
        return AnalyticsState(timeframe=self.settings.default_timeframe)

    def new_conversation(self, first_name: Optional[str] = None) -> ConversationState:
        """Fresh conversation seeded with the welcome message."""
        return ConversationState.start(first_name=first_name)


class ProgressClient:
    """
    HTTP-backed services.

    Example:
        >>> async with ProgressClient(ClientSettings.from_env()) as services:
        ...     state = services.new_progress_state()
        ...     await services.analytics.load(state)
    """

    def __init__(
        self,
        settings: ClientSettings,
        token_provider: Optional[ITokenProvider] = None,
    ):
        self.settings = settings
        self._token_provider = token_provider or StaticTokenProvider(settings.auth_token)
        self._api_client: Optional[ProgressApiClient] = None

    async def __aenter__(self) -> ProgressServices:
        configure_logging(self.settings.log_level)
        self._api_client = ProgressApiClient(
            base_url=self.settings.api_url,
            token_provider=self._token_provider,
            timeout_seconds=self.settings.timeout_seconds,
        )
        await self._api_client.__aenter__()
        logger.info(
            "Progress client ready",
            api_url=self.settings.api_url,
            fence_stale_responses=self.settings.fence_stale_responses,
        )
        return ProgressServices(gateway=self._api_client, settings=self.settings)

    async def __aexit__(self, *args: object) -> None:
        if self._api_client:
            await self._api_client.__aexit__(*args)
            self._api_client = None
