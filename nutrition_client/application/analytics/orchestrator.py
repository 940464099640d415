"""
Progress analytics fetch orchestrator.

Decides, for every UI trigger, which sections are requested and which
are merged into the screen's AnalyticsState. Exactly one gateway request
is issued per trigger that fires; expensive AI sections are only
requested on the insights tab or on explicit regeneration.

Design Pattern: Service Layer + Dependency Injection
"""

import structlog

from nutrition_client.application.analytics.state import (
    FETCH_PLANS,
    AnalyticsState,
    FetchOutcome,
    ProgressTab,
    SurfacedError,
    Trigger,
)
from nutrition_client.domain.analytics.merge import merge_snapshot, project_sections
from nutrition_client.domain.analytics.models import MANDATORY_SECTIONS, AnalyticsRequest
from nutrition_client.domain.gateway.ports import IAnalyticsGateway
from nutrition_client.domain.shared.errors import DomainError
from nutrition_client.domain.shared.value_objects import Timeframe

logger = structlog.get_logger(__name__)


class ProgressAnalyticsOrchestrator:
    """
    Orchestrates analytics fetches for the progress screen.

    Triggers:
    - load: initial mount, mandatory sections only
    - change_timeframe: refreshes weight and calorie series only
    - activate_tab: insights tab fetches the AI pair once, if absent
    - refresh: pull-to-refresh, mandatory sections, AI pair kept
    - regenerate_insights: AI pair, unconditionally

    A failed request leaves the snapshot untouched and surfaces the error
    through state.last_error. Responses merge on arrival, so the last one
    to resolve wins unless fence_stale_responses is enabled.

    Example:
        >>> orchestrator = ProgressAnalyticsOrchestrator(gateway=api_client)
        >>> state = AnalyticsState()
        >>> await orchestrator.load(state)
        >>> await orchestrator.activate_tab(state, ProgressTab.INSIGHTS)
        >>> state.snapshot.has_ai_insights
        True
    """

    def __init__(
        self,
        gateway: IAnalyticsGateway,
        fence_stale_responses: bool = False,
    ):
        """
        Initialize orchestrator.

        Args:
            gateway: Remote analytics gateway
            fence_stale_responses: Drop a response when a newer request
                targets one of its sections
        """
        self._gateway = gateway
        self._fence = fence_stale_responses

    async def load(self, state: AnalyticsState) -> FetchOutcome:
        """Initial load for a freshly mounted screen."""
        return await self._fetch(state, Trigger.INITIAL_LOAD)

    async def refresh(self, state: AnalyticsState) -> FetchOutcome:
        """Manual refresh; never requests the AI pair."""
        return await self._fetch(state, Trigger.MANUAL_REFRESH)

    async def change_timeframe(self, state: AnalyticsState, timeframe: Timeframe) -> FetchOutcome:
        """
        Switch the analytics window.

        Selecting the active timeframe is a no-op. Otherwise only the
        weight and calorie sections are refetched.
        """
        if timeframe == state.timeframe:
            return FetchOutcome(trigger=Trigger.TIMEFRAME_CHANGE, request_issued=False)

        logger.debug(
            "Timeframe changed",
            previous=state.timeframe.value,
            timeframe=timeframe.value,
        )
        state.timeframe = timeframe
        return await self._fetch(state, Trigger.TIMEFRAME_CHANGE)

    async def activate_tab(self, state: AnalyticsState, tab: ProgressTab) -> FetchOutcome:
        """
        Select a tab.

        The insights tab fetches the AI pair when a snapshot exists without
        it and no AI request is already outstanding.
        """
        state.active_tab = tab
        if tab is not ProgressTab.INSIGHTS:
            return FetchOutcome(trigger=Trigger.INSIGHTS_TAB, request_issued=False)

        if state.snapshot is None or state.snapshot.has_ai_insights or state.is_ai_loading:
            logger.debug(
                "Insights fetch skipped",
                has_snapshot=state.snapshot is not None,
                ai_loading=state.is_ai_loading,
            )
            return FetchOutcome(trigger=Trigger.INSIGHTS_TAB, request_issued=False)

        return await self._fetch(state, Trigger.INSIGHTS_TAB)

    async def regenerate_insights(self, state: AnalyticsState) -> FetchOutcome:
        """Refetch the AI pair regardless of what is cached."""
        return await self._fetch(state, Trigger.REGENERATE_INSIGHTS)

    async def _fetch(self, state: AnalyticsState, trigger: Trigger) -> FetchOutcome:
        plan = FETCH_PLANS[trigger]
        request = AnalyticsRequest(
            timeframe=state.timeframe,
            include_ai=plan.include_ai,
            include_food_recommendations=plan.include_ai,
        )
        # With nothing cached the response seeds the whole snapshot
        wanted = plan.sections if state.snapshot is not None else plan.sections | MANDATORY_SECTIONS

        sequence = state.begin(trigger, wanted)
        logger.info(
            "Requesting analytics",
            trigger=trigger.value,
            timeframe=request.timeframe.value,
            include_ai=request.include_ai,
            sequence=sequence,
        )

        try:
            result = await self._gateway.get_analytics(request)
            scoped = project_sections(result, wanted)

            if self._fence and state.is_superseded(sequence, wanted):
                logger.info(
                    "Discarding superseded analytics response",
                    trigger=trigger.value,
                    sequence=sequence,
                )
                return FetchOutcome(trigger=trigger, request_issued=True, applied=False)

            state.snapshot = merge_snapshot(state.snapshot, scoped)

        except DomainError as e:
            surfaced = SurfacedError(
                kind=e.kind,
                message=plan.failure_message,
                detail=str(e),
                trigger=trigger,
            )
            state.last_error = surfaced
            logger.warning(
                "Analytics request failed",
                trigger=trigger.value,
                kind=e.kind.value,
                error=str(e),
            )
            return FetchOutcome(trigger=trigger, request_issued=True, error=surfaced)

        finally:
            state.end(trigger)

        state.last_error = None
        logger.info(
            "Analytics merged",
            trigger=trigger.value,
            sections=sorted(s.value for s in wanted),
            has_ai_insights=state.snapshot.has_ai_insights,
        )
        return FetchOutcome(trigger=trigger, request_issued=True, applied=True)

