"""
Tests for AnalyticsState bookkeeping.
"""

from nutrition_client.application.analytics.state import (
    FETCH_PLANS,
    AnalyticsState,
    FetchOutcome,
    SurfacedError,
    Trigger,
)
from nutrition_client.domain.analytics.models import MANDATORY_SECTIONS, Section
from nutrition_client.domain.shared.errors import ErrorKind

CHARTS = frozenset({Section.WEIGHT, Section.CALORIES})


class TestFetchPlans:
    """Request shape per trigger."""

    def test_ai_only_on_ai_triggers(self) -> None:
        assert FETCH_PLANS[Trigger.INSIGHTS_TAB].include_ai
        assert FETCH_PLANS[Trigger.REGENERATE_INSIGHTS].include_ai
        assert not FETCH_PLANS[Trigger.INITIAL_LOAD].include_ai
        assert not FETCH_PLANS[Trigger.TIMEFRAME_CHANGE].include_ai
        assert not FETCH_PLANS[Trigger.MANUAL_REFRESH].include_ai

    def test_owned_sections(self) -> None:
        assert FETCH_PLANS[Trigger.INITIAL_LOAD].sections == MANDATORY_SECTIONS
        assert FETCH_PLANS[Trigger.MANUAL_REFRESH].sections == MANDATORY_SECTIONS
        assert FETCH_PLANS[Trigger.TIMEFRAME_CHANGE].sections == CHARTS
        assert FETCH_PLANS[Trigger.INSIGHTS_TAB].sections == frozenset({Section.AI_INSIGHTS})


class TestInFlight:
    """Loading flags derived from in-flight triggers."""

    def test_idle(self) -> None:
        state = AnalyticsState()

        assert not state.is_loading
        assert not state.is_refreshing
        assert not state.is_chart_loading
        assert not state.is_ai_loading
        assert state.can_change_timeframe

    def test_chart_loading_blocks_timeframe(self) -> None:
        state = AnalyticsState()

        state.begin(Trigger.TIMEFRAME_CHANGE, CHARTS)

        assert state.is_chart_loading
        assert not state.can_change_timeframe

        state.end(Trigger.TIMEFRAME_CHANGE)

        assert state.can_change_timeframe
        assert Trigger.TIMEFRAME_CHANGE not in state.in_flight

    def test_concurrent_same_trigger(self) -> None:
        state = AnalyticsState()
        state.begin(Trigger.REGENERATE_INSIGHTS, frozenset({Section.AI_INSIGHTS}))
        state.begin(Trigger.REGENERATE_INSIGHTS, frozenset({Section.AI_INSIGHTS}))

        state.end(Trigger.REGENERATE_INSIGHTS)

        assert state.is_ai_loading

        state.end(Trigger.REGENERATE_INSIGHTS)

        assert not state.is_ai_loading


class TestSupersession:
    """Sequence tracking used by the stale-response fence."""

    def test_newer_overlapping_request_supersedes(self) -> None:
        state = AnalyticsState()
        older = state.begin(Trigger.TIMEFRAME_CHANGE, CHARTS)
        state.begin(Trigger.MANUAL_REFRESH, MANDATORY_SECTIONS)

        assert state.is_superseded(older, CHARTS)

    def test_disjoint_request_does_not_supersede(self) -> None:
        state = AnalyticsState()
        older = state.begin(Trigger.INSIGHTS_TAB, frozenset({Section.AI_INSIGHTS}))
        state.begin(Trigger.TIMEFRAME_CHANGE, CHARTS)

        assert not state.is_superseded(older, frozenset({Section.AI_INSIGHTS}))

    def test_latest_not_superseded(self) -> None:
        state = AnalyticsState()
        latest = state.begin(Trigger.INITIAL_LOAD, MANDATORY_SECTIONS)

        assert not state.is_superseded(latest, MANDATORY_SECTIONS)


class TestFetchOutcome:
    def test_ok(self) -> None:
        assert FetchOutcome(trigger=Trigger.INITIAL_LOAD, request_issued=True, applied=True).ok

    def test_error(self) -> None:
        error = SurfacedError(kind=ErrorKind.NETWORK, message="Failed to load analytics")

        assert not FetchOutcome(
            trigger=Trigger.INITIAL_LOAD, request_issued=True, error=error
        ).ok
