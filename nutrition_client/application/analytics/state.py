"""
Progress screen state.

AnalyticsState is owned by one screen instance and handed to the
orchestrator by reference. It holds the cached snapshot plus everything
the UI needs to render loading indicators and errors.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from nutrition_client.domain.analytics.models import (
    MANDATORY_SECTIONS,
    AnalyticsSnapshot,
    Section,
)
from nutrition_client.domain.shared.errors import ErrorKind
from nutrition_client.domain.shared.value_objects import DEFAULT_TIMEFRAME, Timeframe


class ProgressTab(str, Enum):
    """Tabs of the progress screen."""

    OVERVIEW = "overview"
    WEIGHT = "weight"
    CALORIES = "calories"
    INSIGHTS = "insights"


class Trigger(str, Enum):
    """UI event class deciding what is fetched and merged."""

    INITIAL_LOAD = "initial_load"
    TIMEFRAME_CHANGE = "timeframe_change"
    INSIGHTS_TAB = "insights_tab"
    MANUAL_REFRESH = "manual_refresh"
    REGENERATE_INSIGHTS = "regenerate_insights"


@dataclass(frozen=True)
class FetchPlan:
    """Request flags and owned sections for one trigger."""

    include_ai: bool
    sections: frozenset[Section]
    failure_message: str


_AI_ONLY = frozenset({Section.AI_INSIGHTS})

FETCH_PLANS: dict[Trigger, FetchPlan] = {
    Trigger.INITIAL_LOAD: FetchPlan(
        include_ai=False,
        sections=MANDATORY_SECTIONS,
        failure_message="Failed to load analytics",
    ),
    Trigger.TIMEFRAME_CHANGE: FetchPlan(
        include_ai=False,
        sections=frozenset({Section.WEIGHT, Section.CALORIES}),
        failure_message="Failed to update charts",
    ),
    Trigger.INSIGHTS_TAB: FetchPlan(
        include_ai=True,
        sections=_AI_ONLY,
        failure_message="Failed to load AI insights",
    ),
    Trigger.MANUAL_REFRESH: FetchPlan(
        include_ai=False,
        sections=MANDATORY_SECTIONS,
        failure_message="Failed to load analytics",
    ),
    Trigger.REGENERATE_INSIGHTS: FetchPlan(
        include_ai=True,
        sections=_AI_ONLY,
        failure_message="Failed to load AI insights",
    ),
}

_AI_TRIGGERS = frozenset({Trigger.INSIGHTS_TAB, Trigger.REGENERATE_INSIGHTS})


@dataclass(frozen=True)
class SurfacedError:
    """User-visible failure, detail kept for logs and debugging."""

    kind: ErrorKind
    message: str
    detail: str = ""
    trigger: Optional[Trigger] = None


@dataclass(frozen=True)
class FetchOutcome:
    """What a trigger did."""

    trigger: Trigger
    request_issued: bool
    applied: bool = False
    error: Optional[SurfacedError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AnalyticsState:
    """
    Mutable state of one progress screen.

    Attributes:
        snapshot: Last merged analytics, None until the first success
        timeframe: Selected analytics window
        active_tab: Selected tab
        last_error: Most recent surfaced failure, cleared on success
        in_flight: Outstanding requests per trigger
    """

    def __init__(self, timeframe: Timeframe = DEFAULT_TIMEFRAME) -> None:
        self.snapshot: Optional[AnalyticsSnapshot] = None
        self.timeframe = timeframe
        self.active_tab = ProgressTab.OVERVIEW
        self.last_error: Optional[SurfacedError] = None
        self.in_flight: Counter[Trigger] = Counter()
        self._sequence = 0
        self._latest_issue: dict[Section, int] = {}

    @property
    def is_loading(self) -> bool:
        return self.in_flight[Trigger.INITIAL_LOAD] > 0

    @property
    def is_refreshing(self) -> bool:
        return self.in_flight[Trigger.MANUAL_REFRESH] > 0

    @property
    def is_chart_loading(self) -> bool:
        return self.in_flight[Trigger.TIMEFRAME_CHANGE] > 0

    @property
    def is_ai_loading(self) -> bool:
        return any(self.in_flight[t] > 0 for t in _AI_TRIGGERS)

    @property
    def can_change_timeframe(self) -> bool:
        """Advisory: the UI disables timeframe buttons while charts load."""
        return not self.is_chart_loading

    def begin(self, trigger: Trigger, sections: frozenset[Section]) -> int:
        """Register an issued request, return its sequence number."""
        self._sequence += 1
        for section in sections:
            self._latest_issue[section] = self._sequence
        self.in_flight[trigger] += 1
        return self._sequence

    def end(self, trigger: Trigger) -> None:
        """Mark a request of this trigger as settled."""
        self.in_flight[trigger] -= 1
        if self.in_flight[trigger] <= 0:
            del self.in_flight[trigger]

    def is_superseded(self, sequence: int, sections: frozenset[Section]) -> bool:
        """True when a newer request targets any of these sections."""
        return any(self._latest_issue.get(s, 0) > sequence for s in sections)
