"""
Snapshot merge rules.

Pure functions: no I/O, no logging. A merge is a shallow per-section
replace, so sections absent from the incoming result are carried over
as the very same objects.
"""

from __future__ import annotations

from typing import Iterable, Optional

from nutrition_client.domain.analytics.models import (
    MANDATORY_SECTIONS,
    AnalyticsSections,
    AnalyticsSnapshot,
    Section,
)
from nutrition_client.domain.shared.errors import IncompleteSnapshotError


def _missing(sections: AnalyticsSections, wanted: Iterable[Section]) -> list[Section]:
    present = sections.present()
    return sorted((s for s in wanted if s not in present), key=lambda s: s.value)


def project_sections(
    sections: AnalyticsSections,
    wanted: frozenset[Section],
) -> AnalyticsSections:
    """
    Restrict a gateway result to the sections a trigger owns.

    Args:
        sections: Full gateway result
        wanted: Sections the trigger is allowed to replace

    Returns:
        Partial result carrying only the wanted sections

    Raises:
        IncompleteSnapshotError: If a wanted section is missing

    Example:
        >>> scoped = project_sections(result, frozenset({Section.WEIGHT}))
        >>> scoped.goal_progress is None
        True
    """
    missing = _missing(sections, wanted)
    if missing:
        names = ", ".join(s.value for s in missing)
        raise IncompleteSnapshotError(f"Gateway result is missing sections: {names}")

    ai_wanted = Section.AI_INSIGHTS in wanted
    return AnalyticsSections.model_construct(
        weight_analytics=sections.weight_analytics if Section.WEIGHT in wanted else None,
        calorie_analytics=sections.calorie_analytics if Section.CALORIES in wanted else None,
        goal_progress=sections.goal_progress if Section.GOAL in wanted else None,
        ai_insights=sections.ai_insights if ai_wanted else None,
        recommendations=(list(sections.recommendations or []) if ai_wanted else None),
    )


def merge_snapshot(
    existing: Optional[AnalyticsSnapshot],
    incoming: AnalyticsSections,
) -> AnalyticsSnapshot:
    """
    Merge a partial result into the cached snapshot.

    Rules:
    - A section present in incoming fully replaces the existing one
    - A section absent from incoming is carried over unchanged
    - ai_insights and recommendations are replaced as a pair
    - Without an existing snapshot, incoming must hold every mandatory section

    Args:
        existing: Current snapshot, None before the first load
        incoming: Partial result to apply

    Returns:
        New snapshot (existing is never mutated)

    Raises:
        IncompleteSnapshotError: If the first merge lacks mandatory sections
    """
    present = incoming.present()

    if existing is None:
        missing = _missing(incoming, MANDATORY_SECTIONS)
        if missing:
            names = ", ".join(s.value for s in missing)
            raise IncompleteSnapshotError(f"Cannot build snapshot, missing sections: {names}")
        # Checked above; mypy cannot see through present()
        assert incoming.weight_analytics is not None
        assert incoming.calorie_analytics is not None
        assert incoming.goal_progress is not None
        has_ai = Section.AI_INSIGHTS in present
        return AnalyticsSnapshot.model_construct(
            weight_analytics=incoming.weight_analytics,
            calorie_analytics=incoming.calorie_analytics,
            goal_progress=incoming.goal_progress,
            ai_insights=incoming.ai_insights if has_ai else None,
            recommendations=list(incoming.recommendations or []) if has_ai else None,
        )

    update: dict[str, object] = {}
    if Section.WEIGHT in present:
        update["weight_analytics"] = incoming.weight_analytics
    if Section.CALORIES in present:
        update["calorie_analytics"] = incoming.calorie_analytics
    if Section.GOAL in present:
        update["goal_progress"] = incoming.goal_progress
    if Section.AI_INSIGHTS in present:
        update["ai_insights"] = incoming.ai_insights
        update["recommendations"] = list(incoming.recommendations or [])

    return existing.model_copy(update=update)
