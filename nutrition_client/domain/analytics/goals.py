"""
Goal display metadata.

Closed mapping from canonical goal types to display labels, with the
synonyms the backend emits folded onto each canonical type.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from nutrition_client.domain.analytics.models import GoalStatus, TrendDirection


class GoalType(str, Enum):
    """Canonical goal identifiers."""

    BUILD_MUSCLE = "build_muscle"
    WEIGHT_LOSS = "weight_loss"
    WEIGHT_GAIN = "weight_gain"
    MAINTENANCE = "maintenance"
    GENERAL_FITNESS = "general_fitness"
    IMPROVE_ENDURANCE = "improve_endurance"
    INCREASE_STRENGTH = "increase_strength"

    @property
    def label(self) -> str:
        """Human-readable label."""
        return _GOAL_LABELS[self]

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> Optional[GoalType]:
        """Resolve a backend goal name or synonym, None if unrecognized."""
        if not raw:
            return None
        return _GOAL_ALIASES.get(raw.strip().lower())


class TrendAssessment(str, Enum):
    """Whether a weight trend moves the user towards their goal."""

    FAVORABLE = "favorable"
    UNFAVORABLE = "unfavorable"
    NEUTRAL = "neutral"


_GOAL_LABELS: dict[GoalType, str] = {
    GoalType.BUILD_MUSCLE: "Build Muscle",
    GoalType.WEIGHT_LOSS: "Weight Loss",
    GoalType.WEIGHT_GAIN: "Weight Gain",
    GoalType.MAINTENANCE: "Maintain Weight",
    GoalType.GENERAL_FITNESS: "General Fitness",
    GoalType.IMPROVE_ENDURANCE: "Improve Endurance",
    GoalType.INCREASE_STRENGTH: "Increase Strength",
}

_GOAL_ALIASES: dict[str, GoalType] = {
    "build_muscle": GoalType.BUILD_MUSCLE,
    "muscle_gain": GoalType.BUILD_MUSCLE,
    "weight_loss": GoalType.WEIGHT_LOSS,
    "lose_weight": GoalType.WEIGHT_LOSS,
    "weight_gain": GoalType.WEIGHT_GAIN,
    "gain_weight": GoalType.WEIGHT_GAIN,
    "maintenance": GoalType.MAINTENANCE,
    "general_fitness": GoalType.GENERAL_FITNESS,
    "improve_endurance": GoalType.IMPROVE_ENDURANCE,
    "increase_strength": GoalType.INCREASE_STRENGTH,
}

_STATUS_LABELS: dict[GoalStatus, str] = {
    GoalStatus.EXCELLENT: "Excellent",
    GoalStatus.GOOD: "Good",
    GoalStatus.CONCERNING: "Concerning",
    GoalStatus.OFF_TRACK: "Off Track",
}

_WORD_START = re.compile(r"\b\w")

# Goals where the gateway's "improving" already means "towards the target".
_DIRECTIONAL_GOALS = frozenset({GoalType.WEIGHT_LOSS, GoalType.WEIGHT_GAIN})


def humanize_identifier(raw: str) -> str:
    """
    Fallback label: underscores to spaces, first letter of each word upper.

    Example:
        >>> humanize_identifier("run_a_marathon")
        'Run A Marathon'
    """
    spaced = raw.replace("_", " ")
    return _WORD_START.sub(lambda m: m.group(0).upper(), spaced)


def goal_label(raw: str) -> str:
    """
    Display label for a backend goal name.

    Example:
        >>> goal_label("muscle_gain")
        'Build Muscle'
        >>> goal_label("sleep_better")
        'Sleep Better'
    """
    goal = GoalType.from_raw(raw)
    if goal is not None:
        return goal.label
    return humanize_identifier(raw)


def status_label(status: GoalStatus) -> str:
    """Display label for a goal status."""
    return _STATUS_LABELS[status]


def assess_trend(direction: TrendDirection, goal_type: Optional[str]) -> TrendAssessment:
    """
    Judge a weight trend against the user's goal.

    Stable trends and goals without a weight direction are neutral.
    """
    if direction is TrendDirection.STABLE:
        return TrendAssessment.NEUTRAL
    if GoalType.from_raw(goal_type) not in _DIRECTIONAL_GOALS:
        return TrendAssessment.NEUTRAL
    if direction is TrendDirection.IMPROVING:
        return TrendAssessment.FAVORABLE
    return TrendAssessment.UNFAVORABLE
