"""
Progress analytics domain models.

Sections of the analytics snapshot returned by the gateway. Each section
is fetched and replaced as a whole; see merge.py for the rules.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from nutrition_client.domain.shared.value_objects import WIRE_MODEL_CONFIG, Timeframe


class TrendDirection(str, Enum):
    """Direction of the weight trend over the selected window."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class GoalStatus(str, Enum):
    """Goal progress status computed by the gateway."""

    EXCELLENT = "excellent"
    GOOD = "good"
    CONCERNING = "concerning"
    OFF_TRACK = "off_track"


class RecommendationPriority(str, Enum):
    """Priority of a recommendation."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Section(str, Enum):
    """
    Independently replaceable slice of the snapshot.

    AI_INSIGHTS covers the insights/recommendations pair, which is only
    ever requested and replaced together.
    """

    WEIGHT = "weight_analytics"
    CALORIES = "calorie_analytics"
    GOAL = "goal_progress"
    AI_INSIGHTS = "ai_insights"


MANDATORY_SECTIONS: frozenset[Section] = frozenset(
    {Section.WEIGHT, Section.CALORIES, Section.GOAL}
)


# ═══════════════════════════════════════════════════════════
# WEIGHT
# ═══════════════════════════════════════════════════════════


class WeightChartData(BaseModel):
    """
    Weight time series with its fitted trend line.

    trend_line is empty below two logged samples and may be one point
    short of weights when a trailing "Today" point is appended.
    """

    model_config = WIRE_MODEL_CONFIG

    labels: list[str] = Field(default_factory=list)
    weights: list[float] = Field(default_factory=list)
    trend_line: list[float] = Field(default_factory=list)

    @model_validator(mode="after")
    def equal_lengths(self) -> WeightChartData:
        """Every label has one weight."""
        if len(self.labels) != len(self.weights):
            raise ValueError(
                "Weight chart series must have equal length "
                f"(labels={len(self.labels)}, weights={len(self.weights)})"
            )
        return self

    @property
    def has_trend_line(self) -> bool:
        """True when the backend could fit a trend (two or more samples)."""
        return bool(self.trend_line)


class WeightAnalytics(BaseModel):
    """
    Weight trend section.

    time_to_goal is expressed in weeks.
    """

    model_config = WIRE_MODEL_CONFIG

    current_weight: float = 0.0
    start_weight: float = 0.0
    target_weight: float = 0.0
    weight_change: float = 0.0
    weekly_trend: float = 0.0
    monthly_trend: float = 0.0
    progress_percentage: float = 0.0
    time_to_goal: float = 0.0
    is_on_track: bool = False
    trend_direction: TrendDirection = TrendDirection.STABLE
    chart_data: WeightChartData = Field(default_factory=WeightChartData)


# ═══════════════════════════════════════════════════════════
# CALORIES
# ═══════════════════════════════════════════════════════════


class CalorieChartData(BaseModel):
    """Daily calories against daily targets."""

    model_config = WIRE_MODEL_CONFIG

    labels: list[str] = Field(default_factory=list)
    calories: list[float] = Field(default_factory=list)
    targets: list[float] = Field(
        default_factory=list,
        validation_alias=AliasChoices("targets", "goals"),
    )

    @model_validator(mode="after")
    def equal_lengths(self) -> CalorieChartData:
        """Every label has one calorie value and one target."""
        if not (len(self.labels) == len(self.calories) == len(self.targets)):
            raise ValueError(
                "Calorie chart series must have equal length "
                f"(labels={len(self.labels)}, calories={len(self.calories)}, "
                f"targets={len(self.targets)})"
            )
        return self


class MacroTrend(BaseModel):
    """Average intake of one macro against its goal."""

    model_config = WIRE_MODEL_CONFIG

    average: float = 0.0
    goal: float = 0.0
    adherence: float = 0.0


class CalorieAnalytics(BaseModel):
    """Calorie intake section, keyed macro trends included."""

    model_config = WIRE_MODEL_CONFIG

    average_daily_calories: float = 0.0
    target_calories: float = Field(
        default=0.0,
        validation_alias=AliasChoices("targetCalories", "calorieGoal", "target_calories"),
    )
    calorie_deficit: float = 0.0
    adherence_rate: float = 0.0
    weekly_trend: float = 0.0
    chart_data: CalorieChartData = Field(default_factory=CalorieChartData)
    macro_trends: dict[str, MacroTrend] = Field(default_factory=dict)


# ═══════════════════════════════════════════════════════════
# GOAL
# ═══════════════════════════════════════════════════════════


class GoalProgress(BaseModel):
    """Progress towards the user's primary goal."""

    model_config = WIRE_MODEL_CONFIG

    primary_goal: str
    goal_type: str
    status: GoalStatus
    success_probability: float = Field(default=0.0, ge=0.0)
    days_to_goal: float = 0.0
    actual_progress: float = 0.0
    expected_progress: float = 0.0
    is_on_track: bool = False


# ═══════════════════════════════════════════════════════════
# AI
# ═══════════════════════════════════════════════════════════


class AIInsights(BaseModel):
    """AI-generated narrative about the user's progress."""

    model_config = WIRE_MODEL_CONFIG

    summary: str
    weekly_score: int = Field(..., ge=0, le=100)
    key_findings: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    action_items: list[str] = Field(default_factory=list)
    motivational_message: str = ""


class Recommendation(BaseModel):
    """
    Actionable recommendation paired with AI insights.

    Items are model-generated: the backend names the category `type`
    and the priority may be missing or off-scale.
    """

    model_config = WIRE_MODEL_CONFIG

    title: str
    description: str
    priority: RecommendationPriority = RecommendationPriority.MEDIUM
    category: str = Field(
        default="general",
        validation_alias=AliasChoices("category", "type"),
    )
    actionable: bool = True
    estimated_impact: str = ""

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, value: Any) -> Any:
        """Unknown priorities fall back to medium."""
        if isinstance(value, RecommendationPriority):
            return value
        if isinstance(value, str):
            try:
                return RecommendationPriority(value.strip().lower())
            except ValueError:
                pass
        return RecommendationPriority.MEDIUM


# ═══════════════════════════════════════════════════════════
# SNAPSHOT
# ═══════════════════════════════════════════════════════════


class AnalyticsSections(BaseModel):
    """
    Partial snapshot: any subset of sections.

    Used both as the gateway result and as merge input.
    """

    model_config = WIRE_MODEL_CONFIG

    weight_analytics: Optional[WeightAnalytics] = None
    calorie_analytics: Optional[CalorieAnalytics] = None
    goal_progress: Optional[GoalProgress] = None
    ai_insights: Optional[AIInsights] = None
    recommendations: Optional[list[Recommendation]] = None

    def present(self) -> frozenset[Section]:
        """Sections carried by this partial result."""
        found = set()
        if self.weight_analytics is not None:
            found.add(Section.WEIGHT)
        if self.calorie_analytics is not None:
            found.add(Section.CALORIES)
        if self.goal_progress is not None:
            found.add(Section.GOAL)
        # recommendations alone never count: the gateway sends [] when AI is off
        if self.ai_insights is not None:
            found.add(Section.AI_INSIGHTS)
        return frozenset(found)


class AnalyticsSnapshot(BaseModel):
    """
    Last-known analytics for a screen session.

    Weight, calorie and goal sections are always present together.
    ai_insights and recommendations stay None until requested.

    Example:
        >>> snapshot.has_ai_insights
        False
    """

    model_config = WIRE_MODEL_CONFIG

    weight_analytics: WeightAnalytics
    calorie_analytics: CalorieAnalytics
    goal_progress: GoalProgress
    ai_insights: Optional[AIInsights] = None
    recommendations: Optional[list[Recommendation]] = None

    @property
    def has_ai_insights(self) -> bool:
        """True once the AI pair has been fetched."""
        return self.ai_insights is not None


class AnalyticsRequest(BaseModel):
    """Shape of one get_analytics call."""

    model_config = WIRE_MODEL_CONFIG

    timeframe: Timeframe
    include_ai: bool = False
    include_food_recommendations: bool = False

    def to_payload(self) -> dict[str, object]:
        """Request body expected by the gateway."""
        return {
            "timeframe": self.timeframe.value,
            "includeAI": self.include_ai,
            "includeFoodRecommendations": self.include_food_recommendations,
        }
