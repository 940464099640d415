"""
Shared fixtures for nutrition client tests.

Wire payloads mirror what the backend returns from
/analytics/comprehensive; model fixtures are parsed from them.
"""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from nutrition_client.application.analytics.orchestrator import ProgressAnalyticsOrchestrator
from nutrition_client.application.analytics.state import AnalyticsState
from nutrition_client.domain.analytics.models import (
    AIInsights,
    AnalyticsSections,
    CalorieAnalytics,
    GoalProgress,
    Recommendation,
    WeightAnalytics,
)
from nutrition_client.domain.gateway.ports import IProgressGateway


# ═══════════════════════════════════════════════════════════
# WIRE PAYLOAD FIXTURES
# ═══════════════════════════════════════════════════════════


def weight_payload(current: float = 78.4) -> dict[str, Any]:
    return {
        "currentWeight": current,
        "startWeight": 82.0,
        "targetWeight": 75.0,
        "weightChange": round(current - 82.0, 1),
        "weeklyTrend": -0.4,
        "monthlyTrend": -1.6,
        "progressPercentage": 51.4,
        "timeToGoal": 8.5,
        "isOnTrack": True,
        "trendDirection": "improving",
        "chartData": {
            "labels": ["W1", "W2", "W3"],
            "weights": [79.2, 78.9, current],
            "trendLine": [79.3, 78.8, 78.3],
        },
    }


def calorie_payload(average: float = 1980.0) -> dict[str, Any]:
    return {
        "averageDailyCalories": average,
        "targetCalories": 2100.0,
        "calorieDeficit": 2100.0 - average,
        "adherenceRate": 86.0,
        "weeklyTrend": -35.0,
        "chartData": {
            "labels": ["Mon", "Tue"],
            "calories": [1950.0, 2010.0],
            "targets": [2100.0, 2100.0],
        },
        "macroTrends": {
            "protein": {"average": 118.0, "goal": 130.0, "adherence": 90.8},
            "carbs": {"average": 210.0, "goal": 230.0, "adherence": 91.3},
        },
    }


def goal_payload() -> dict[str, Any]:
    return {
        "primaryGoal": "lose_weight",
        "goalType": "weight_loss",
        "status": "good",
        "successProbability": 72.0,
        "daysToGoal": 60,
        "actualProgress": 3.6,
        "expectedProgress": 4.0,
        "isOnTrack": True,
    }


def ai_payload(score: int = 78) -> dict[str, Any]:
    return {
        "summary": "Steady progress towards your target weight.",
        "weeklyScore": score,
        "keyFindings": ["Protein intake slightly below goal"],
        "achievements": ["Logged meals 6 of 7 days"],
        "concerns": [],
        "actionItems": ["Add a protein snack in the afternoon"],
        "motivationalMessage": "Keep it up!",
    }


def recommendations_payload() -> list[dict[str, Any]]:
    return [
        {
            "title": "Greek yogurt snack",
            "description": "Adds 15g protein for under 150 kcal.",
            "priority": "high",
            "category": "nutrition",
            "estimatedImpact": "+15g protein/day",
        }
    ]


def generated_recommendations_payload() -> list[dict[str, Any]]:
    """Model-generated items as the backend forwards them: `type`, no `category`."""
    return [
        {
            "type": "food",
            "title": "Salmon",
            "description": "Omega-3 and protein support muscle recovery.",
            "priority": "high",
            "actionable": True,
            "estimatedImpact": "Better recovery",
        },
        {
            "type": "food",
            "title": "Lentils",
            "description": "Fiber keeps you full on a deficit.",
            "priority": "urgent",
            "actionable": True,
            "estimatedImpact": "Fewer cravings",
        },
    ]


def comprehensive_payload(include_ai: bool = False, **overrides: Any) -> dict[str, Any]:
    """Body of the `data` field of a successful analytics reply."""
    data: dict[str, Any] = {
        "weightAnalytics": weight_payload(),
        "calorieAnalytics": calorie_payload(),
        "goalProgress": goal_payload(),
        "aiInsights": ai_payload() if include_ai else None,
        "recommendations": recommendations_payload() if include_ai else [],
    }
    data.update(overrides)
    return data


# ═══════════════════════════════════════════════════════════
# DOMAIN MODEL FIXTURES
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def sample_weight() -> WeightAnalytics:
    """Weight section, user losing weight on schedule."""
    return WeightAnalytics.model_validate(weight_payload())


@pytest.fixture
def sample_calories() -> CalorieAnalytics:
    """Calorie section with protein and carbs macro trends."""
    return CalorieAnalytics.model_validate(calorie_payload())


@pytest.fixture
def sample_goal() -> GoalProgress:
    """Weight loss goal, status good."""
    return GoalProgress.model_validate(goal_payload())


@pytest.fixture
def sample_ai() -> AIInsights:
    """AI insights with a weekly score of 78."""
    return AIInsights.model_validate(ai_payload())


@pytest.fixture
def sample_recommendations() -> list[Recommendation]:
    """Single high-priority recommendation."""
    return [Recommendation.model_validate(r) for r in recommendations_payload()]


@pytest.fixture
def mandatory_result() -> AnalyticsSections:
    """Gateway result without AI sections."""
    return AnalyticsSections.model_validate(comprehensive_payload())


@pytest.fixture
def ai_result() -> AnalyticsSections:
    """Gateway result including the AI pair."""
    return AnalyticsSections.model_validate(comprehensive_payload(include_ai=True))


# ═══════════════════════════════════════════════════════════
# SERVICE FIXTURES
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def mock_gateway() -> Any:
    """Mock gateway (interface-based)."""
    return AsyncMock(spec=IProgressGateway)


@pytest.fixture
def orchestrator(mock_gateway: Any) -> ProgressAnalyticsOrchestrator:
    """Orchestrator with mocked gateway, last response wins."""
    return ProgressAnalyticsOrchestrator(gateway=mock_gateway)


@pytest.fixture
def state() -> AnalyticsState:
    """Fresh progress screen state."""
    return AnalyticsState()
