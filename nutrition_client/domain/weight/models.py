"""
Weight history domain models.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from nutrition_client.domain.shared.value_objects import WIRE_MODEL_CONFIG


class WeightEntry(BaseModel):
    """A logged weight sample (kg)."""

    model_config = WIRE_MODEL_CONFIG

    id: str
    user_id: str = ""
    weight: float = Field(..., gt=0)
    recorded_at: datetime


class WeightChart(BaseModel):
    """Bucketed weight series ready for a line chart."""

    model_config = ConfigDict(frozen=True)

    labels: list[str] = Field(default_factory=list)
    values: list[float] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.values
