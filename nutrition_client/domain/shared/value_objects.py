"""
Shared value objects.

Immutable, validated domain primitives.
Following DDD value object pattern.
"""

from __future__ import annotations

from enum import Enum

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from nutrition_client.domain.shared.errors import ValidationError


# Wire payloads are camelCase; models accept both spellings.
WIRE_MODEL_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    use_enum_values=False,
)


class Timeframe(str, Enum):
    """
    Analytics window selectable on the progress screen.

    Declaration order is the display order.

    Example:
        >>> Timeframe.parse("3m")
        <Timeframe.THREE_MONTHS: '3M'>
    """

    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"

    @classmethod
    def parse(cls, value: str) -> Timeframe:
        """Create from string, case-insensitive."""
        try:
            return cls(value.strip().upper())
        except ValueError as e:
            allowed = ", ".join(t.value for t in cls)
            raise ValidationError(f"Unknown timeframe '{value}' (expected one of {allowed})") from e

    @property
    def months(self) -> int:
        """Calendar months covered (0 for the weekly window)."""
        return {
            Timeframe.ONE_WEEK: 0,
            Timeframe.ONE_MONTH: 1,
            Timeframe.THREE_MONTHS: 3,
            Timeframe.SIX_MONTHS: 6,
            Timeframe.ONE_YEAR: 12,
        }[self]


DEFAULT_TIMEFRAME = Timeframe.ONE_MONTH
