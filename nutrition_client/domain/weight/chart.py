"""
Weight history bucketing.

Turns raw weight entries into a compact chart series for a timeframe:
per-entry points for a week, weekly averages for a month, monthly
averages beyond that. Aggregated series keep roughly two labels so the
x axis stays readable on a phone.
"""

from __future__ import annotations

import calendar
from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Callable, Hashable, Iterable, Optional

from nutrition_client.domain.shared.value_objects import Timeframe
from nutrition_client.domain.weight.models import WeightChart, WeightEntry


def shift_months(moment: datetime, months: int) -> datetime:
    """
    Move a datetime by whole calendar months, clamping the day.

    Example:
        >>> shift_months(datetime(2024, 3, 31), -1)
        datetime.datetime(2024, 2, 29, 0, 0)
    """
    index = moment.month - 1 + months
    year = moment.year + index // 12
    month = index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def timeframe_window(timeframe: Timeframe, now: datetime) -> tuple[datetime, datetime]:
    """Start and end of the history window ending at now."""
    if timeframe is Timeframe.ONE_WEEK:
        return now - timedelta(days=7), now
    return shift_months(now, -timeframe.months), now


def _week_start(day: date) -> date:
    # Weeks start on Sunday
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _month_key(day: date) -> tuple[int, int]:
    return (day.year, day.month)


def _bucket_averages(
    entries: Iterable[WeightEntry],
    key: Callable[[date], Hashable],
) -> list[tuple[Hashable, float]]:
    buckets: "OrderedDict[Hashable, list[float]]" = OrderedDict()
    for entry in entries:
        buckets.setdefault(key(entry.recorded_at.date()), []).append(entry.weight)
    return [(k, sum(v) / len(v)) for k, v in buckets.items()]


def _thin(points: list[tuple[Hashable, float]]) -> list[tuple[Hashable, float]]:
    step = max(1, len(points) // 2)
    return [p for i, p in enumerate(points) if i % step == 0]


def build_weight_chart(
    entries: Iterable[WeightEntry],
    timeframe: Optional[Timeframe],
) -> WeightChart:
    """
    Build the chart series for a timeframe.

    Args:
        entries: Weight entries in any order
        timeframe: Selected window; None plots every entry

    Returns:
        WeightChart with parallel labels and values

    Example:
        >>> chart = build_weight_chart(entries, Timeframe.ONE_MONTH)
        >>> chart.labels
        ['W1', 'W2']
    """
    ordered = sorted(entries, key=lambda e: e.recorded_at)
    if not ordered:
        return WeightChart()

    if timeframe is None or timeframe is Timeframe.ONE_WEEK:
        return WeightChart(
            labels=[f"{e.recorded_at.month}/{e.recorded_at.day}" for e in ordered],
            values=[e.weight for e in ordered],
        )

    if timeframe is Timeframe.ONE_MONTH:
        weeks = _thin(_bucket_averages(ordered, _week_start))
        return WeightChart(
            labels=[f"W{i + 1}" for i in range(len(weeks))],
            values=[avg for _, avg in weeks],
        )

    months = _thin(_bucket_averages(ordered, _month_key))
    return WeightChart(
        labels=[str(key[1]) for key, _ in months],  # type: ignore[index]
        values=[avg for _, avg in months],
    )
