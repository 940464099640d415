"""
Weight logging coordinator.

Submits a weight sample, then invalidates the progress snapshot with a
full refresh: trend lines and goal probability are computed server-side
and cannot be updated locally.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

import structlog

from nutrition_client.application.analytics.orchestrator import ProgressAnalyticsOrchestrator
from nutrition_client.application.analytics.state import AnalyticsState, FetchOutcome, SurfacedError
from nutrition_client.domain.gateway.ports import IWeightGateway
from nutrition_client.domain.shared.errors import DomainError, ValidationError

logger = structlog.get_logger(__name__)

WeightInput = Union[float, int, str]


@dataclass(frozen=True)
class WeightLogOutcome:
    """Result of a weight submission and the refresh that followed it."""

    logged: bool
    refresh: Optional[FetchOutcome] = None
    error: Optional[SurfacedError] = None

    @property
    def ok(self) -> bool:
        return self.logged and self.error is None


def parse_weight(value: WeightInput) -> float:
    """
    Parse a weight picker value into kilograms.

    Args:
        value: Number or numeric string

    Returns:
        Finite float

    Raises:
        ValidationError: If value is empty, not numeric or not finite

    Example:
        >>> parse_weight(" 72.5 ")
        72.5
    """
    if isinstance(value, bool):
        raise ValidationError("Please select a valid weight")

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValidationError("Please select a valid weight")
        try:
            parsed = float(text)
        except ValueError as e:
            raise ValidationError("Please select a valid weight") from e
    elif isinstance(value, (int, float)):
        parsed = float(value)
    else:
        raise ValidationError("Please select a valid weight")

    if not math.isfinite(parsed):
        raise ValidationError("Please select a valid weight")
    return parsed


class WeightLoggingCoordinator:
    """
    Coordinates logging a weight sample with the analytics refresh.

    Example:
        >>> coordinator = WeightLoggingCoordinator(api_client, orchestrator)
        >>> outcome = await coordinator.log_weight(state, "72.5")
        >>> outcome.refresh.applied
        True
    """

    def __init__(
        self,
        gateway: IWeightGateway,
        orchestrator: ProgressAnalyticsOrchestrator,
    ):
        self._gateway = gateway
        self._orchestrator = orchestrator

    async def log_weight(
        self,
        state: AnalyticsState,
        value: WeightInput,
        recorded_at: Optional[datetime] = None,
    ) -> WeightLogOutcome:
        """
        Log a weight sample and refresh the progress snapshot.

        Args:
            state: Progress screen state to refresh
            value: Weight in kg (number or numeric string)
            recorded_at: Sample time (default: now, UTC)

        Returns:
            WeightLogOutcome; on gateway failure no refresh is attempted

        Raises:
            ValidationError: If value is not a finite number (no request made)
        """
        weight = parse_weight(value)
        moment = recorded_at or datetime.now(timezone.utc)

        try:
            await self._gateway.log_weight(weight, moment)
        except DomainError as e:
            surfaced = SurfacedError(kind=e.kind, message="Failed to log weight", detail=str(e))
            state.last_error = surfaced
            logger.warning("Weight logging failed", weight=weight, kind=e.kind.value, error=str(e))
            return WeightLogOutcome(logged=False, error=surfaced)

        logger.info("Weight logged", weight=weight, recorded_at=moment.isoformat())
        refresh = await self._orchestrator.refresh(state)
        return WeightLogOutcome(logged=True, refresh=refresh, error=refresh.error)
