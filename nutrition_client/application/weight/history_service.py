"""
Weight history service.

Fetches weight entries for a timeframe window and shapes them into the
chart series shown on the weight tab.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog

from nutrition_client.domain.gateway.ports import IWeightGateway
from nutrition_client.domain.shared.errors import ValidationError
from nutrition_client.domain.shared.value_objects import Timeframe
from nutrition_client.domain.weight.chart import build_weight_chart, timeframe_window
from nutrition_client.domain.weight.models import WeightChart, WeightEntry

logger = structlog.get_logger(__name__)


class WeightHistoryService:
    """Weight history queries and deletion."""

    def __init__(self, gateway: IWeightGateway):
        self._gateway = gateway

    async def get_history(
        self,
        timeframe: Optional[Timeframe] = None,
        now: Optional[datetime] = None,
    ) -> list[WeightEntry]:
        """
        Weight entries inside the timeframe window.

        Args:
            timeframe: Window ending now; None fetches the full history
            now: Reference time (default: current UTC time)

        Returns:
            Entries as returned by the gateway
        """
        if timeframe is None:
            return await self._gateway.get_weight_history()

        start, end = timeframe_window(timeframe, now or datetime.now(timezone.utc))
        entries = await self._gateway.get_weight_history(start=start, end=end)
        logger.debug(
            "Weight history fetched",
            timeframe=timeframe.value,
            start=start.isoformat(),
            count=len(entries),
        )
        return entries

    async def get_chart(
        self,
        timeframe: Optional[Timeframe] = None,
        now: Optional[datetime] = None,
    ) -> WeightChart:
        """Chart series for the timeframe window."""
        entries = await self.get_history(timeframe, now=now)
        return build_weight_chart(entries, timeframe)

    async def delete_entry(self, entry_id: str) -> None:
        """
        Delete one weight entry.

        Raises:
            ValidationError: If entry_id is empty
        """
        if not entry_id or not entry_id.strip():
            raise ValidationError("Weight entry id cannot be empty")
        await self._gateway.delete_weight_entry(entry_id.strip())
        logger.info("Weight entry deleted", entry_id=entry_id.strip())
