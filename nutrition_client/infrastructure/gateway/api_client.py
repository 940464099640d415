"""
Progress backend API client.

Handles HTTP requests to the analytics, chat and weight endpoints.
Implements IProgressGateway. No retries: a failed call is surfaced once
and the user re-triggers it.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

import aiohttp
import pydantic
import structlog

from nutrition_client.domain.analytics.models import AnalyticsRequest, AnalyticsSections
from nutrition_client.domain.chat.models import ChatReply, ChatTurn
from nutrition_client.domain.gateway.ports import ITokenProvider
from nutrition_client.domain.shared.errors import (
    AuthError,
    GatewayError,
    NetworkError,
)
from nutrition_client.domain.weight.models import WeightEntry
from nutrition_client.infrastructure.gateway.error_mapping import classify_failure, error_text

logger = structlog.get_logger(__name__)


def _isoformat(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_timestamp(raw: Any) -> datetime:
    if isinstance(raw, str) and raw:
        try:
            return datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Unparseable reply timestamp", raw=raw)
    return datetime.now(timezone.utc)


class ProgressApiClient:
    """
    Progress backend API client.

    Example:
        >>> async with ProgressApiClient(base_url, token_provider) as client:
        ...     sections = await client.get_analytics(
        ...         AnalyticsRequest(timeframe=Timeframe.ONE_MONTH)
        ...     )
    """

    def __init__(
        self,
        base_url: str,
        token_provider: ITokenProvider,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize API client.

        Args:
            base_url: API root, e.g. http://localhost:3000/api
            token_provider: Source of the bearer token
            timeout_seconds: Connection timeout per request
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._token_provider = token_provider
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "ProgressApiClient":
        """Async context manager entry."""
        self._session = aiohttp.ClientSession(headers={"Content-Type": "application/json"})
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        if self._session:
            await self._session.close()
            self._session = None

    # ───────────────────────── analytics ─────────────────────────

    async def get_analytics(self, request: AnalyticsRequest) -> AnalyticsSections:
        """Fetch comprehensive analytics.

        Raises:
            AuthError: If no token or HTTP 401/403
            NetworkError: If the request fails in transit
            GatewayError: If the backend reports failure or sends malformed data
        """
        payload = await self._request("POST", "/analytics/comprehensive", json=request.to_payload())
        data = payload.get("data")
        if not isinstance(data, Mapping):
            raise GatewayError("Analytics response has no data")

        try:
            return AnalyticsSections.model_validate(data)
        except pydantic.ValidationError as e:
            raise GatewayError(f"Malformed analytics response: {e.error_count()} errors") from e

    # ───────────────────────── chat ─────────────────────────

    async def ai_chat(self, message: str, history: list[ChatTurn]) -> ChatReply:
        """Exchange one chat turn with the assistant."""
        payload = await self._request(
            "POST",
            "/analytics/chat",
            json={
                "message": message,
                "conversationHistory": [turn.to_payload() for turn in history],
            },
            message_length=len(message.strip()),
        )
        response = payload.get("response")
        if not isinstance(response, str) or not response:
            raise GatewayError("Failed to get AI response")
        return ChatReply(response=response, timestamp=_parse_timestamp(payload.get("timestamp")))

    # ───────────────────────── weight ─────────────────────────

    async def log_weight(self, value: float, recorded_at: datetime) -> None:
        """Record one weight sample."""
        await self._request(
            "POST",
            "/weight/log",
            json={"weight": value, "recordedAt": _isoformat(recorded_at)},
        )

    async def get_weight_history(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[WeightEntry]:
        """Weight entries, optionally bounded by [start, end]."""
        params: dict[str, str] = {}
        if start is not None:
            params["startDate"] = _isoformat(start)
        if end is not None:
            params["endDate"] = _isoformat(end)

        payload = await self._request("GET", "/weight/history", params=params or None)
        raw_entries = payload.get("weightHistory") or []
        try:
            return [WeightEntry.model_validate(item) for item in raw_entries]
        except pydantic.ValidationError as e:
            raise GatewayError(f"Malformed weight history: {e.error_count()} errors") from e

    async def delete_weight_entry(self, entry_id: str) -> None:
        """Delete one weight entry."""
        await self._request("DELETE", f"/weight/{entry_id}")

    # ───────────────────────── transport ─────────────────────────

    async def _headers(self) -> dict[str, str]:
        token = await self._token_provider.get_token()
        if not token:
            raise AuthError("User not authenticated")
        return {"Authorization": f"Bearer {token}"}

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, str]] = None,
        message_length: Optional[int] = None,
    ) -> Mapping[str, Any]:
        if not self._session:
            raise NetworkError("Client not initialized, use async with")

        headers = await self._headers()
        url = f"{self.base_url}{path}"

        try:
            async with self._session.request(
                method,
                url,
                json=json,
                params=params,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as response:
                status = response.status
                try:
                    payload = await response.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError):
                    payload = None

        except asyncio.TimeoutError as e:
            logger.error("Gateway timeout", method=method, path=path)
            raise NetworkError(f"Gateway timeout after {self.timeout_seconds}s") from e

        except aiohttp.ClientError as e:
            logger.error("Gateway transport error", method=method, path=path, error=str(e))
            raise NetworkError(f"Gateway client error: {e}") from e

        body: Optional[Mapping[str, Any]] = payload if isinstance(payload, Mapping) else None

        if status in (401, 403):
            raise AuthError(error_text(body, status))

        if status >= 400 or (body is not None and body.get("success") is False):
            reason = classify_failure(status, body, message_length=message_length)
            logger.warning(
                "Gateway reported failure",
                method=method,
                path=path,
                status=status,
                reason=reason.value,
            )
            raise GatewayError(error_text(body, status), reason=reason, status=status)

        logger.debug("Gateway call complete", method=method, path=path, status=status)
        return body or {}
