"""
Client configuration.

Values come from the environment (a local .env file is loaded first when
present). Unset variables fall back to defaults.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from nutrition_client.domain.shared.errors import ValidationError
from nutrition_client.domain.shared.value_objects import DEFAULT_TIMEFRAME, Timeframe

DEFAULT_API_URL = "http://localhost:3000/api"
DEFAULT_TIMEOUT_S = 30.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValidationError(f"{name} must be a boolean, got {raw!r}")


def _parse_timeout(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as e:
        raise ValidationError(f"NUTRITION_API_TIMEOUT_S must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValidationError("NUTRITION_API_TIMEOUT_S must be positive")
    return value


@dataclass(frozen=True)
class ClientSettings:
    """Runtime settings for the progress client."""

    api_url: str = DEFAULT_API_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_S
    default_timeframe: Timeframe = DEFAULT_TIMEFRAME
    fence_stale_responses: bool = False
    auth_token: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "ClientSettings":
        """
        Build settings from environment variables.

        Raises:
            ValidationError: If a variable holds an unusable value
        """
        if load_dotenv_file:
            load_dotenv()

        api_url = os.getenv("NUTRITION_API_URL", DEFAULT_API_URL).strip()
        if not api_url.startswith(("http://", "https://")):
            raise ValidationError(f"NUTRITION_API_URL must be an http(s) URL, got {api_url!r}")

        return cls(
            api_url=api_url.rstrip("/"),
            timeout_seconds=_parse_timeout(
                os.getenv("NUTRITION_API_TIMEOUT_S", str(DEFAULT_TIMEOUT_S))
            ),
            default_timeframe=Timeframe.parse(
                os.getenv("NUTRITION_DEFAULT_TIMEFRAME", DEFAULT_TIMEFRAME.value)
            ),
            fence_stale_responses=_parse_bool(
                "NUTRITION_CLIENT_FENCE_STALE_RESPONSES",
                os.getenv("NUTRITION_CLIENT_FENCE_STALE_RESPONSES", "false"),
            ),
            auth_token=os.getenv("NUTRITION_AUTH_TOKEN") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
