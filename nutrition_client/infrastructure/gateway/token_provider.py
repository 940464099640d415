"""
Token providers.

Credential storage belongs to the auth layer; these adapters expose an
already-obtained bearer token to the gateway client.
"""

from typing import Optional


class StaticTokenProvider:
    """
    Serves a fixed bearer token.

    Example:
        >>> provider = StaticTokenProvider("abc")
        >>> await provider.get_token()
        'abc'
    """

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token

    async def get_token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        """Replace the token after sign-in or sign-out."""
        self._token = token
