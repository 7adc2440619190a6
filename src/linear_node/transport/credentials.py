"""Linear credential pair and Authorization header resolution."""

from dataclasses import dataclass
from typing import Optional

from ..config import Settings
from .exceptions import AuthenticationError


@dataclass(frozen=True)
class Credentials:
    """API key and/or OAuth2 access token. The API key wins when both are set."""

    api_key: Optional[str] = None
    oauth_access_token: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Credentials":
        return cls(
            api_key=settings.linear_api_key,
            oauth_access_token=settings.linear_oauth_access_token,
        )

    def authorization_header(self) -> str:
        """Header value: the raw API key, or ``Bearer <token>`` for OAuth2."""
        if self.api_key:
            return self.api_key
        if self.oauth_access_token:
            return f"Bearer {self.oauth_access_token}"
        raise AuthenticationError("No valid authentication method found")
