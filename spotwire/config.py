"""
Client configuration.

Endpoint base URLs, transport timeout and token refresh policy.
Values can be overridden from the environment (a ``.env`` file is
honoured through python-dotenv).
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

API_BASE_URL = "https://api.spotify.com/v1"
ACCOUNTS_BASE_URL = "https://accounts.spotify.com"

DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_REFRESH_MARGIN = 60  # seconds


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable client settings.

    Attributes:
        api_base_url: Base URL of the versioned Web API.
        accounts_base_url: Base URL of the accounts service
            (authorize and token endpoints).
        timeout: Transport timeout in seconds for the default transport.
        refresh_margin: Tokens are refreshed this many seconds before
            they expire.
        auto_refresh: Refresh expired tokens before a call. When False,
            calls made with an expired token raise SpotifyTokenExpiredError.
    """

    api_base_url: str = API_BASE_URL
    accounts_base_url: str = ACCOUNTS_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    refresh_margin: float = DEFAULT_REFRESH_MARGIN
    auto_refresh: bool = True

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.refresh_margin < 0:
            raise ValueError("refresh_margin cannot be negative")

    @property
    def authorize_url(self) -> str:
        return f"{self.accounts_base_url}/authorize"

    @property
    def token_url(self) -> str:
        return f"{self.accounts_base_url}/api/token"

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "ClientConfig":
        """
        Create a config from SPOTWIRE_* environment variables.

        Unset variables keep their defaults.
        """
        load_dotenv(dotenv_path)
        return cls(
            api_base_url=os.getenv("SPOTWIRE_API_BASE_URL", API_BASE_URL),
            accounts_base_url=os.getenv(
                "SPOTWIRE_ACCOUNTS_BASE_URL", ACCOUNTS_BASE_URL
            ),
            timeout=float(os.getenv("SPOTWIRE_TIMEOUT", DEFAULT_TIMEOUT)),
            refresh_margin=float(
                os.getenv("SPOTWIRE_REFRESH_MARGIN", DEFAULT_REFRESH_MARGIN)
            ),
            auto_refresh=os.getenv("SPOTWIRE_AUTO_REFRESH", "true").lower()
            not in ("0", "false", "no"),
        )
