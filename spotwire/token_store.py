"""
Token store with lazy, serialized refresh.

Holds the current TokenInfo for an authenticated client. Every API
call asks the store to refresh if needed before the request is sent;
there is no background timer. Readers never take the lock. The lock
is only held while a refresh is in flight, so concurrent callers that
all find the token expiring wait for a single refresh and reuse its
result. A failed refresh is raised to every caller that waited on it.
"""

import asyncio
import logging
from typing import Optional

from .auth import SpotifyAuthManager, TokenInfo
from .config import DEFAULT_REFRESH_MARGIN
from .exceptions import (
    SpotifyRefreshUnavailableError,
    SpotifyTokenExpiredError,
)
from .flows import GrantFlow

logger = logging.getLogger(__name__)


class TokenStore:
    """
    Owns the token of one authenticated client.

    The token is replaced as a whole, and only after a refresh has
    fully succeeded. A failed or cancelled refresh leaves the previous
    token in place.
    """

    def __init__(
        self,
        flow: GrantFlow,
        auth_manager: SpotifyAuthManager,
        token_info: TokenInfo,
        refresh_margin: float = DEFAULT_REFRESH_MARGIN,
        auto_refresh: bool = True,
    ):
        self._flow = flow
        self._auth_manager = auth_manager
        self._token = token_info
        self._refresh_margin = refresh_margin
        self._auto_refresh = auto_refresh
        self._lock = asyncio.Lock()
        # Refresh attempts so far, and the error of the latest one if it failed
        self._attempts = 0
        self._failure: Optional[Exception] = None

    @property
    def token(self) -> TokenInfo:
        return self._token

    @property
    def access_token(self) -> str:
        return self._token.access_token

    @property
    def refresh_token(self) -> Optional[str]:
        return self._token.refresh_token

    @property
    def auto_refresh(self) -> bool:
        return self._auto_refresh

    def needs_refresh(self) -> bool:
        """True once the token is within the safety margin of expiring."""
        return self._token.expires_within(self._refresh_margin)

    def _check_refreshable(self) -> None:
        if not self._flow.supports_refresh():
            raise SpotifyRefreshUnavailableError(
                f"{type(self._flow).__name__} tokens cannot be refreshed"
            )
        if not self._token.refresh_token:
            raise SpotifyRefreshUnavailableError(
                "Cannot refresh: no refresh_token available"
            )

    async def refresh_if_needed(self) -> TokenInfo:
        """
        Ensure the token is usable for the next request.

        No-op while the token is outside the safety margin.

        Returns:
            The current (possibly refreshed) TokenInfo.

        Raises:
            SpotifyTokenExpiredError: If the token is expiring and
                auto refresh is disabled.
            SpotifyRefreshUnavailableError: If the flow or token cannot
                refresh. No request is sent.
            SpotifyAuthError: If the refresh token is rejected.
        """
        if not self.needs_refresh():
            return self._token

        if not self._auto_refresh:
            raise SpotifyTokenExpiredError(
                f"Token expires in {self._token.expires_in_seconds}s "
                "and auto refresh is disabled"
            )
        self._check_refreshable()

        stale = self._token
        attempt = self._attempts
        async with self._lock:
            # Another caller attempted a refresh while we waited.
            if self._attempts != attempt:
                if self._failure is not None and self._token is stale:
                    raise self._failure
                if not self.needs_refresh():
                    return self._token
            logger.info("Token expiring, attempting refresh")
            return await self._refresh_locked()

    async def refresh(self) -> TokenInfo:
        """
        Refresh the token now, regardless of its expiry.

        Raises:
            SpotifyRefreshUnavailableError: If the flow or token cannot
                refresh. No request is sent.
            SpotifyAuthError: If the refresh token is rejected.
        """
        self._check_refreshable()
        async with self._lock:
            return await self._refresh_locked()

    async def _refresh_locked(self) -> TokenInfo:
        self._attempts += 1
        self._failure = None
        try:
            new_token = await self._auth_manager.refresh_token(self._flow, self._token)
        except Exception as e:
            logger.warning("Token refresh failed: %s", e)
            self._failure = e
            raise
        self._token = new_token
        logger.info("Successfully refreshed token")
        return new_token
