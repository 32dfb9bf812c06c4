"""
Spotify authentication and token endpoint client.

Handles authorization URL generation and every grant request sent to
the accounts service: code exchange, client credentials and refresh.
Which client authentication a request carries is decided by the grant
flow; this module only speaks the token endpoint wire format.
"""

import json
import logging
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from urllib.parse import urlencode

from .config import ClientConfig
from .exceptions import (
    SpotifyAuthError,
    SpotifyNetworkError,
    SpotifyParseError,
)
from .transport import HTTPTransport, TransportError

if TYPE_CHECKING:
    from .flows import GrantFlow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenInfo:
    """
    Structured container for OAuth token information.

    Instances are immutable: a refresh produces a new TokenInfo that
    replaces the old one as a whole.
    """

    access_token: str
    token_type: str
    expires_at: float
    refresh_token: Optional[str] = None
    scope: Optional[str] = None
    expires_in: Optional[int] = None

    # Token response as received
    _raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], issued_at: Optional[float] = None
    ) -> "TokenInfo":
        """
        Create TokenInfo from a token endpoint response or a stored dict.

        Args:
            data: Token dictionary.
            issued_at: Time the token request was sent. ``expires_in``
                is relative to it. Defaults to now.

        Returns:
            TokenInfo instance.

        Raises:
            SpotifyParseError: If required fields are missing.
        """
        if not isinstance(data, dict):
            raise SpotifyParseError(
                f"Token data must be a dictionary, got {type(data)}"
            )

        required = ["access_token", "token_type"]
        missing = [k for k in required if k not in data]
        if missing:
            raise SpotifyParseError(f"Token missing required fields: {missing}")

        # Handle expires_at - compute if not present
        expires_at = data.get("expires_at")
        if expires_at is None:
            expires_in = data.get("expires_in", 3600)
            try:
                expires_at = (issued_at or time.time()) + float(expires_in)
            except (TypeError, ValueError):
                raise SpotifyParseError(f"Invalid expires_in: {expires_in!r}")

        return cls(
            access_token=data["access_token"],
            token_type=data["token_type"],
            expires_at=float(expires_at),
            refresh_token=data.get("refresh_token"),
            scope=data.get("scope"),
            expires_in=data.get("expires_in"),
            _raw=dict(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage/transmission."""
        result = {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "expires_at": self.expires_at,
        }
        if self.refresh_token:
            result["refresh_token"] = self.refresh_token
        if self.scope:
            result["scope"] = self.scope
        if self.expires_in:
            result["expires_in"] = self.expires_in
        return result

    @property
    def scopes(self) -> List[str]:
        """Granted scopes as a list."""
        return self.scope.split() if self.scope else []

    @property
    def is_expired(self) -> bool:
        """Check if the token has expired."""
        return self.expires_at < time.time()

    def expires_within(self, seconds: float) -> bool:
        """True if the token expires in less than ``seconds`` from now."""
        return time.time() >= self.expires_at - seconds

    @property
    def expires_in_seconds(self) -> int:
        """Get seconds until expiration (negative if expired)."""
        return int(self.expires_at - time.time())

    def with_refresh_token(self, refresh_token: Optional[str]) -> "TokenInfo":
        return replace(self, refresh_token=refresh_token)


class SpotifyAuthManager:
    """
    Talks to the Spotify accounts service.

    Stateless regarding tokens: it operates on the grant parameters
    and tokens passed to it. Grant flows call into it from their
    ``authenticate`` methods, and the TokenStore uses it to refresh.

    Example:
        auth_manager = SpotifyAuthManager(transport, ClientConfig())
        url = auth_manager.get_auth_url(flow.client_id, flow.redirect_uri,
                                        flow.scopes, state="xyz")
        token_info = await auth_manager.request_token(flow, {
            "grant_type": "authorization_code", "code": code,
            "redirect_uri": flow.redirect_uri,
        })
    """

    def __init__(self, transport: HTTPTransport, config: Optional[ClientConfig] = None):
        self._transport = transport
        self._config = config or ClientConfig()

    def get_auth_url(
        self,
        client_id: str,
        redirect_uri: str,
        scopes: List[str],
        state: str,
        extra_params: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Generate the Spotify authorization URL.

        Args:
            client_id: Application client ID.
            redirect_uri: Callback URL registered for the application.
            scopes: Scopes to request.
            state: CSRF state echoed back on the redirect.
            extra_params: Flow specific parameters (PKCE challenge).

        Returns:
            The authorization URL to send the user to.
        """
        params = {
            "client_id": client_id,
            "response_type": "code",
            "redirect_uri": redirect_uri,
            "state": state,
        }
        if scopes:
            params["scope"] = " ".join(str(s) for s in scopes)
        if extra_params:
            params.update(extra_params)

        url = f"{self._config.authorize_url}?{urlencode(params)}"
        logger.debug("Generated auth URL: %s...", url[:50])
        return url

    async def request_token(
        self,
        flow: "GrantFlow",
        data: Dict[str, str],
    ) -> TokenInfo:
        """
        POST a grant request to the token endpoint.

        Args:
            flow: The grant flow; decides how the client authenticates.
            data: Grant parameters (``grant_type`` and friends).

        Returns:
            TokenInfo parsed from the response.

        Raises:
            SpotifyAuthError: If the accounts service rejects the grant.
            SpotifyNetworkError: If no response was obtained.
            SpotifyParseError: If the response is not a token object.
        """
        form = dict(data)
        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        flow.apply_client_auth(form, headers)

        issued_at = time.time()
        try:
            response = await self._transport.execute(
                "POST",
                self._config.token_url,
                headers,
                urlencode(form).encode("utf-8"),
            )
        except TransportError as e:
            raise SpotifyNetworkError(f"Token request failed: {e}") from e

        grant_type = form.get("grant_type")
        if not 200 <= response.status < 300:
            error_msg = _oauth_error_message(response.body)
            logger.warning(
                "Token request (%s) rejected with %d: %s",
                grant_type, response.status, error_msg,
            )
            raise SpotifyAuthError(f"Token request failed: {error_msg}")

        try:
            token_data = json.loads(response.body)
        except ValueError as e:
            logger.error("Token endpoint returned invalid JSON: %s", e)
            raise SpotifyParseError(f"Invalid token response: {e}") from e

        token_info = TokenInfo.from_dict(token_data, issued_at=issued_at)
        logger.info("Obtained token via %s grant", grant_type)
        return token_info

    async def refresh_token(self, flow: "GrantFlow", token_info: TokenInfo) -> TokenInfo:
        """
        Exchange a refresh token for a new access token.

        Spotify may not return a new refresh_token; the original is
        kept in that case so the token can be refreshed again.

        Raises:
            SpotifyAuthError: If the refresh token is rejected.
        """
        new_token_info = await self.request_token(
            flow,
            {
                "grant_type": "refresh_token",
                "refresh_token": token_info.refresh_token,
            },
        )
        if not new_token_info.refresh_token:
            new_token_info = new_token_info.with_refresh_token(
                token_info.refresh_token
            )
        return new_token_info


def _oauth_error_message(body: bytes) -> str:
    """Pull a readable message out of an OAuth error body."""
    try:
        data = json.loads(body)
    except ValueError:
        return body.decode("utf-8", errors="replace") or "no response body"
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            return str(error.get("message", error))
        description = data.get("error_description")
        if description:
            return f"{error}: {description}" if error else str(description)
        if error:
            return str(error)
    return str(data)
