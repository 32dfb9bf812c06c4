"""
Async client for the Spotify Web API.

Architecture:
    - credentials.py: SpotifyCredentials for config/DI
    - config.py: ClientConfig (base URLs, timeout, refresh margin)
    - flows.py: the OAuth grant flows (PKCE, authorization code,
      client credentials)
    - auth.py: SpotifyAuthManager (token endpoint) and TokenInfo
    - token_store.py: TokenStore, proactive token refresh
    - transport.py: pluggable HTTP transport, httpx by default
    - http_client.py: SpotifyHTTPClient, the request dispatcher
    - endpoints/: request builders per API resource
    - client.py: SpotifyClient facade and the authenticated clients
    - exceptions.py: Exception hierarchy

Usage:
    from spotwire import SpotifyClient, SpotifyCredentials, Scope

    credentials = SpotifyCredentials.from_env()
    client = SpotifyClient(credentials.pkce_flow([Scope.PLAYLIST_READ_PRIVATE]))

    # Send the user to the authorization URL
    authorisation = client.get_authorisation()

    # After the redirect, exchange code for token
    user_client = await client.authenticate(authorisation, code, state)
    playlists = await user_client.current_user_playlists().limit(10).get()

    # Later, without the interactive step
    user_client = await SpotifyClient.from_refresh_token(
        credentials.pkce_flow(), stored_refresh_token
    )
"""

# Configuration
from .config import ClientConfig
from .credentials import SpotifyCredentials

# Auth
from .auth import SpotifyAuthManager, TokenInfo
from .flows import (
    Authorisation,
    AuthCodeFlow,
    AuthCodePkceFlow,
    ClientCredentialsFlow,
    GrantFlow,
)
from .token_store import TokenStore

# Transport and dispatch
from .transport import HTTPTransport, HttpxTransport, TransportError, TransportResponse
from .http_client import SpotifyHTTPClient

# Clients
from .client import AuthenticatedClient, SpotifyClient, UserClient

# Parameters
from .enums import (
    IncludeGroup,
    ItemType,
    RepeatMode,
    ResourceKind,
    Scope,
    TimeRange,
    UserItemType,
)
from .params import (
    BoundedInt,
    Limit,
    Offset,
    RecommendationLimit,
    RequestSpec,
    SearchOffset,
    Volume,
)
from .url_parser import parse_spotify_id, to_uri

# Exceptions
from .exceptions import (
    SpotifyError,
    SpotifyAuthError,
    SpotifyInvalidStateError,
    SpotifyTokenExpiredError,
    SpotifyRefreshUnavailableError,
    SpotifyNetworkError,
    SpotifyParseError,
    SpotifyHTTPError,
    SpotifyAPIError,
    SpotifyRateLimitError,
    SpotifyNotFoundError,
)

__all__ = [
    # Configuration
    "ClientConfig",
    "SpotifyCredentials",
    # Auth
    "SpotifyAuthManager",
    "TokenInfo",
    "Authorisation",
    "AuthCodeFlow",
    "AuthCodePkceFlow",
    "ClientCredentialsFlow",
    "GrantFlow",
    "TokenStore",
    # Transport and dispatch
    "HTTPTransport",
    "HttpxTransport",
    "TransportError",
    "TransportResponse",
    "SpotifyHTTPClient",
    # Clients
    "SpotifyClient",
    "AuthenticatedClient",
    "UserClient",
    # Parameters
    "IncludeGroup",
    "ItemType",
    "RepeatMode",
    "ResourceKind",
    "Scope",
    "TimeRange",
    "UserItemType",
    "BoundedInt",
    "Limit",
    "Offset",
    "RecommendationLimit",
    "RequestSpec",
    "SearchOffset",
    "Volume",
    "parse_spotify_id",
    "to_uri",
    # Exceptions
    "SpotifyError",
    "SpotifyAuthError",
    "SpotifyInvalidStateError",
    "SpotifyTokenExpiredError",
    "SpotifyRefreshUnavailableError",
    "SpotifyNetworkError",
    "SpotifyParseError",
    "SpotifyHTTPError",
    "SpotifyAPIError",
    "SpotifyRateLimitError",
    "SpotifyNotFoundError",
]
