"""
Pytest configuration and shared fixtures for spotwire tests.

This module provides a scripted fake transport that stands in for the
network, sample flows and tokens, and clients wired to the fake.
"""

import asyncio
import json
import time
from typing import Any, Dict, List, NamedTuple, Optional
from urllib.parse import parse_qsl, urlsplit

import pytest

from spotwire.auth import TokenInfo
from spotwire.client import SpotifyClient
from spotwire.flows import AuthCodeFlow, AuthCodePkceFlow, ClientCredentialsFlow
from spotwire.transport import TransportError, TransportResponse


CLIENT_ID = "test-client-id"
CLIENT_SECRET = "test-client-secret"
REDIRECT_URI = "http://localhost:8000/callback"

TOKEN_PATH = "/api/token"


# =============================================================================
# Fake transport
# =============================================================================


class Call(NamedTuple):
    """One request seen by the fake transport."""

    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[bytes]

    @property
    def path(self) -> str:
        path = urlsplit(self.url).path
        return path[len("/v1"):] if path.startswith("/v1/") else path

    @property
    def query(self) -> Dict[str, str]:
        return dict(parse_qsl(urlsplit(self.url).query))

    def json(self) -> Any:
        return json.loads(self.body)

    def form(self) -> Dict[str, str]:
        return dict(parse_qsl(self.body.decode("utf-8")))


class FakeTransport:
    """
    Transport returning scripted responses by method and path.

    Responses registered for the same route are served in order; the
    last one keeps being served once the others are used up. API paths
    are registered without the ``/v1`` prefix.

    Setting ``hold`` to an asyncio.Event parks every request after it is
    recorded until the event is set.
    """

    def __init__(self):
        self.calls: List[Call] = []
        self.closed = False
        self.hold: Optional[asyncio.Event] = None
        self._routes: Dict[tuple, list] = {}

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        json_data: Any = None,
        body: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        if json_data is not None:
            body = json.dumps(json_data).encode("utf-8")
        outcome = error or TransportResponse(status, body, headers or {})
        self._routes.setdefault((method, path), []).append(outcome)

    def add_token(
        self,
        access_token: str = "new-access-token",
        refresh_token: Optional[str] = None,
        expires_in: int = 3600,
        scope: str = "",
    ) -> None:
        payload = {
            "access_token": access_token,
            "token_type": "Bearer",
            "expires_in": expires_in,
            "scope": scope,
        }
        if refresh_token:
            payload["refresh_token"] = refresh_token
        self.add("POST", TOKEN_PATH, json_data=payload)

    def calls_to(self, path: str, method: Optional[str] = None) -> List[Call]:
        return [
            c for c in self.calls
            if c.path == path and (method is None or c.method == method)
        ]

    @property
    def token_calls(self) -> List[Call]:
        return self.calls_to(TOKEN_PATH, "POST")

    async def execute(self, method, url, headers, body=None):
        call = Call(method, url, dict(headers), body)
        self.calls.append(call)
        # Yield like a real network call would.
        await asyncio.sleep(0)
        if self.hold is not None:
            await self.hold.wait()

        queue = self._routes.get((method, call.path))
        if not queue:
            raise AssertionError(f"Unexpected request: {method} {url}")
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def aclose(self):
        self.closed = True


# =============================================================================
# Flow Fixtures
# =============================================================================


@pytest.fixture
def transport():
    """A fresh scripted transport."""
    return FakeTransport()


@pytest.fixture
def pkce_flow():
    return AuthCodePkceFlow(
        client_id=CLIENT_ID,
        redirect_uri=REDIRECT_URI,
        scopes=("user-read-private", "playlist-modify-public"),
    )


@pytest.fixture
def auth_code_flow():
    return AuthCodeFlow(
        client_id=CLIENT_ID,
        client_secret=CLIENT_SECRET,
        redirect_uri=REDIRECT_URI,
        scopes=("user-read-private",),
    )


@pytest.fixture
def client_credentials_flow():
    return ClientCredentialsFlow(client_id=CLIENT_ID, client_secret=CLIENT_SECRET)


# =============================================================================
# Token Fixtures
# =============================================================================


@pytest.fixture
def make_token():
    """Factory for TokenInfo expiring ``expires_in`` seconds from now."""

    def _make(
        access_token: str = "test-access-token",
        expires_in: float = 3600,
        refresh_token: Optional[str] = "test-refresh-token",
    ) -> TokenInfo:
        return TokenInfo(
            access_token=access_token,
            token_type="Bearer",
            expires_at=time.time() + expires_in,
            refresh_token=refresh_token,
        )

    return _make


@pytest.fixture
def sample_token(make_token):
    """A valid user token."""
    return make_token()


@pytest.fixture
def expired_token(make_token):
    """A user token that expired 100 seconds ago."""
    return make_token(access_token="expired-access-token", expires_in=-100)


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def user_client(pkce_flow, sample_token, transport):
    """UserClient with a valid token, wired to the fake transport."""
    return SpotifyClient.from_token(pkce_flow, sample_token, transport=transport)


@pytest.fixture
def catalog_client(client_credentials_flow, make_token, transport):
    """AuthenticatedClient from client credentials."""
    token = make_token(refresh_token=None)
    return SpotifyClient.from_token(
        client_credentials_flow, token, transport=transport
    )


@pytest.fixture
def network_error():
    return TransportError("connection reset")


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_playlist():
    """Sample Spotify playlist data."""
    return {
        "id": "37i9dQZF1DXcBWIGoYBM5M",
        "name": "Test Playlist",
        "description": "A test playlist",
        "public": True,
        "collaborative": False,
        "snapshot_id": "snap-1",
        "owner": {"id": "user123", "display_name": "Test User"},
        "images": [{"url": "https://example.com/cover.jpg"}],
        "tracks": {
            "href": "https://api.spotify.com/v1/playlists/37i9dQZF1DXcBWIGoYBM5M/tracks",
            "items": [],
            "limit": 100,
            "next": None,
            "offset": 0,
            "previous": None,
            "total": 0,
        },
        "type": "playlist",
        "uri": "spotify:playlist:37i9dQZF1DXcBWIGoYBM5M",
    }


@pytest.fixture
def sample_track():
    """Sample Spotify track data."""
    return {
        "id": "4iV5W9uYEdYUVa79Axb7Rh",
        "name": "Test Track",
        "uri": "spotify:track:4iV5W9uYEdYUVa79Axb7Rh",
        "duration_ms": 180000,
        "artists": [{"id": "0TnOYISbd1XYRBk9myaseg", "name": "Test Artist"}],
        "album": {
            "id": "4aawyAB9vmqN3uQ7FjRGTy",
            "name": "Test Album",
            "images": [],
        },
    }
