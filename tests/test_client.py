"""
Tests for the SpotifyClient facade.

Tests cover the transitions from an unauthenticated client to the
authenticated clients, the refresh-token shortcut, and resource
ownership.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock

from spotwire.client import AuthenticatedClient, SpotifyClient, UserClient
from spotwire.config import ClientConfig
from spotwire.exceptions import (
    SpotifyAuthError,
    SpotifyRefreshUnavailableError,
    SpotifyTokenExpiredError,
)
from spotwire.transport import HttpxTransport


ALBUM = {"id": "4aawyAB9vmqN3uQ7FjRGTy", "name": "Global Warming"}


# =============================================================================
# authenticate()
# =============================================================================


class TestAuthenticate:
    """Tests for SpotifyClient.authenticate()."""

    @pytest.mark.asyncio
    async def test_client_credentials_gives_catalog_client(
        self, client_credentials_flow, transport
    ):
        transport.add_token(access_token="app-token")
        client = SpotifyClient(client_credentials_flow, transport=transport)

        authenticated = await client.authenticate()

        assert type(authenticated) is AuthenticatedClient
        assert authenticated.access_token == "app-token"
        assert not hasattr(authenticated, "saved_tracks")
        assert not hasattr(authenticated, "start_playback")

    @pytest.mark.asyncio
    async def test_client_credentials_then_refresh_check_is_noop(
        self, client_credentials_flow, transport
    ):
        transport.add_token(access_token="app-token", expires_in=3600)
        client = SpotifyClient(client_credentials_flow, transport=transport)
        authenticated = await client.authenticate()
        token_before = authenticated.token

        result = await authenticated._token_store.refresh_if_needed()

        assert result is token_before
        assert len(transport.calls) == 1

    @pytest.mark.asyncio
    async def test_pkce_gives_user_client(self, pkce_flow, transport):
        transport.add_token(access_token="user-token", refresh_token="rt")
        client = SpotifyClient(pkce_flow, transport=transport)
        authorisation = client.get_authorisation(state="abc")

        authenticated = await client.authenticate(authorisation, "code", "abc")

        assert isinstance(authenticated, UserClient)
        assert authenticated.access_token == "user-token"
        assert authenticated.refresh_token == "rt"
        assert authenticated.flow is pkce_flow

    @pytest.mark.asyncio
    async def test_auth_code_gives_user_client(self, auth_code_flow, transport):
        transport.add_token(refresh_token="rt")
        client = SpotifyClient(auth_code_flow, transport=transport)
        authorisation = client.get_authorisation()

        authenticated = await client.authenticate(authorisation, "code", authorisation.state)

        assert isinstance(authenticated, UserClient)

    @pytest.mark.asyncio
    async def test_failed_exchange_raises(self, pkce_flow, transport):
        transport.add("POST", "/api/token", status=400, json_data={"error": "invalid_grant"})
        client = SpotifyClient(pkce_flow, transport=transport)
        authorisation = client.get_authorisation()

        with pytest.raises(SpotifyAuthError):
            await client.authenticate(authorisation, "code", authorisation.state)

    def test_client_credentials_has_no_authorisation_step(
        self, client_credentials_flow, transport
    ):
        client = SpotifyClient(client_credentials_flow, transport=transport)
        with pytest.raises(TypeError):
            client.get_authorisation()

    def test_unauthenticated_client_has_no_endpoints(self, pkce_flow, transport):
        client = SpotifyClient(pkce_flow, transport=transport)
        assert not hasattr(client, "album")
        assert not hasattr(client, "search")


# =============================================================================
# from_refresh_token()
# =============================================================================


class TestFromRefreshToken:
    """Tests for SpotifyClient.from_refresh_token()."""

    @pytest.mark.asyncio
    async def test_pkce(self, pkce_flow, transport):
        transport.add_token(access_token="fresh")

        client = await SpotifyClient.from_refresh_token(
            pkce_flow, "stored-refresh-token", transport=transport
        )

        assert isinstance(client, UserClient)
        assert client.access_token == "fresh"
        assert client.refresh_token == "stored-refresh-token"
        form = transport.token_calls[0].form()
        assert form["grant_type"] == "refresh_token"
        assert form["refresh_token"] == "stored-refresh-token"

    @pytest.mark.asyncio
    async def test_auth_code(self, auth_code_flow, transport):
        transport.add_token(access_token="fresh", refresh_token="rotated")

        client = await SpotifyClient.from_refresh_token(
            auth_code_flow, "stored-refresh-token", transport=transport
        )

        assert isinstance(client, UserClient)
        assert client.refresh_token == "rotated"
        assert "Authorization" in transport.token_calls[0].headers

    @pytest.mark.asyncio
    async def test_client_credentials_rejected_without_request(
        self, client_credentials_flow, transport
    ):
        with pytest.raises(SpotifyRefreshUnavailableError):
            await SpotifyClient.from_refresh_token(
                client_credentials_flow, "anything", transport=transport
            )
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_empty_refresh_token(self, pkce_flow, transport):
        with pytest.raises(ValueError):
            await SpotifyClient.from_refresh_token(pkce_flow, "", transport=transport)

    @pytest.mark.asyncio
    async def test_rejected_refresh_token(self, pkce_flow, transport):
        transport.add("POST", "/api/token", status=400, json_data={"error": "invalid_grant"})

        with pytest.raises(SpotifyAuthError):
            await SpotifyClient.from_refresh_token(pkce_flow, "revoked", transport=transport)

        # A caller supplied transport is left open
        assert transport.closed is False


# =============================================================================
# from_token() and token handling
# =============================================================================


class TestFromToken:
    """Tests for wrapping a stored token."""

    def test_no_network_call(self, pkce_flow, sample_token, transport):
        client = SpotifyClient.from_token(pkce_flow, sample_token, transport=transport)

        assert isinstance(client, UserClient)
        assert client.token is sample_token
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_expired_token_refreshed_on_first_call(
        self, pkce_flow, expired_token, transport
    ):
        transport.add_token(access_token="fresh")
        transport.add("GET", "/albums/4aawyAB9vmqN3uQ7FjRGTy", json_data=ALBUM)
        client = SpotifyClient.from_token(pkce_flow, expired_token, transport=transport)

        await client.album("4aawyAB9vmqN3uQ7FjRGTy").get()

        assert client.access_token == "fresh"
        assert len(transport.token_calls) == 1

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_one_refresh(
        self, pkce_flow, expired_token, transport
    ):
        transport.add_token(access_token="fresh")
        transport.add("GET", "/albums/4aawyAB9vmqN3uQ7FjRGTy", json_data=ALBUM)
        transport.add("GET", "/markets", json_data={"markets": ["SE"]})
        client = SpotifyClient.from_token(pkce_flow, expired_token, transport=transport)

        album, markets = await asyncio.gather(
            client.album("4aawyAB9vmqN3uQ7FjRGTy").get(),
            client.get_available_markets(),
        )

        assert album.name == "Global Warming"
        assert markets == ["SE"]
        assert len(transport.token_calls) == 1
        api_calls = [c for c in transport.calls if c.path != "/api/token"]
        assert {c.headers["Authorization"] for c in api_calls} == {"Bearer fresh"}

    @pytest.mark.asyncio
    async def test_auto_refresh_disabled(self, pkce_flow, expired_token, transport):
        client = SpotifyClient.from_token(
            pkce_flow, expired_token, transport=transport,
            config=ClientConfig(auto_refresh=False),
        )

        with pytest.raises(SpotifyTokenExpiredError):
            await client.album("4aawyAB9vmqN3uQ7FjRGTy").get()

        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_request_refresh_token(self, pkce_flow, sample_token, transport):
        transport.add_token(access_token="forced")
        client = SpotifyClient.from_token(pkce_flow, sample_token, transport=transport)

        token = await client.request_refresh_token()

        assert token.access_token == "forced"
        assert client.access_token == "forced"


# =============================================================================
# Resources
# =============================================================================


class TestResources:
    """Transport ownership and context management."""

    @pytest.mark.asyncio
    async def test_caller_transport_not_closed(self, pkce_flow, sample_token, transport):
        async with SpotifyClient.from_token(pkce_flow, sample_token, transport=transport):
            pass
        assert transport.closed is False

    @pytest.mark.asyncio
    async def test_own_transport_closed(self, pkce_flow, sample_token):
        client = SpotifyClient.from_token(pkce_flow, sample_token)
        assert isinstance(client._transport, HttpxTransport)
        client._transport.aclose = AsyncMock()

        async with client:
            pass

        client._transport.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unauthenticated_client_context(self, pkce_flow):
        async with SpotifyClient(pkce_flow) as client:
            client._transport.aclose = AsyncMock()
        client._transport.aclose.assert_awaited_once()

    def test_default_transport_uses_config_timeout(self, pkce_flow):
        client = SpotifyClient(pkce_flow, config=ClientConfig(timeout=7))
        assert client._transport._client.timeout.read == 7
