"""
Tests for TokenInfo and SpotifyAuthManager.

Tests cover token parsing and serialization, auth URL generation, and
the token endpoint error paths.
"""

import time

import pytest

from spotwire.auth import SpotifyAuthManager, TokenInfo
from spotwire.config import ClientConfig
from spotwire.exceptions import (
    SpotifyAuthError,
    SpotifyNetworkError,
    SpotifyParseError,
)


# =============================================================================
# TokenInfo
# =============================================================================


class TestTokenInfoFromDict:
    """Tests for TokenInfo.from_dict."""

    def test_token_endpoint_response(self):
        data = {
            "access_token": "abc",
            "token_type": "Bearer",
            "expires_in": 3600,
            "refresh_token": "rt",
            "scope": "user-read-private playlist-read-private",
        }
        token = TokenInfo.from_dict(data, issued_at=1000.0)

        assert token.access_token == "abc"
        assert token.expires_at == 4600.0
        assert token.refresh_token == "rt"
        assert token.scopes == ["user-read-private", "playlist-read-private"]

    def test_expires_at_kept_when_present(self):
        token = TokenInfo.from_dict(
            {"access_token": "a", "token_type": "Bearer", "expires_at": 1234.5}
        )
        assert token.expires_at == 1234.5

    def test_default_lifetime_is_one_hour(self):
        before = time.time()
        token = TokenInfo.from_dict({"access_token": "a", "token_type": "Bearer"})
        assert before + 3600 <= token.expires_at <= time.time() + 3600

    def test_missing_access_token(self):
        with pytest.raises(SpotifyParseError, match="access_token"):
            TokenInfo.from_dict({"token_type": "Bearer"})

    def test_not_a_dict(self):
        with pytest.raises(SpotifyParseError):
            TokenInfo.from_dict(["access_token"])

    def test_invalid_expires_in(self):
        with pytest.raises(SpotifyParseError, match="expires_in"):
            TokenInfo.from_dict(
                {"access_token": "a", "token_type": "Bearer", "expires_in": "soon"}
            )

    def test_round_trip_through_to_dict(self):
        token = TokenInfo.from_dict(
            {
                "access_token": "a",
                "token_type": "Bearer",
                "expires_in": 60,
                "refresh_token": "rt",
                "scope": "x",
            }
        )
        assert TokenInfo.from_dict(token.to_dict()) == token


class TestTokenInfoExpiry:
    """Tests for expiry helpers."""

    def test_fresh_token(self, make_token):
        token = make_token(expires_in=3600)
        assert token.is_expired is False
        assert token.expires_within(60) is False
        assert 3590 <= token.expires_in_seconds <= 3600

    def test_token_inside_margin(self, make_token):
        token = make_token(expires_in=30)
        assert token.is_expired is False
        assert token.expires_within(60) is True

    def test_expired_token(self, expired_token):
        assert expired_token.is_expired is True
        assert expired_token.expires_in_seconds < 0

    def test_with_refresh_token_returns_copy(self, make_token):
        token = make_token(refresh_token=None)
        updated = token.with_refresh_token("rt")
        assert updated.refresh_token == "rt"
        assert token.refresh_token is None


# =============================================================================
# SpotifyAuthManager
# =============================================================================


class TestGetAuthUrl:
    """Tests for get_auth_url."""

    def test_uses_configured_accounts_url(self, transport):
        config = ClientConfig(accounts_base_url="http://localhost:9000")
        auth_manager = SpotifyAuthManager(transport, config)

        url = auth_manager.get_auth_url("id", "http://cb", ["a"], "st")

        assert url.startswith("http://localhost:9000/authorize?")
        assert "scope=a" in url

    def test_scope_omitted_when_empty(self, transport):
        url = SpotifyAuthManager(transport).get_auth_url("id", "http://cb", [], "st")
        assert "scope=" not in url


class TestRequestToken:
    """Tests for request_token error mapping."""

    @pytest.mark.asyncio
    async def test_oauth_error_body(self, client_credentials_flow, transport):
        transport.add(
            "POST", "/api/token", status=400,
            json_data={"error": "invalid_client", "error_description": "Invalid client secret"},
        )
        with pytest.raises(SpotifyAuthError) as exc_info:
            await SpotifyAuthManager(transport).request_token(
                client_credentials_flow, {"grant_type": "client_credentials"}
            )
        assert "invalid_client: Invalid client secret" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_api_style_error_body(self, client_credentials_flow, transport):
        transport.add(
            "POST", "/api/token", status=500,
            json_data={"error": {"status": 500, "message": "Server error"}},
        )
        with pytest.raises(SpotifyAuthError, match="Server error"):
            await SpotifyAuthManager(transport).request_token(
                client_credentials_flow, {"grant_type": "client_credentials"}
            )

    @pytest.mark.asyncio
    async def test_non_json_error_body(self, client_credentials_flow, transport):
        transport.add("POST", "/api/token", status=502, body=b"Bad Gateway")
        with pytest.raises(SpotifyAuthError, match="Bad Gateway"):
            await SpotifyAuthManager(transport).request_token(
                client_credentials_flow, {"grant_type": "client_credentials"}
            )

    @pytest.mark.asyncio
    async def test_network_error(self, client_credentials_flow, transport, network_error):
        transport.add("POST", "/api/token", error=network_error)
        with pytest.raises(SpotifyNetworkError):
            await SpotifyAuthManager(transport).request_token(
                client_credentials_flow, {"grant_type": "client_credentials"}
            )

    @pytest.mark.asyncio
    async def test_invalid_json_success(self, client_credentials_flow, transport):
        transport.add("POST", "/api/token", status=200, body=b"<html>")
        with pytest.raises(SpotifyParseError):
            await SpotifyAuthManager(transport).request_token(
                client_credentials_flow, {"grant_type": "client_credentials"}
            )

    @pytest.mark.asyncio
    async def test_success_without_access_token(self, client_credentials_flow, transport):
        transport.add("POST", "/api/token", json_data={"token_type": "Bearer"})
        with pytest.raises(SpotifyParseError):
            await SpotifyAuthManager(transport).request_token(
                client_credentials_flow, {"grant_type": "client_credentials"}
            )


class TestRefreshToken:
    """Tests for refresh_token."""

    @pytest.mark.asyncio
    async def test_sends_refresh_grant(self, pkce_flow, transport, expired_token):
        transport.add_token(access_token="fresh")

        new_token = await SpotifyAuthManager(transport).refresh_token(
            pkce_flow, expired_token
        )

        assert new_token.access_token == "fresh"
        form = transport.token_calls[0].form()
        assert form["grant_type"] == "refresh_token"
        assert form["refresh_token"] == "test-refresh-token"
        assert form["client_id"] == pkce_flow.client_id

    @pytest.mark.asyncio
    async def test_keeps_refresh_token_when_none_returned(
        self, pkce_flow, transport, expired_token
    ):
        transport.add_token(access_token="fresh")

        new_token = await SpotifyAuthManager(transport).refresh_token(
            pkce_flow, expired_token
        )

        assert new_token.refresh_token == expired_token.refresh_token

    @pytest.mark.asyncio
    async def test_uses_rotated_refresh_token(self, pkce_flow, transport, expired_token):
        transport.add_token(access_token="fresh", refresh_token="rotated")

        new_token = await SpotifyAuthManager(transport).refresh_token(
            pkce_flow, expired_token
        )

        assert new_token.refresh_token == "rotated"

    @pytest.mark.asyncio
    async def test_rejected_refresh(self, pkce_flow, transport, expired_token):
        transport.add(
            "POST", "/api/token", status=400,
            json_data={"error": "invalid_grant", "error_description": "Refresh token revoked"},
        )
        with pytest.raises(SpotifyAuthError, match="revoked"):
            await SpotifyAuthManager(transport).refresh_token(pkce_flow, expired_token)
