"""
Tests for TokenStore.

Tests cover the refresh margin, refusal to refresh without a refresh
token, disabled auto refresh, single refresh under concurrency and
cancellation during a refresh.
"""

import asyncio

import pytest

from spotwire.auth import SpotifyAuthManager
from spotwire.exceptions import (
    SpotifyAuthError,
    SpotifyNetworkError,
    SpotifyRefreshUnavailableError,
    SpotifyTokenExpiredError,
)
from spotwire.token_store import TokenStore


def _store(flow, transport, token, **kwargs):
    return TokenStore(flow, SpotifyAuthManager(transport), token, **kwargs)


class TestRefreshIfNeeded:
    """Tests for refresh_if_needed."""

    @pytest.mark.asyncio
    async def test_noop_before_margin(self, pkce_flow, transport, sample_token):
        store = _store(pkce_flow, transport, sample_token)

        result = await store.refresh_if_needed()

        assert result is sample_token
        assert store.token is sample_token
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_refreshes_inside_margin(self, pkce_flow, transport, make_token):
        transport.add_token(access_token="fresh")
        store = _store(pkce_flow, transport, make_token(expires_in=30))

        result = await store.refresh_if_needed()

        assert result.access_token == "fresh"
        assert store.access_token == "fresh"
        assert store.refresh_token == "test-refresh-token"
        assert len(transport.token_calls) == 1

    @pytest.mark.asyncio
    async def test_margin_is_configurable(self, pkce_flow, transport, make_token):
        store = _store(pkce_flow, transport, make_token(expires_in=30), refresh_margin=10)

        await store.refresh_if_needed()

        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_client_credentials_cannot_refresh(
        self, client_credentials_flow, transport, make_token
    ):
        store = _store(
            client_credentials_flow, transport, make_token(expires_in=-1, refresh_token=None)
        )

        with pytest.raises(SpotifyRefreshUnavailableError):
            await store.refresh_if_needed()

        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_missing_refresh_token(self, pkce_flow, transport, make_token):
        store = _store(pkce_flow, transport, make_token(expires_in=-1, refresh_token=None))

        with pytest.raises(SpotifyRefreshUnavailableError, match="refresh_token"):
            await store.refresh_if_needed()

        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_auto_refresh_disabled(self, pkce_flow, transport, expired_token):
        store = _store(pkce_flow, transport, expired_token, auto_refresh=False)

        with pytest.raises(SpotifyTokenExpiredError):
            await store.refresh_if_needed()

        assert transport.calls == []
        assert store.auto_refresh is False

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_stale_token(self, pkce_flow, transport, expired_token):
        transport.add(
            "POST", "/api/token", status=400, json_data={"error": "invalid_grant"}
        )
        store = _store(pkce_flow, transport, expired_token)

        with pytest.raises(SpotifyAuthError):
            await store.refresh_if_needed()

        assert store.token is expired_token

    @pytest.mark.asyncio
    async def test_network_failure_keeps_stale_token(
        self, pkce_flow, transport, expired_token, network_error
    ):
        transport.add("POST", "/api/token", error=network_error)
        store = _store(pkce_flow, transport, expired_token)

        with pytest.raises(SpotifyNetworkError):
            await store.refresh_if_needed()

        assert store.token is expired_token


class TestConcurrentRefresh:
    """Concurrent callers share one refresh."""

    @pytest.mark.asyncio
    async def test_exactly_one_refresh(self, pkce_flow, transport, expired_token):
        transport.add_token(access_token="fresh")
        store = _store(pkce_flow, transport, expired_token)

        first, second = await asyncio.gather(
            store.refresh_if_needed(), store.refresh_if_needed()
        )

        assert len(transport.token_calls) == 1
        assert first.access_token == second.access_token == "fresh"

    @pytest.mark.asyncio
    async def test_many_callers(self, auth_code_flow, transport, expired_token):
        transport.add_token(access_token="fresh")
        store = _store(auth_code_flow, transport, expired_token)

        results = await asyncio.gather(*(store.refresh_if_needed() for _ in range(10)))

        assert len(transport.token_calls) == 1
        assert {r.access_token for r in results} == {"fresh"}

    @pytest.mark.asyncio
    async def test_failed_refresh_shared_by_waiters(
        self, pkce_flow, transport, expired_token
    ):
        transport.add("POST", "/api/token", status=400, json_data={"error": "invalid_grant"})
        transport.add_token(access_token="fresh")
        store = _store(pkce_flow, transport, expired_token)

        results = await asyncio.gather(
            store.refresh_if_needed(), store.refresh_if_needed(),
            return_exceptions=True,
        )

        assert len(transport.token_calls) == 1
        assert all(isinstance(r, SpotifyAuthError) for r in results)
        assert store.token is expired_token

        # A later call tries again
        result = await store.refresh_if_needed()

        assert result.access_token == "fresh"
        assert len(transport.token_calls) == 2

    @pytest.mark.asyncio
    async def test_cancelled_refresh_keeps_old_token(
        self, pkce_flow, transport, expired_token
    ):
        transport.add_token(access_token="fresh")
        transport.hold = asyncio.Event()
        store = _store(pkce_flow, transport, expired_token)

        task = asyncio.create_task(store.refresh_if_needed())
        while not transport.token_calls:
            await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert not store._lock.locked()
        assert store.token is expired_token

        transport.hold = None
        result = await store.refresh_if_needed()

        assert result.access_token == "fresh"
        assert store.access_token == "fresh"


class TestForcedRefresh:
    """Tests for refresh()."""

    @pytest.mark.asyncio
    async def test_refreshes_valid_token(self, pkce_flow, transport, sample_token):
        transport.add_token(access_token="forced")
        store = _store(pkce_flow, transport, sample_token)

        result = await store.refresh()

        assert result.access_token == "forced"
        assert len(transport.token_calls) == 1

    @pytest.mark.asyncio
    async def test_client_credentials(self, client_credentials_flow, transport, make_token):
        store = _store(client_credentials_flow, transport, make_token(refresh_token=None))

        with pytest.raises(SpotifyRefreshUnavailableError):
            await store.refresh()

        assert transport.calls == []
