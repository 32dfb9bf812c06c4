"""
Shared plumbing for endpoint request builders.

A builder is created by an authenticated client from an endpoint's
required parameters, collects optional parameters through chained
setters, and finishes with an async terminal method that hands a
RequestSpec to the dispatcher.
"""

from typing import Any, Dict, Optional, Type, TypeVar

from ..http_client import SpotifyHTTPClient
from ..params import Body, Limit, Offset, RequestSpec

T = TypeVar("T")


class Builder:
    """Base class for all endpoint builders."""

    def __init__(self, http: SpotifyHTTPClient):
        self._http = http
        self._query: Dict[str, Any] = {}

    def _param(self, name: str, value: Any):
        self._query[name] = value
        return self

    def _spec(self, method: str, path: str, body: Optional[Body] = None) -> RequestSpec:
        return RequestSpec(method=method, path=path, query=dict(self._query), body=body)

    async def _send(
        self,
        method: str,
        path: str,
        model: Type[T],
        body: Optional[Body] = None,
        allow_empty: bool = False,
    ) -> T:
        return await self._http.send(
            self._spec(method, path, body), model, allow_empty=allow_empty
        )


class MarketMixin:
    def market(self, market: str):
        """ISO 3166-1 alpha-2 country code, or ``from_token``."""
        return self._param("market", market)


class CountryMixin:
    def country(self, country: str):
        """ISO 3166-1 alpha-2 country code."""
        return self._param("country", country)


class LocaleMixin:
    def locale(self, locale: str):
        """Language and country, e.g. ``es_MX``."""
        return self._param("locale", locale)


class PagingMixin:
    def limit(self, limit: int):
        """Page size, clamped to [1, 50]."""
        return self._param("limit", Limit(limit))

    def offset(self, offset: int):
        """Index of the first item, clamped to be non-negative."""
        return self._param("offset", Offset(offset))
