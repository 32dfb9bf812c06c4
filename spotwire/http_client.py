"""
Request dispatcher for the Spotify Web API.

Every endpoint builder funnels through SpotifyHTTPClient.send():
refresh the token if needed, attach the bearer token, send the
request through the transport, then map the response to a payload
or an exception.

Refresh is proactive only. A 401 caused by a token that expired while
the request was in transit is raised to the caller and not retried.
"""

import logging
from typing import Any, Optional, Type, TypeVar
from urllib.parse import urlencode

from .config import ClientConfig
from .error_handling import dumps, parse_body, raise_for_response
from .exceptions import SpotifyNetworkError
from .params import RawBody, RequestSpec
from .token_store import TokenStore
from .transport import HTTPTransport, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SpotifyHTTPClient:
    """
    Sends RequestSpecs on behalf of an authenticated client.

    No retries happen here: transport failures, rate limits and
    server errors are raised to the caller as they occur.
    """

    def __init__(
        self,
        transport: HTTPTransport,
        token_store: TokenStore,
        config: Optional[ClientConfig] = None,
    ):
        self._transport = transport
        self._token_store = token_store
        self._config = config or ClientConfig()

    @property
    def token_store(self) -> TokenStore:
        return self._token_store

    def build_url(self, spec: RequestSpec) -> str:
        url = f"{self._config.api_base_url}{spec.path}"
        params = spec.query_string_params()
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    async def send(
        self,
        spec: RequestSpec,
        model: Type[T],
        allow_empty: bool = False,
    ) -> Any:
        """
        Execute a request and deserialize the response.

        Args:
            spec: The request to send.
            model: Expected payload type. Nil for endpoints whose
                successful response carries nothing of interest.
            allow_empty: Return None for a successful response without a
                body (the player endpoints answer 204 when idle).

        Returns:
            An instance of ``model`` (or None, see ``allow_empty``).

        Raises:
            SpotifyRefreshUnavailableError, SpotifyTokenExpiredError,
            SpotifyAuthError: From the refresh check; nothing is sent.
            SpotifyNetworkError: If the transport failed.
            SpotifyAPIError: For structured API error responses.
            SpotifyHTTPError: For other non-2xx responses.
            SpotifyParseError: If a successful body does not match.
        """
        token_info = await self._token_store.refresh_if_needed()

        headers = {"Authorization": f"Bearer {token_info.access_token}"}
        body = None
        if isinstance(spec.body, RawBody):
            headers["Content-Type"] = spec.body.content_type
            body = spec.body.content
        elif spec.body is not None:
            headers["Content-Type"] = "application/json"
            body = dumps(spec.body)
        else:
            # Some PUT endpoints reject bodiless requests without it.
            headers["Content-Length"] = "0"

        url = self.build_url(spec)
        logger.debug("%s %s", spec.method, url)
        try:
            response = await self._transport.execute(spec.method, url, headers, body)
        except TransportError as e:
            raise SpotifyNetworkError(
                f"Network error for {spec.method} {spec.path}: {e}"
            ) from e

        raise_for_response(response)
        if allow_empty and not response.body.strip():
            return None
        return parse_body(response.body, model)
