"""
HTTP transport used by the token endpoint client and the dispatcher.

The library only needs one capability from a transport: execute a
request and hand back status, body and headers. HttpxTransport is the
default implementation; anything with the same ``execute`` coroutine
can be injected instead (tests use a scripted fake).
"""

import logging
from typing import Dict, Mapping, NamedTuple, Optional, Protocol

import httpx

from .config import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised by a transport when no HTTP response could be obtained."""
    pass


class TransportResponse(NamedTuple):
    status: int
    body: bytes
    headers: Mapping[str, str] = {}


class HTTPTransport(Protocol):
    async def execute(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes] = None,
    ) -> TransportResponse:
        ...

    async def aclose(self) -> None:
        ...


class HttpxTransport:
    """
    Transport backed by ``httpx.AsyncClient``.

    Connection pooling and TLS are left to httpx. Any httpx error
    (timeouts, connection failures, protocol errors) is raised as
    TransportError.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def execute(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes] = None,
    ) -> TransportResponse:
        try:
            response = await self._client.request(
                method, url, headers=headers, content=body
            )
        except httpx.HTTPError as e:
            logger.debug("Transport error for %s %s: %s", method, url, e)
            raise TransportError(str(e) or type(e).__name__) from e

        return TransportResponse(
            status=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
