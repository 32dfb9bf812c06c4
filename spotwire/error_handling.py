"""
Spotify API response classification.

Maps a finished HTTP response to either a validated payload or the
matching exception from the SpotifyError hierarchy.
"""

import json
import logging
from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from .exceptions import (
    SpotifyAPIError,
    SpotifyHTTPError,
    SpotifyNotFoundError,
    SpotifyParseError,
    SpotifyRateLimitError,
)
from .models import Nil
from .transport import TransportResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _ErrorObject(BaseModel):
    status: int
    message: str


class _ErrorBody(BaseModel):
    error: _ErrorObject


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def _retry_after(headers: Mapping[str, str]) -> Optional[int]:
    value = _header(headers, "Retry-After")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def raise_for_response(response: TransportResponse) -> None:
    """
    Raise the appropriate exception for a non-2xx response.

    Structured bodies of the form ``{"error": {"status", "message"}}``
    become SpotifyAPIError (SpotifyNotFoundError for 404,
    SpotifyRateLimitError for 429). Anything else becomes
    SpotifyHTTPError carrying only the status.
    """
    if 200 <= response.status < 300:
        return

    try:
        error = _ErrorBody.model_validate_json(response.body).error
    except ValidationError:
        logger.error(
            "HTTP %d with unrecognised body (%d bytes)",
            response.status, len(response.body),
        )
        raise SpotifyHTTPError(response.status, response.body)

    logger.debug("Spotify API error %d: %s", error.status, error.message)
    if error.status == 404:
        raise SpotifyNotFoundError(error.status, error.message)
    if error.status == 429:
        raise SpotifyRateLimitError(
            error.status, error.message,
            retry_after=_retry_after(response.headers),
        )
    raise SpotifyAPIError(error.status, error.message)


_adapters = {}


def _adapter(model: Any) -> TypeAdapter:
    try:
        return _adapters[model]
    except (KeyError, TypeError):
        pass
    adapter = TypeAdapter(model)
    try:
        _adapters[model] = adapter
    except TypeError:
        pass
    return adapter


def parse_body(body: bytes, model: Type[T]) -> T:
    """
    Validate a successful response body against ``model``.

    ``model`` may be a pydantic model or any type pydantic can
    validate (``List[bool]``, ``List[Image]``, ...). Nil accepts any
    body, including an empty one.

    Raises:
        SpotifyParseError: If the body is not valid JSON for ``model``.
    """
    if model is Nil:
        return Nil()
    if not body:
        raise SpotifyParseError(f"Empty response body, expected {_name(model)}")
    try:
        return _adapter(model).validate_json(body)
    except ValidationError as e:
        logger.debug("Response did not match %s: %s", _name(model), e)
        raise SpotifyParseError(
            f"Response did not match {_name(model)}: {e.error_count()} error(s)"
        ) from e


def _name(model: Any) -> str:
    return getattr(model, "__name__", None) or repr(model)


def dumps(value: Any) -> bytes:
    """Serialize a JSON request body."""
    return json.dumps(value, separators=(",", ":")).encode("utf-8")
