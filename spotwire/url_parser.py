"""
Spotify URL and URI parser utility.

Extracts resource IDs from various Spotify URL and URI formats.
Supports web URLs, app URIs, and bare IDs.
"""

import re
import logging
from typing import Optional
from urllib.parse import quote

from .enums import ResourceKind

logger = logging.getLogger(__name__)

# Spotify resource ID format: 22 base62 characters
SPOTIFY_ID_PATTERN = re.compile(r"^[a-zA-Z0-9]{22}$")

_KINDS = "|".join(kind.value for kind in ResourceKind)

_URL_PATTERN = re.compile(
    # https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M?si=abc123
    # open.spotify.com/intl-de/track/4uLU6hMCjMI75M1A2tKUQC
    rf"^(?:https?://)?open\.spotify\.com/(?:intl-[a-z-]+/)?({_KINDS})/([^/?#]+)(?:[?#].*)?$"
)

# spotify:playlist:37i9dQZF1DXcBWIGoYBM5M
_URI_PATTERN = re.compile(rf"^spotify:({_KINDS}):([^:]+)$")


def parse_spotify_id(
    input_string: str, kind: Optional[ResourceKind] = None
) -> Optional[str]:
    """
    Extract a Spotify resource ID from a URL, URI, or bare ID.

    Supports these formats:
        - https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC
        - https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC?si=abc123
        - open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC
        - spotify:track:4uLU6hMCjMI75M1A2tKUQC
        - 4uLU6hMCjMI75M1A2tKUQC  (bare ID)

    User IDs are free-form, so ``spotify:user:`` URIs and user URLs
    are accepted with any ID text.

    Args:
        input_string: The URL, URI, or ID to parse.
        kind: When given, URLs and URIs must name this resource kind.

    Returns:
        The resource ID, or None if the input does not match any
        known format.
    """
    if not input_string or not isinstance(input_string, str):
        return None

    cleaned = input_string.strip()
    if not cleaned:
        return None

    if SPOTIFY_ID_PATTERN.match(cleaned):
        return cleaned

    for pattern in (_URL_PATTERN, _URI_PATTERN):
        match = pattern.match(cleaned)
        if not match:
            continue
        found_kind, resource_id = match.group(1), match.group(2)
        if kind is not None and found_kind != kind:
            logger.debug("Expected %s but got %s: %r", kind, found_kind, cleaned)
            return None
        if found_kind != ResourceKind.USER and not SPOTIFY_ID_PATTERN.match(
            resource_id
        ):
            return None
        return resource_id

    logger.debug("Could not parse Spotify ID from: %r", cleaned)
    return None


def normalize_id(value: str, kind: ResourceKind) -> str:
    """
    Return the ID for ``value``, leaving unrecognised input untouched.

    Endpoint builders pass IDs through this so callers may hand over
    URLs or URIs; anything that does not parse is sent as given and
    left for the API to reject.
    """
    parsed = parse_spotify_id(value, kind)
    return parsed if parsed is not None else value


def path_segment(value: str) -> str:
    """Percent-encode ``value`` for use as one URL path segment."""
    return quote(str(value), safe="")


def path_id(value: str, kind: ResourceKind) -> str:
    """
    Normalise ``value`` like normalize_id and escape it for a URL path.

    Unparsed input such as ``x?fields=`` stays inside its path segment
    instead of adding a query string or extra path components.
    """
    return path_segment(normalize_id(value, kind))


def to_uri(kind: ResourceKind, resource_id: str) -> str:
    """Build a ``spotify:<kind>:<id>`` URI."""
    return f"spotify:{kind}:{resource_id}"
