"""
Query and body parameter helpers.

Contains the clamped integer types used for paging and volume
parameters, list encoders, and the RequestSpec handed to the
dispatcher by every endpoint builder.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union


class BoundedInt(int):
    """
    Integer clamped to the inclusive range [MIN, MAX].

    Out-of-range values are adjusted to the nearest bound rather
    than rejected, so every instance satisfies MIN <= value <= MAX.

    Example:
        Limit(0) == 1
        Limit(20) == 20
        Limit(500) == 50
    """

    MIN = 0
    MAX = 2**32 - 1

    def __new__(cls, value: int = None):
        if value is None:
            value = cls.MIN
        value = int(value)
        if value < cls.MIN:
            value = cls.MIN
        elif value > cls.MAX:
            value = cls.MAX
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"

    def __str__(self) -> str:
        return str(int(self))


class Limit(BoundedInt):
    """Page size for paginated list endpoints."""
    MIN = 1
    MAX = 50


class Offset(BoundedInt):
    """Index of the first item to return."""
    MIN = 0
    MAX = 2**31 - 1


class SearchOffset(BoundedInt):
    """Search results cannot be paged past the first thousand items."""
    MIN = 0
    MAX = 1000


class RecommendationLimit(BoundedInt):
    """Number of tracks requested from the recommendations endpoint."""
    MIN = 1
    MAX = 100


class Volume(BoundedInt):
    """Playback volume in percent."""
    MIN = 0
    MAX = 100


def _checked_list(items: Iterable[Any], max_items: Optional[int]) -> List[str]:
    if isinstance(items, str):
        items = [items]
    values = [str(item) for item in items]
    if not values:
        raise ValueError("At least one item is required")
    if max_items is not None and len(values) > max_items:
        raise ValueError(
            f"At most {max_items} items are allowed, got {len(values)}"
        )
    return values


def query_list(items: Iterable[Any], max_items: Optional[int] = None) -> str:
    """
    Join items into the comma separated form used by list query parameters.

    Raises:
        ValueError: If no items, or more than ``max_items``, are given.
    """
    return ",".join(_checked_list(items, max_items))


def body_list(
    name: str, items: Iterable[Any], max_items: Optional[int] = None
) -> Dict[str, list]:
    """Wrap items in a JSON object under ``name`` for list request bodies."""
    return {name: _checked_list(items, max_items)}


@dataclass(frozen=True)
class RawBody:
    """Non-JSON request body, sent as-is with its content type."""

    content: bytes
    content_type: str = "application/octet-stream"


Body = Union[Dict[str, Any], list, RawBody]


@dataclass
class RequestSpec:
    """
    A single Web API call, built by an endpoint builder.

    Attributes:
        method: HTTP method.
        path: Path relative to the API base URL, e.g. ``/albums/{id}``.
        query: Ordered query parameters. Only parameters that were
            explicitly set are present.
        body: Optional JSON value or RawBody.
    """

    method: str
    path: str
    query: Dict[str, Any] = field(default_factory=dict)
    body: Optional[Body] = None

    def query_string_params(self) -> Dict[str, str]:
        """Render query values the way the API expects them on the wire."""
        params = {}
        for key, value in self.query.items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            params[key] = str(value)
        return params
