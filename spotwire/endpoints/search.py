"""Search endpoint."""

from typing import Iterable

from ..enums import ItemType
from ..models import SearchResults
from ..params import Limit, SearchOffset, query_list
from .base import Builder, MarketMixin


class SearchBuilder(MarketMixin, Builder):
    """
    Search the catalog.

    Example:
        results = await client.search("tania bowra", [ItemType.ARTIST]) \\
            .market("US").limit(10).get()
    """

    def __init__(self, http, query: str, item_types: Iterable[ItemType]):
        super().__init__(http)
        if not query or not query.strip():
            raise ValueError("Search query cannot be empty")
        types = [ItemType(t) for t in item_types]
        self._param("q", query)
        self._param("type", query_list(types))

    def limit(self, limit: int):
        return self._param("limit", Limit(limit))

    def offset(self, offset: int):
        """Clamped to [0, 1000], the deepest the API pages search results."""
        return self._param("offset", SearchOffset(offset))

    def include_external(self, audio: bool = True):
        """Mark externally hosted audio content as playable."""
        if audio:
            return self._param("include_external", "audio")
        self._query.pop("include_external", None)
        return self

    async def get(self) -> SearchResults:
        return await self._send("GET", "/search", SearchResults)
