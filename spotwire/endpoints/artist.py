"""Artist endpoints."""

from typing import List, Optional

from ..enums import IncludeGroup, ResourceKind
from ..models import Artist, Artists, Page, SimplifiedAlbum, TopTracks, Track
from ..params import RequestSpec, query_list
from ..url_parser import normalize_id, path_id
from .base import Builder, MarketMixin, PagingMixin

MAX_ARTIST_IDS = 50


class ArtistBuilder(Builder):
    """
    Entry point for everything about one artist.

    ``get()`` fetches the artist itself; ``albums()`` returns a builder
    for the paged album listing, and the top tracks and related
    artists are fetched directly.
    """

    def __init__(self, http, artist_id: str):
        super().__init__(http)
        self._id = path_id(artist_id, ResourceKind.ARTIST)

    async def get(self) -> Artist:
        return await self._send("GET", f"/artists/{self._id}", Artist)

    def albums(self) -> "ArtistAlbumsBuilder":
        return ArtistAlbumsBuilder(self._http, self._id)

    async def top_tracks(self, market: Optional[str] = None) -> List[Track]:
        query = {"market": market} if market else {}
        result = await self._http.send(
            RequestSpec("GET", f"/artists/{self._id}/top-tracks", query), TopTracks
        )
        return result.tracks

    async def related_artists(self) -> List[Artist]:
        result = await self._http.send(
            RequestSpec("GET", f"/artists/{self._id}/related-artists"), Artists
        )
        return [a for a in result.artists if a is not None]


class ArtistAlbumsBuilder(MarketMixin, PagingMixin, Builder):
    def __init__(self, http, artist_id: str):
        super().__init__(http)
        self._id = artist_id

    def include_groups(self, *groups: IncludeGroup):
        """Restrict the listing to these album groups."""
        return self._param("include_groups", query_list(groups))

    async def get(self) -> Page[SimplifiedAlbum]:
        return await self._send(
            "GET", f"/artists/{self._id}/albums", Page[SimplifiedAlbum]
        )


class ArtistsBuilder(Builder):
    def __init__(self, http, artist_ids):
        super().__init__(http)
        ids = [normalize_id(i, ResourceKind.ARTIST) for i in artist_ids]
        self._param("ids", query_list(ids, MAX_ARTIST_IDS))

    async def get(self) -> List[Optional[Artist]]:
        result = await self._send("GET", "/artists", Artists)
        return result.artists
