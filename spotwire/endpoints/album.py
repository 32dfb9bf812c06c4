"""Album endpoints."""

from typing import Iterable, List, Optional

from ..enums import ResourceKind
from ..models import Album, Albums, NewReleases, Page, SavedAlbum, SimplifiedAlbum, SimplifiedTrack
from ..params import query_list
from ..url_parser import normalize_id, path_id
from .base import Builder, CountryMixin, MarketMixin, PagingMixin

MAX_ALBUM_IDS = 20


class AlbumBuilder(MarketMixin, Builder):
    def __init__(self, http, album_id: str):
        super().__init__(http)
        self._id = path_id(album_id, ResourceKind.ALBUM)

    async def get(self) -> Album:
        return await self._send("GET", f"/albums/{self._id}", Album)


class AlbumsBuilder(MarketMixin, Builder):
    def __init__(self, http, album_ids: Iterable[str]):
        super().__init__(http)
        ids = [normalize_id(i, ResourceKind.ALBUM) for i in album_ids]
        self._param("ids", query_list(ids, MAX_ALBUM_IDS))

    async def get(self) -> List[Optional[Album]]:
        """Albums in request order; unknown IDs come back as None."""
        result = await self._send("GET", "/albums", Albums)
        return result.albums


class AlbumTracksBuilder(MarketMixin, PagingMixin, Builder):
    def __init__(self, http, album_id: str):
        super().__init__(http)
        self._id = path_id(album_id, ResourceKind.ALBUM)

    async def get(self) -> Page[SimplifiedTrack]:
        return await self._send(
            "GET", f"/albums/{self._id}/tracks", Page[SimplifiedTrack]
        )


class NewReleasesBuilder(CountryMixin, PagingMixin, Builder):
    async def get(self) -> Page[SimplifiedAlbum]:
        result = await self._send("GET", "/browse/new-releases", NewReleases)
        return result.albums


class SavedAlbumsBuilder(MarketMixin, PagingMixin, Builder):
    async def get(self) -> Page[SavedAlbum]:
        return await self._send("GET", "/me/albums", Page[SavedAlbum])
