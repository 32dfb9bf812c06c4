"""Show and episode endpoints."""

from typing import Iterable, List, Optional

from ..enums import ResourceKind
from ..models import (
    Episode,
    Episodes,
    Page,
    SavedEpisode,
    SavedShow,
    Show,
    Shows,
    SimplifiedEpisode,
    SimplifiedShow,
)
from ..params import query_list
from ..url_parser import normalize_id, path_id
from .base import Builder, MarketMixin, PagingMixin

MAX_IDS = 50


class ShowBuilder(MarketMixin, Builder):
    def __init__(self, http, show_id: str):
        super().__init__(http)
        self._id = path_id(show_id, ResourceKind.SHOW)

    async def get(self) -> Show:
        return await self._send("GET", f"/shows/{self._id}", Show)


class ShowsBuilder(MarketMixin, Builder):
    def __init__(self, http, show_ids: Iterable[str]):
        super().__init__(http)
        ids = [normalize_id(i, ResourceKind.SHOW) for i in show_ids]
        self._param("ids", query_list(ids, MAX_IDS))

    async def get(self) -> List[Optional[SimplifiedShow]]:
        result = await self._send("GET", "/shows", Shows)
        return result.shows


class ShowEpisodesBuilder(MarketMixin, PagingMixin, Builder):
    def __init__(self, http, show_id: str):
        super().__init__(http)
        self._id = path_id(show_id, ResourceKind.SHOW)

    async def get(self) -> Page[Optional[SimplifiedEpisode]]:
        return await self._send(
            "GET", f"/shows/{self._id}/episodes", Page[Optional[SimplifiedEpisode]]
        )


class EpisodeBuilder(MarketMixin, Builder):
    def __init__(self, http, episode_id: str):
        super().__init__(http)
        self._id = path_id(episode_id, ResourceKind.EPISODE)

    async def get(self) -> Episode:
        return await self._send("GET", f"/episodes/{self._id}", Episode)


class EpisodesBuilder(MarketMixin, Builder):
    def __init__(self, http, episode_ids: Iterable[str]):
        super().__init__(http)
        ids = [normalize_id(i, ResourceKind.EPISODE) for i in episode_ids]
        self._param("ids", query_list(ids, MAX_IDS))

    async def get(self) -> List[Optional[Episode]]:
        result = await self._send("GET", "/episodes", Episodes)
        return result.episodes


class SavedShowsBuilder(PagingMixin, Builder):
    async def get(self) -> Page[SavedShow]:
        return await self._send("GET", "/me/shows", Page[SavedShow])


class SavedEpisodesBuilder(MarketMixin, PagingMixin, Builder):
    async def get(self) -> Page[SavedEpisode]:
        return await self._send("GET", "/me/episodes", Page[SavedEpisode])
