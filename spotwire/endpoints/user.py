"""User profile, top items and follow endpoints."""

from typing import Iterable, List, Optional, Union

from ..enums import ResourceKind, TimeRange, UserItemType
from ..models import Artist, CursorPage, FollowedArtists, Nil, Page, Track
from ..params import Limit, RequestSpec, body_list, query_list
from ..url_parser import normalize_id, path_id
from .base import Builder, PagingMixin

MAX_FOLLOW_IDS = 50


class UserTopItemsBuilder(PagingMixin, Builder):
    def __init__(self, http, item_type: UserItemType):
        super().__init__(http)
        self._type = UserItemType(item_type)

    def time_range(self, time_range: TimeRange):
        return self._param("time_range", TimeRange(time_range))

    async def get(self) -> Union[Page[Artist], Page[Track]]:
        model = Page[Artist] if self._type == UserItemType.ARTISTS else Page[Track]
        return await self._send("GET", f"/me/top/{self._type}", model)


class FollowedArtistsBuilder(Builder):
    def __init__(self, http):
        super().__init__(http)
        # Only artists can be listed for now.
        self._param("type", "artist")

    def after(self, artist_id: str):
        """Cursor: the last artist ID of the previous page."""
        return self._param("after", normalize_id(artist_id, ResourceKind.ARTIST))

    def limit(self, limit: int):
        return self._param("limit", Limit(limit))

    async def get(self) -> CursorPage[Artist]:
        result = await self._send("GET", "/me/following", FollowedArtists)
        return result.artists


class FollowBuilder(Builder):
    """Follow, unfollow, or check artists or other users."""

    def __init__(self, http, item_type: str, ids: Iterable[str]):
        super().__init__(http)
        if item_type not in ("artist", "user"):
            raise ValueError(f"Can only follow artists or users, not {item_type!r}")
        kind = ResourceKind(item_type)
        self._ids = [normalize_id(i, kind) for i in ids]
        query_list(self._ids, MAX_FOLLOW_IDS)
        self._param("type", item_type)

    async def follow(self) -> Nil:
        return await self._send(
            "PUT", "/me/following", Nil, body=body_list("ids", self._ids)
        )

    async def unfollow(self) -> Nil:
        return await self._send(
            "DELETE", "/me/following", Nil, body=body_list("ids", self._ids)
        )

    async def check(self) -> List[bool]:
        """Follow state of each ID, in request order."""
        query = dict(self._query, ids=query_list(self._ids))
        return await self._http.send(
            RequestSpec("GET", "/me/following/contains", query), List[bool]
        )


def user_path(user_id: str) -> str:
    return f"/users/{path_id(user_id, ResourceKind.USER)}"


def check_users_follow_query(user_ids: Iterable[str]) -> dict:
    ids = [normalize_id(i, ResourceKind.USER) for i in user_ids]
    return {"ids": query_list(ids, 5)}


def playlist_followers_path(playlist_id: str, suffix: Optional[str] = None) -> str:
    path = f"/playlists/{path_id(playlist_id, ResourceKind.PLAYLIST)}/followers"
    return f"{path}/{suffix}" if suffix else path
