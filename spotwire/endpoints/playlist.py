"""
Playlist endpoints.

Includes the composite create-with-tracks builder: the playlist is
created first, then the items are added and the finished playlist is
fetched. A failure while adding items is raised as-is and the newly
created playlist is left in place (empty); cleaning it up is up to
the caller.
"""

import base64
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from ..enums import ResourceKind
from ..models import (
    FeaturedPlaylists,
    Image,
    Nil,
    Page,
    Playlist,
    PlaylistItem,
    SimplifiedPlaylist,
    SnapshotId,
)
from ..params import Offset, RawBody, RequestSpec, body_list
from ..url_parser import path_id, path_segment
from .base import Builder, CountryMixin, LocaleMixin, MarketMixin, PagingMixin

logger = logging.getLogger(__name__)

# Items per add/remove request
MAX_PLAYLIST_ITEMS = 100

# Cover images are limited to 256 KB once base64 encoded
MAX_IMAGE_BYTES = 256 * 1024


class PlaylistBuilder(MarketMixin, Builder):
    def __init__(self, http, playlist_id: str):
        super().__init__(http)
        self._id = path_id(playlist_id, ResourceKind.PLAYLIST)

    def fields(self, fields: str):
        """
        Filter the response, e.g. ``name,tracks.items(track(name))``.

        A filtered response no longer matches the Playlist model, so
        ``get()`` returns the raw JSON object when fields are set.
        """
        return self._param("fields", fields)

    async def get(self) -> Union[Playlist, Dict[str, Any]]:
        model = Dict[str, Any] if "fields" in self._query else Playlist
        return await self._send("GET", f"/playlists/{self._id}", model)


class ChangePlaylistDetailsBuilder(Builder):
    def __init__(self, http, playlist_id: str):
        super().__init__(http)
        self._id = path_id(playlist_id, ResourceKind.PLAYLIST)
        self._body: Dict[str, Any] = {}

    def name(self, name: str):
        self._body["name"] = name
        return self

    def public(self, public: bool):
        self._body["public"] = public
        return self

    def collaborative(self, collaborative: bool):
        self._body["collaborative"] = collaborative
        return self

    def description(self, description: str):
        self._body["description"] = description
        return self

    async def send(self) -> Nil:
        if not self._body:
            raise ValueError("No playlist details to change")
        return await self._send("PUT", f"/playlists/{self._id}", Nil, body=self._body)


class PlaylistItemsBuilder(MarketMixin, PagingMixin, Builder):
    def __init__(self, http, playlist_id: str):
        super().__init__(http)
        self._id = path_id(playlist_id, ResourceKind.PLAYLIST)

    def fields(self, fields: str):
        return self._param("fields", fields)

    async def get(self) -> Page[PlaylistItem]:
        return await self._send(
            "GET", f"/playlists/{self._id}/tracks", Page[PlaylistItem]
        )


class UpdatePlaylistItemsBuilder(Builder):
    """Reorder a range of items, or replace all items with ``uris()``."""

    def __init__(self, http, playlist_id: str, range_start: int, insert_before: int):
        super().__init__(http)
        self._id = path_id(playlist_id, ResourceKind.PLAYLIST)
        self._body: Dict[str, Any] = {
            "range_start": Offset(range_start),
            "insert_before": Offset(insert_before),
        }

    def range_length(self, range_length: int):
        self._body["range_length"] = max(1, int(range_length))
        return self

    def snapshot_id(self, snapshot_id: str):
        self._body["snapshot_id"] = snapshot_id
        return self

    def uris(self, uris: Iterable[str]):
        self._body.update(body_list("uris", uris, MAX_PLAYLIST_ITEMS))
        return self

    async def send(self) -> str:
        """Returns the playlist's new snapshot ID."""
        result = await self._send(
            "PUT", f"/playlists/{self._id}/tracks", SnapshotId, body=self._body
        )
        return result.snapshot_id


class AddPlaylistItemsBuilder(Builder):
    def __init__(self, http, playlist_id: str, uris: Iterable[str]):
        super().__init__(http)
        self._id = path_id(playlist_id, ResourceKind.PLAYLIST)
        self._body: Dict[str, Any] = body_list("uris", uris, MAX_PLAYLIST_ITEMS)

    def position(self, position: int):
        """Zero-based insert position; items are appended by default."""
        self._body["position"] = Offset(position)
        return self

    async def send(self) -> str:
        """Returns the playlist's new snapshot ID."""
        result = await self._send(
            "POST", f"/playlists/{self._id}/tracks", SnapshotId, body=self._body
        )
        return result.snapshot_id


class RemovePlaylistItemsBuilder(Builder):
    def __init__(self, http, playlist_id: str, uris: Iterable[str]):
        super().__init__(http)
        self._id = path_id(playlist_id, ResourceKind.PLAYLIST)
        uris = body_list("uris", uris, MAX_PLAYLIST_ITEMS)["uris"]
        self._body: Dict[str, Any] = {"tracks": [{"uri": uri} for uri in uris]}

    def snapshot_id(self, snapshot_id: str):
        self._body["snapshot_id"] = snapshot_id
        return self

    async def send(self) -> str:
        """Returns the playlist's new snapshot ID."""
        result = await self._send(
            "DELETE", f"/playlists/{self._id}/tracks", SnapshotId, body=self._body
        )
        return result.snapshot_id


class UserPlaylistsBuilder(PagingMixin, Builder):
    def __init__(self, http, user_id: str):
        super().__init__(http)
        self._user_id = path_id(user_id, ResourceKind.USER)

    async def get(self) -> Page[SimplifiedPlaylist]:
        return await self._send(
            "GET", f"/users/{self._user_id}/playlists", Page[SimplifiedPlaylist]
        )


class CurrentUserPlaylistsBuilder(PagingMixin, Builder):
    async def get(self) -> Page[SimplifiedPlaylist]:
        return await self._send("GET", "/me/playlists", Page[SimplifiedPlaylist])


class CreatePlaylistBuilder(Builder):
    def __init__(self, http, user_id: str, name: str):
        super().__init__(http)
        if not name:
            raise ValueError("Playlist name is required")
        self._user_id = path_id(user_id, ResourceKind.USER)
        self._body: Dict[str, Any] = {"name": name}

    def public(self, public: bool):
        self._body["public"] = public
        return self

    def collaborative(self, collaborative: bool):
        self._body["collaborative"] = collaborative
        return self

    def description(self, description: str):
        self._body["description"] = description
        return self

    def tracks(self, uris: Iterable[str]) -> "CreatePlaylistWithTracksBuilder":
        """Add these items to the playlist right after creating it."""
        return CreatePlaylistWithTracksBuilder(self, uris)

    async def create(self) -> Playlist:
        return await self._send(
            "POST", f"/users/{self._user_id}/playlists", Playlist, body=dict(self._body)
        )


class CreatePlaylistWithTracksBuilder:
    """
    Create a playlist, add items to it, then return the full playlist.

    Steps run in order and stop at the first failure, which is raised
    unchanged. Nothing is rolled back: if adding items fails, the
    playlist created in the first step still exists.
    """

    def __init__(self, create: CreatePlaylistBuilder, uris: Iterable[str]):
        self._create = create
        self._uris = body_list("uris", uris, MAX_PLAYLIST_ITEMS)["uris"]

    async def create(self) -> Playlist:
        http = self._create._http
        playlist = await self._create.create()
        logger.debug("Created playlist %s, adding %d items", playlist.id, len(self._uris))
        await AddPlaylistItemsBuilder(http, playlist.id, self._uris).send()
        return await PlaylistBuilder(http, playlist.id).get()


class FeaturedPlaylistsBuilder(CountryMixin, LocaleMixin, PagingMixin, Builder):
    def timestamp(self, timestamp: str):
        """ISO 8601 local time, e.g. ``2014-10-23T09:00:00``."""
        return self._param("timestamp", timestamp)

    async def get(self) -> FeaturedPlaylists:
        return await self._send("GET", "/browse/featured-playlists", FeaturedPlaylists)


class CategoryPlaylistsBuilder(CountryMixin, PagingMixin, Builder):
    def __init__(self, http, category_id: str):
        super().__init__(http)
        self._id = path_segment(category_id)

    async def get(self) -> FeaturedPlaylists:
        return await self._send(
            "GET", f"/browse/categories/{self._id}/playlists", FeaturedPlaylists
        )


async def get_playlist_image(http, playlist_id: str) -> List[Image]:
    playlist_id = path_id(playlist_id, ResourceKind.PLAYLIST)
    return await http.send(
        RequestSpec("GET", f"/playlists/{playlist_id}/images"), List[Image]
    )


async def add_playlist_image(http, playlist_id: str, image: bytes) -> Nil:
    """Upload a JPEG cover image; the API wants it base64 encoded."""
    playlist_id = path_id(playlist_id, ResourceKind.PLAYLIST)
    encoded = base64.b64encode(image)
    if len(encoded) > MAX_IMAGE_BYTES:
        raise ValueError(
            f"Encoded image is {len(encoded)} bytes, limit is {MAX_IMAGE_BYTES}"
        )
    return await http.send(
        RequestSpec(
            "PUT",
            f"/playlists/{playlist_id}/images",
            body=RawBody(encoded, "image/jpeg"),
        ),
        Nil,
    )


class FollowPlaylistBuilder(Builder):
    def __init__(self, http, playlist_id: str):
        super().__init__(http)
        self._id = path_id(playlist_id, ResourceKind.PLAYLIST)
        self._body: Dict[str, Any] = {}

    def public(self, public: bool):
        """Whether the playlist shows up in the user's public profile."""
        self._body["public"] = public
        return self

    async def send(self) -> Nil:
        return await self._send(
            "PUT", f"/playlists/{self._id}/followers", Nil, body=self._body
        )
