"""
Playback control endpoints.

Most of these act on the user's active device unless ``device_id`` is
given. The read endpoints answer 204 with no body while nothing is
playing, which is returned as None.
"""

from typing import Any, Dict, Iterable, List, Optional

from ..enums import RepeatMode
from ..models import CursorPage, Devices, Device, Nil, PlayHistory, PlaybackState, Queue
from ..params import Limit, Offset, RequestSpec, Volume, body_list
from .base import Builder, MarketMixin


class DeviceMixin:
    def device_id(self, device_id: str):
        """Target device; defaults to the currently active one."""
        return self._param("device_id", device_id)


class TransferPlaybackBuilder(Builder):
    def __init__(self, http, device_id: str):
        super().__init__(http)
        if not device_id:
            raise ValueError("A device ID is required")
        self._body: Dict[str, Any] = {"device_ids": [device_id]}

    def play(self, play: bool = True):
        """Start playing on the new device instead of keeping the current state."""
        self._body["play"] = play
        return self

    async def send(self) -> Nil:
        return await self._send("PUT", "/me/player", Nil, body=self._body)


class StartPlaybackBuilder(DeviceMixin, Builder):
    """
    Start a new context or resume the current one.

    With neither ``context_uri()`` nor ``uris()`` set, playback resumes
    where it was paused.
    """

    def __init__(self, http):
        super().__init__(http)
        self._body: Dict[str, Any] = {}

    def context_uri(self, uri: str):
        """Album, artist or playlist to play."""
        self._body.pop("uris", None)
        self._body["context_uri"] = uri
        return self

    def uris(self, uris: Iterable[str]):
        """Track or episode URIs to play."""
        self._body.pop("context_uri", None)
        self._body.update(body_list("uris", uris))
        return self

    def offset(self, position: Optional[int] = None, uri: Optional[str] = None):
        """Where to start in the context, by zero-based position or item URI."""
        if (position is None) == (uri is None):
            raise ValueError("Give exactly one of position or uri")
        if uri is not None:
            self._body["offset"] = {"uri": uri}
        else:
            self._body["offset"] = {"position": Offset(position)}
        return self

    def position_ms(self, position_ms: int):
        self._body["position_ms"] = Offset(position_ms)
        return self

    async def send(self) -> Nil:
        return await self._send(
            "PUT", "/me/player/play", Nil, body=self._body or None
        )


class SeekToPositionBuilder(DeviceMixin, Builder):
    def __init__(self, http, position_ms: int):
        super().__init__(http)
        self._param("position_ms", Offset(position_ms))

    async def send(self) -> Nil:
        return await self._send("PUT", "/me/player/seek", Nil)


class SetRepeatModeBuilder(DeviceMixin, Builder):
    def __init__(self, http, state: RepeatMode):
        super().__init__(http)
        self._param("state", RepeatMode(state))

    async def send(self) -> Nil:
        return await self._send("PUT", "/me/player/repeat", Nil)


class SetPlaybackVolumeBuilder(DeviceMixin, Builder):
    def __init__(self, http, volume: int):
        super().__init__(http)
        self._param("volume_percent", Volume(volume))

    async def send(self) -> Nil:
        return await self._send("PUT", "/me/player/volume", Nil)


class ToggleShuffleBuilder(DeviceMixin, Builder):
    def __init__(self, http, state: bool):
        super().__init__(http)
        self._param("state", bool(state))

    async def send(self) -> Nil:
        return await self._send("PUT", "/me/player/shuffle", Nil)


class RecentlyPlayedTracksBuilder(Builder):
    def limit(self, limit: int):
        return self._param("limit", Limit(limit))

    def after(self, timestamp_ms: int):
        """Items played after this Unix time in milliseconds."""
        if "before" in self._query:
            raise ValueError("after and before cannot both be set")
        return self._param("after", int(timestamp_ms))

    def before(self, timestamp_ms: int):
        """Items played before this Unix time in milliseconds."""
        if "after" in self._query:
            raise ValueError("after and before cannot both be set")
        return self._param("before", int(timestamp_ms))

    async def get(self) -> CursorPage[PlayHistory]:
        return await self._send(
            "GET", "/me/player/recently-played", CursorPage[PlayHistory]
        )


class AddItemToQueueBuilder(DeviceMixin, Builder):
    def __init__(self, http, uri: str):
        super().__init__(http)
        if not uri:
            raise ValueError("An item URI is required")
        self._param("uri", uri)

    async def send(self) -> Nil:
        return await self._send("POST", "/me/player/queue", Nil)


class PlaybackStateBuilder(MarketMixin, Builder):
    """Full playback state, or only the currently playing item."""

    def __init__(self, http, currently_playing: bool = False):
        super().__init__(http)
        self._path = (
            "/me/player/currently-playing" if currently_playing else "/me/player"
        )

    def additional_types(self, *types: str):
        """Item types besides ``track`` the caller understands, e.g. ``episode``."""
        return self._param("additional_types", ",".join(types))

    async def get(self) -> Optional[PlaybackState]:
        return await self._send("GET", self._path, PlaybackState, allow_empty=True)


async def get_devices(http) -> List[Device]:
    result = await http.send(RequestSpec("GET", "/me/player/devices"), Devices)
    return result.devices


async def get_queue(http) -> Queue:
    return await http.send(RequestSpec("GET", "/me/player/queue"), Queue)


async def _control(http, method: str, path: str, device_id: Optional[str]) -> Nil:
    query = {"device_id": device_id} if device_id else {}
    return await http.send(RequestSpec(method, path, query), Nil)


async def pause(http, device_id: Optional[str] = None) -> Nil:
    return await _control(http, "PUT", "/me/player/pause", device_id)


async def skip_to_next(http, device_id: Optional[str] = None) -> Nil:
    return await _control(http, "POST", "/me/player/next", device_id)


async def skip_to_previous(http, device_id: Optional[str] = None) -> Nil:
    return await _control(http, "POST", "/me/player/previous", device_id)
