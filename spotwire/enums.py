"""
Enums for OAuth scopes and endpoint parameter values.

Single source of truth for string constants sent to the Web API.
"""

from enum import StrEnum


class Scope(StrEnum):
    """OAuth scopes understood by the Spotify accounts service."""
    UGC_IMAGE_UPLOAD = "ugc-image-upload"
    USER_READ_PLAYBACK_STATE = "user-read-playback-state"
    USER_MODIFY_PLAYBACK_STATE = "user-modify-playback-state"
    USER_READ_CURRENTLY_PLAYING = "user-read-currently-playing"
    APP_REMOTE_CONTROL = "app-remote-control"
    STREAMING = "streaming"
    PLAYLIST_READ_PRIVATE = "playlist-read-private"
    PLAYLIST_READ_COLLABORATIVE = "playlist-read-collaborative"
    PLAYLIST_MODIFY_PRIVATE = "playlist-modify-private"
    PLAYLIST_MODIFY_PUBLIC = "playlist-modify-public"
    USER_FOLLOW_MODIFY = "user-follow-modify"
    USER_FOLLOW_READ = "user-follow-read"
    USER_READ_PLAYBACK_POSITION = "user-read-playback-position"
    USER_TOP_READ = "user-top-read"
    USER_READ_RECENTLY_PLAYED = "user-read-recently-played"
    USER_LIBRARY_MODIFY = "user-library-modify"
    USER_LIBRARY_READ = "user-library-read"
    USER_READ_EMAIL = "user-read-email"
    USER_READ_PRIVATE = "user-read-private"


class ItemType(StrEnum):
    """Item types accepted by the search endpoint."""
    ALBUM = "album"
    ARTIST = "artist"
    PLAYLIST = "playlist"
    TRACK = "track"
    SHOW = "show"
    EPISODE = "episode"
    AUDIOBOOK = "audiobook"


class IncludeGroup(StrEnum):
    """Album groups for an artist's album listing."""
    ALBUM = "album"
    SINGLE = "single"
    APPEARS_ON = "appears_on"
    COMPILATION = "compilation"


class UserItemType(StrEnum):
    """Item types for the current user's top items."""
    ARTISTS = "artists"
    TRACKS = "tracks"


class TimeRange(StrEnum):
    """Time frames over which top items are computed."""
    SHORT_TERM = "short_term"
    MEDIUM_TERM = "medium_term"
    LONG_TERM = "long_term"


class RepeatMode(StrEnum):
    """Player repeat modes."""
    TRACK = "track"
    CONTEXT = "context"
    OFF = "off"


class ResourceKind(StrEnum):
    """Resource kinds appearing in Spotify URIs and open.spotify.com URLs."""
    ALBUM = "album"
    ARTIST = "artist"
    AUDIOBOOK = "audiobook"
    CHAPTER = "chapter"
    EPISODE = "episode"
    PLAYLIST = "playlist"
    SHOW = "show"
    TRACK = "track"
    USER = "user"
