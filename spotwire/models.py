"""
Response models for the Spotify Web API.

The models declare the commonly used fields of each object and keep
anything else the API sends (``extra="allow"``), so new upstream
fields never break deserialization. Wrapper models mirror the JSON
envelopes some endpoints use (``{"albums": [...]}`` and friends).
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class SpotifyModel(BaseModel):
    """Base for all response models."""

    model_config = ConfigDict(extra="allow")


class Nil(BaseModel):
    """Result of endpoints whose successful response has no meaningful body."""

    model_config = ConfigDict(extra="ignore")


# =============================================================================
# Shared objects
# =============================================================================


class Image(SpotifyModel):
    url: str
    height: Optional[int] = None
    width: Optional[int] = None


class Followers(SpotifyModel):
    href: Optional[str] = None
    total: int = 0


class Copyright(SpotifyModel):
    text: str
    type: Optional[str] = None


class Restrictions(SpotifyModel):
    reason: Optional[str] = None


class Page(SpotifyModel, Generic[T]):
    """Offset-paged list of items."""

    href: Optional[str] = None
    items: List[T] = Field(default_factory=list)
    limit: int = 0
    next: Optional[str] = None
    offset: int = 0
    previous: Optional[str] = None
    total: int = 0


class Cursors(SpotifyModel):
    after: Optional[str] = None
    before: Optional[str] = None


class CursorPage(SpotifyModel, Generic[T]):
    """Cursor-paged list of items."""

    href: Optional[str] = None
    items: List[T] = Field(default_factory=list)
    limit: int = 0
    next: Optional[str] = None
    cursors: Optional[Cursors] = None
    total: Optional[int] = None


# =============================================================================
# Users
# =============================================================================


class PublicUser(SpotifyModel):
    id: str
    display_name: Optional[str] = None
    external_urls: Dict[str, str] = Field(default_factory=dict)
    followers: Optional[Followers] = None
    images: List[Image] = Field(default_factory=list)
    type: str = "user"
    uri: Optional[str] = None


class User(PublicUser):
    """The current user's profile, including private fields when scoped."""

    country: Optional[str] = None
    email: Optional[str] = None
    product: Optional[str] = None
    explicit_content: Optional[Dict[str, Any]] = None


# =============================================================================
# Artists, albums, tracks
# =============================================================================


class SimplifiedArtist(SpotifyModel):
    id: Optional[str] = None
    name: str
    external_urls: Dict[str, str] = Field(default_factory=dict)
    type: str = "artist"
    uri: Optional[str] = None


class Artist(SimplifiedArtist):
    followers: Optional[Followers] = None
    genres: List[str] = Field(default_factory=list)
    images: List[Image] = Field(default_factory=list)
    popularity: Optional[int] = None


class SimplifiedTrack(SpotifyModel):
    id: Optional[str] = None
    name: str
    artists: List[SimplifiedArtist] = Field(default_factory=list)
    duration_ms: Optional[int] = None
    explicit: bool = False
    disc_number: Optional[int] = None
    track_number: Optional[int] = None
    is_local: bool = False
    is_playable: Optional[bool] = None
    preview_url: Optional[str] = None
    type: str = "track"
    uri: Optional[str] = None


class SimplifiedAlbum(SpotifyModel):
    id: str
    name: str
    album_type: Optional[str] = None
    total_tracks: Optional[int] = None
    artists: List[SimplifiedArtist] = Field(default_factory=list)
    images: List[Image] = Field(default_factory=list)
    release_date: Optional[str] = None
    release_date_precision: Optional[str] = None
    available_markets: List[str] = Field(default_factory=list)
    type: str = "album"
    uri: Optional[str] = None


class Album(SimplifiedAlbum):
    tracks: Optional[Page[SimplifiedTrack]] = None
    copyrights: List[Copyright] = Field(default_factory=list)
    genres: List[str] = Field(default_factory=list)
    label: Optional[str] = None
    popularity: Optional[int] = None


class Track(SimplifiedTrack):
    album: Optional[SimplifiedAlbum] = None
    popularity: Optional[int] = None
    external_ids: Dict[str, str] = Field(default_factory=dict)


class SavedAlbum(SpotifyModel):
    added_at: str
    album: Album


class SavedTrack(SpotifyModel):
    added_at: str
    track: Track


class TopTracks(SpotifyModel):
    tracks: List[Track]


class Albums(SpotifyModel):
    albums: List[Optional[Album]]


class Artists(SpotifyModel):
    artists: List[Optional[Artist]]


class Tracks(SpotifyModel):
    tracks: List[Optional[Track]]


class NewReleases(SpotifyModel):
    albums: Page[SimplifiedAlbum]


class FollowedArtists(SpotifyModel):
    artists: CursorPage[Artist]


# =============================================================================
# Shows, episodes, audiobooks, chapters
# =============================================================================


class SimplifiedShow(SpotifyModel):
    id: str
    name: str
    description: Optional[str] = None
    publisher: Optional[str] = None
    explicit: bool = False
    images: List[Image] = Field(default_factory=list)
    total_episodes: Optional[int] = None
    type: str = "show"
    uri: Optional[str] = None


class SimplifiedEpisode(SpotifyModel):
    id: str
    name: str
    description: Optional[str] = None
    duration_ms: Optional[int] = None
    explicit: bool = False
    images: List[Image] = Field(default_factory=list)
    release_date: Optional[str] = None
    resume_point: Optional[Dict[str, Any]] = None
    type: str = "episode"
    uri: Optional[str] = None


class Episode(SimplifiedEpisode):
    show: Optional[SimplifiedShow] = None


class Show(SimplifiedShow):
    episodes: Optional[Page[Optional[SimplifiedEpisode]]] = None


class SavedShow(SpotifyModel):
    added_at: str
    show: SimplifiedShow


class SavedEpisode(SpotifyModel):
    added_at: str
    episode: Episode


class Shows(SpotifyModel):
    shows: List[Optional[SimplifiedShow]]


class Episodes(SpotifyModel):
    episodes: List[Optional[Episode]]


class SimplifiedAudiobook(SpotifyModel):
    id: str
    name: str
    authors: List[Dict[str, Any]] = Field(default_factory=list)
    narrators: List[Dict[str, Any]] = Field(default_factory=list)
    description: Optional[str] = None
    publisher: Optional[str] = None
    images: List[Image] = Field(default_factory=list)
    total_chapters: Optional[int] = None
    type: str = "audiobook"
    uri: Optional[str] = None


class SimplifiedChapter(SpotifyModel):
    id: str
    name: str
    chapter_number: Optional[int] = None
    duration_ms: Optional[int] = None
    images: List[Image] = Field(default_factory=list)
    type: str = "chapter"
    uri: Optional[str] = None


class Chapter(SimplifiedChapter):
    audiobook: Optional[SimplifiedAudiobook] = None


class Audiobook(SimplifiedAudiobook):
    chapters: Optional[Page[SimplifiedChapter]] = None


class SavedAudiobook(SimplifiedAudiobook):
    pass


class Audiobooks(SpotifyModel):
    audiobooks: List[Optional[Audiobook]]


class Chapters(SpotifyModel):
    chapters: List[Optional[Chapter]]


# =============================================================================
# Playlists and categories
# =============================================================================


class PlaylistTracksRef(SpotifyModel):
    href: Optional[str] = None
    total: int = 0


class PlaylistItem(SpotifyModel):
    """A playlist entry; ``track`` holds a track or an episode object."""

    added_at: Optional[str] = None
    added_by: Optional[PublicUser] = None
    is_local: bool = False
    track: Optional[Dict[str, Any]] = None


class SimplifiedPlaylist(SpotifyModel):
    id: str
    name: str
    description: Optional[str] = None
    collaborative: bool = False
    public: Optional[bool] = None
    images: Optional[List[Image]] = None
    owner: Optional[PublicUser] = None
    snapshot_id: Optional[str] = None
    tracks: Optional[PlaylistTracksRef] = None
    type: str = "playlist"
    uri: Optional[str] = None


class Playlist(SimplifiedPlaylist):
    followers: Optional[Followers] = None
    tracks: Optional[Page[PlaylistItem]] = None


class FeaturedPlaylists(SpotifyModel):
    message: Optional[str] = None
    playlists: Page[Optional[SimplifiedPlaylist]]


class SnapshotId(SpotifyModel):
    snapshot_id: str


class Category(SpotifyModel):
    id: str
    name: str
    href: Optional[str] = None
    icons: List[Image] = Field(default_factory=list)


class Categories(SpotifyModel):
    categories: Page[Category]


# =============================================================================
# Search, recommendations, audio
# =============================================================================


class SearchResults(SpotifyModel):
    tracks: Optional[Page[Optional[Track]]] = None
    artists: Optional[Page[Optional[Artist]]] = None
    albums: Optional[Page[Optional[SimplifiedAlbum]]] = None
    playlists: Optional[Page[Optional[SimplifiedPlaylist]]] = None
    shows: Optional[Page[Optional[SimplifiedShow]]] = None
    episodes: Optional[Page[Optional[SimplifiedEpisode]]] = None
    audiobooks: Optional[Page[Optional[SimplifiedAudiobook]]] = None


class RecommendationSeed(SpotifyModel):
    id: str
    type: str
    href: Optional[str] = None
    initialPoolSize: Optional[int] = None
    afterFilteringSize: Optional[int] = None
    afterRelinkingSize: Optional[int] = None


class Recommendations(SpotifyModel):
    seeds: List[RecommendationSeed] = Field(default_factory=list)
    tracks: List[Track] = Field(default_factory=list)


class Genres(SpotifyModel):
    genres: List[str]


class Markets(SpotifyModel):
    markets: List[str]


class AudioFeatures(SpotifyModel):
    id: str
    acousticness: Optional[float] = None
    danceability: Optional[float] = None
    duration_ms: Optional[int] = None
    energy: Optional[float] = None
    instrumentalness: Optional[float] = None
    key: Optional[int] = None
    liveness: Optional[float] = None
    loudness: Optional[float] = None
    mode: Optional[int] = None
    speechiness: Optional[float] = None
    tempo: Optional[float] = None
    time_signature: Optional[int] = None
    valence: Optional[float] = None
    uri: Optional[str] = None


class AudioFeaturesList(SpotifyModel):
    audio_features: List[Optional[AudioFeatures]]


class AudioAnalysis(SpotifyModel):
    meta: Optional[Dict[str, Any]] = None
    track: Optional[Dict[str, Any]] = None
    bars: List[Dict[str, Any]] = Field(default_factory=list)
    beats: List[Dict[str, Any]] = Field(default_factory=list)
    sections: List[Dict[str, Any]] = Field(default_factory=list)
    segments: List[Dict[str, Any]] = Field(default_factory=list)
    tatums: List[Dict[str, Any]] = Field(default_factory=list)


# =============================================================================
# Player
# =============================================================================


class Device(SpotifyModel):
    id: Optional[str] = None
    name: str
    type: str
    is_active: bool = False
    is_private_session: bool = False
    is_restricted: bool = False
    volume_percent: Optional[int] = None
    supports_volume: Optional[bool] = None


class Devices(SpotifyModel):
    devices: List[Device]


class PlaybackState(SpotifyModel):
    device: Optional[Device] = None
    repeat_state: Optional[str] = None
    shuffle_state: Optional[bool] = None
    context: Optional[Dict[str, Any]] = None
    timestamp: Optional[int] = None
    progress_ms: Optional[int] = None
    is_playing: bool = False
    item: Optional[Dict[str, Any]] = None
    currently_playing_type: Optional[str] = None


class PlayHistory(SpotifyModel):
    track: Track
    played_at: str
    context: Optional[Dict[str, Any]] = None


class Queue(SpotifyModel):
    currently_playing: Optional[Dict[str, Any]] = None
    queue: List[Dict[str, Any]] = Field(default_factory=list)
