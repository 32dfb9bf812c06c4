"""
Spotify client facade.

SpotifyClient holds a grant flow until it has been authenticated. It
then hands out an authenticated client, so an unauthenticated client
has no endpoint methods at all:

    SpotifyClient --authenticate()--> AuthenticatedClient (catalog only)
                                   \\-> UserClient (catalog + /me endpoints)

Which one is returned depends on the flow: client credentials tokens
are not tied to a user and only reach catalog endpoints.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Union

from .auth import SpotifyAuthManager, TokenInfo
from .config import ClientConfig
from .enums import ItemType, RepeatMode, ResourceKind, UserItemType
from .exceptions import SpotifyRefreshUnavailableError
from .flows import Authorisation, ClientCredentialsFlow, GrantFlow
from .http_client import SpotifyHTTPClient
from .models import Genres, Image, Markets, Nil, PublicUser, Queue, User
from .params import RequestSpec
from .token_store import TokenStore
from .transport import HTTPTransport, HttpxTransport
from .endpoints import album as _album
from .endpoints import artist as _artist
from .endpoints import audiobook as _audiobook
from .endpoints import category as _category
from .endpoints import library as _library
from .endpoints import player as _player
from .endpoints import playlist as _playlist
from .endpoints import search as _search
from .endpoints import show as _show
from .endpoints import track as _track
from .endpoints import user as _user

logger = logging.getLogger(__name__)


class SpotifyClient:
    """
    Entry point: a flow that has not been authenticated yet.

    Example (authorization code with PKCE):
        client = SpotifyClient(credentials.pkce_flow([Scope.USER_READ_PRIVATE]))
        authorisation = client.get_authorisation()
        # send the user to authorisation.url, receive code and state
        user_client = await client.authenticate(authorisation, code, state)

    Example (client credentials):
        client = SpotifyClient(credentials.client_credentials_flow())
        catalog = await client.authenticate()
        album = await catalog.album("4aawyAB9vmqN3uQ7FjRGTy").get()
    """

    def __init__(
        self,
        flow: GrantFlow,
        transport: Optional[HTTPTransport] = None,
        config: Optional[ClientConfig] = None,
    ):
        self._flow = flow
        self._config = config or ClientConfig()
        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport(timeout=self._config.timeout)
        self._auth_manager = SpotifyAuthManager(self._transport, self._config)

    @property
    def flow(self) -> GrantFlow:
        return self._flow

    def get_authorisation(self, state: Optional[str] = None) -> Authorisation:
        """
        Build the URL the user must visit to grant access.

        Raises:
            TypeError: For client credentials, which have no user step.
        """
        if isinstance(self._flow, ClientCredentialsFlow):
            raise TypeError("Client credentials flow has no authorization step")
        authorisation = self._flow.authorisation(self._auth_manager, state)
        logger.debug("Generated authorization URL for %s", type(self._flow).__name__)
        return authorisation

    async def authenticate(self, *args) -> "AuthenticatedClient":
        """
        Run the flow's token exchange and return the authenticated client.

        Arguments are those of GrantFlow.authenticate: none for client
        credentials, or ``(authorisation, code, state)`` for the
        authorization code flows.
        """
        token_info = await self._flow.authenticate(self._auth_manager, *args)
        return self._wrap(token_info)

    def _wrap(self, token_info: TokenInfo) -> "AuthenticatedClient":
        store = TokenStore(
            self._flow,
            self._auth_manager,
            token_info,
            refresh_margin=self._config.refresh_margin,
            auto_refresh=self._config.auto_refresh,
        )
        cls = UserClient if self._flow.user_authorised else AuthenticatedClient
        return cls(
            self._flow,
            store,
            self._transport,
            self._config,
            owns_transport=self._owns_transport,
        )

    @classmethod
    async def from_refresh_token(
        cls,
        flow: GrantFlow,
        refresh_token: str,
        transport: Optional[HTTPTransport] = None,
        config: Optional[ClientConfig] = None,
    ) -> "AuthenticatedClient":
        """
        Skip the interactive step by refreshing a stored refresh token.

        Raises:
            SpotifyRefreshUnavailableError: If the flow cannot refresh.
                No request is sent.
            SpotifyAuthError: If the refresh token is rejected.
        """
        if not flow.supports_refresh():
            raise SpotifyRefreshUnavailableError(
                f"{type(flow).__name__} tokens cannot be refreshed"
            )
        if not refresh_token:
            raise ValueError("refresh_token is required")

        client = cls(flow, transport, config)
        seed = TokenInfo(
            access_token="",
            token_type="Bearer",
            expires_at=0,
            refresh_token=refresh_token,
        )
        try:
            token_info = await client._auth_manager.refresh_token(flow, seed)
        except Exception:
            await client.aclose()
            raise
        return client._wrap(token_info)

    @classmethod
    def from_token(
        cls,
        flow: GrantFlow,
        token_info: TokenInfo,
        transport: Optional[HTTPTransport] = None,
        config: Optional[ClientConfig] = None,
    ) -> "AuthenticatedClient":
        """Wrap a previously obtained token without contacting Spotify."""
        return cls(flow, transport, config)._wrap(token_info)

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()


class AuthenticatedClient:
    """
    Client holding a token; exposes the catalog endpoints.

    Each method returns a request builder (finish it with ``get()``,
    ``send()`` or ``create()``) or, for endpoints without options, the
    result directly.
    """

    def __init__(
        self,
        flow: GrantFlow,
        token_store: TokenStore,
        transport: HTTPTransport,
        config: ClientConfig,
        owns_transport: bool = False,
    ):
        self._flow = flow
        self._token_store = token_store
        self._transport = transport
        self._owns_transport = owns_transport
        self._http = SpotifyHTTPClient(transport, token_store, config)

    # =========================================================================
    # Token
    # =========================================================================

    @property
    def flow(self) -> GrantFlow:
        return self._flow

    @property
    def token(self) -> TokenInfo:
        return self._token_store.token

    @property
    def access_token(self) -> str:
        return self._token_store.access_token

    @property
    def refresh_token(self) -> Optional[str]:
        return self._token_store.refresh_token

    async def request_refresh_token(self) -> TokenInfo:
        """Force a token refresh now."""
        return await self._token_store.refresh()

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    # =========================================================================
    # Albums and artists
    # =========================================================================

    def album(self, album_id: str) -> _album.AlbumBuilder:
        return _album.AlbumBuilder(self._http, album_id)

    def albums(self, album_ids: Iterable[str]) -> _album.AlbumsBuilder:
        return _album.AlbumsBuilder(self._http, album_ids)

    def album_tracks(self, album_id: str) -> _album.AlbumTracksBuilder:
        return _album.AlbumTracksBuilder(self._http, album_id)

    def new_releases(self) -> _album.NewReleasesBuilder:
        return _album.NewReleasesBuilder(self._http)

    def artist(self, artist_id: str) -> _artist.ArtistBuilder:
        return _artist.ArtistBuilder(self._http, artist_id)

    def get_artists(self, artist_ids: Iterable[str]) -> _artist.ArtistsBuilder:
        return _artist.ArtistsBuilder(self._http, artist_ids)

    # =========================================================================
    # Audiobooks, shows and episodes
    # =========================================================================

    def audiobook(self, audiobook_id: str) -> _audiobook.AudiobookBuilder:
        return _audiobook.AudiobookBuilder(self._http, audiobook_id)

    def audiobooks(self, audiobook_ids: Iterable[str]) -> _audiobook.AudiobooksBuilder:
        return _audiobook.AudiobooksBuilder(self._http, audiobook_ids)

    def audiobook_chapters(self, audiobook_id: str) -> _audiobook.AudiobookChaptersBuilder:
        return _audiobook.AudiobookChaptersBuilder(self._http, audiobook_id)

    def chapter(self, chapter_id: str) -> _audiobook.ChapterBuilder:
        return _audiobook.ChapterBuilder(self._http, chapter_id)

    def chapters(self, chapter_ids: Iterable[str]) -> _audiobook.ChaptersBuilder:
        return _audiobook.ChaptersBuilder(self._http, chapter_ids)

    def show(self, show_id: str) -> _show.ShowBuilder:
        return _show.ShowBuilder(self._http, show_id)

    def shows(self, show_ids: Iterable[str]) -> _show.ShowsBuilder:
        return _show.ShowsBuilder(self._http, show_ids)

    def show_episodes(self, show_id: str) -> _show.ShowEpisodesBuilder:
        return _show.ShowEpisodesBuilder(self._http, show_id)

    def episode(self, episode_id: str) -> _show.EpisodeBuilder:
        return _show.EpisodeBuilder(self._http, episode_id)

    def episodes(self, episode_ids: Iterable[str]) -> _show.EpisodesBuilder:
        return _show.EpisodesBuilder(self._http, episode_ids)

    # =========================================================================
    # Browse
    # =========================================================================

    def browse_category(self, category_id: str) -> _category.BrowseCategoryBuilder:
        return _category.BrowseCategoryBuilder(self._http, category_id)

    def browse_categories(self) -> _category.BrowseCategoriesBuilder:
        return _category.BrowseCategoriesBuilder(self._http)

    def featured_playlists(self) -> _playlist.FeaturedPlaylistsBuilder:
        return _playlist.FeaturedPlaylistsBuilder(self._http)

    def category_playlists(self, category_id: str) -> _playlist.CategoryPlaylistsBuilder:
        return _playlist.CategoryPlaylistsBuilder(self._http, category_id)

    async def get_genre_seeds(self) -> List[str]:
        result = await self._http.send(
            RequestSpec("GET", "/recommendations/available-genre-seeds"), Genres
        )
        return result.genres

    async def get_available_markets(self) -> List[str]:
        result = await self._http.send(RequestSpec("GET", "/markets"), Markets)
        return result.markets

    # =========================================================================
    # Playlists
    # =========================================================================

    def playlist(self, playlist_id: str) -> _playlist.PlaylistBuilder:
        return _playlist.PlaylistBuilder(self._http, playlist_id)

    def change_playlist_details(
        self, playlist_id: str
    ) -> _playlist.ChangePlaylistDetailsBuilder:
        return _playlist.ChangePlaylistDetailsBuilder(self._http, playlist_id)

    def playlist_items(self, playlist_id: str) -> _playlist.PlaylistItemsBuilder:
        return _playlist.PlaylistItemsBuilder(self._http, playlist_id)

    def update_playlist_items(
        self, playlist_id: str, range_start: int, insert_before: int
    ) -> _playlist.UpdatePlaylistItemsBuilder:
        return _playlist.UpdatePlaylistItemsBuilder(
            self._http, playlist_id, range_start, insert_before
        )

    def add_items_to_playlist(
        self, playlist_id: str, uris: Iterable[str]
    ) -> _playlist.AddPlaylistItemsBuilder:
        return _playlist.AddPlaylistItemsBuilder(self._http, playlist_id, uris)

    def remove_playlist_items(
        self, playlist_id: str, uris: Iterable[str]
    ) -> _playlist.RemovePlaylistItemsBuilder:
        return _playlist.RemovePlaylistItemsBuilder(self._http, playlist_id, uris)

    def user_playlists(self, user_id: str) -> _playlist.UserPlaylistsBuilder:
        return _playlist.UserPlaylistsBuilder(self._http, user_id)

    def create_playlist(self, user_id: str, name: str) -> _playlist.CreatePlaylistBuilder:
        return _playlist.CreatePlaylistBuilder(self._http, user_id, name)

    async def get_playlist_image(self, playlist_id: str) -> List[Image]:
        return await _playlist.get_playlist_image(self._http, playlist_id)

    async def add_playlist_image(self, playlist_id: str, image: bytes) -> Nil:
        return await _playlist.add_playlist_image(self._http, playlist_id, image)

    # =========================================================================
    # Search, tracks and recommendations
    # =========================================================================

    def search(self, query: str, item_types: Iterable[ItemType]) -> _search.SearchBuilder:
        return _search.SearchBuilder(self._http, query, item_types)

    def track(self, track_id: str) -> _track.TrackBuilder:
        return _track.TrackBuilder(self._http, track_id)

    def tracks(self, track_ids: Iterable[str]) -> _track.TracksBuilder:
        return _track.TracksBuilder(self._http, track_ids)

    async def get_track_audio_features(self, track_id: str):
        return await _track.get_audio_features(self._http, track_id)

    async def get_tracks_audio_features(self, track_ids: Iterable[str]):
        return await _track.get_several_audio_features(self._http, track_ids)

    async def get_track_audio_analysis(self, track_id: str):
        return await _track.get_audio_analysis(self._http, track_id)

    def recommendations(
        self,
        seed_artists: Sequence[str] = (),
        seed_genres: Sequence[str] = (),
        seed_tracks: Sequence[str] = (),
    ) -> _track.RecommendationsBuilder:
        return _track.RecommendationsBuilder(
            self._http, seed_artists, seed_genres, seed_tracks
        )

    # =========================================================================
    # Users
    # =========================================================================

    async def get_user(self, user_id: str) -> PublicUser:
        return await self._http.send(
            RequestSpec("GET", _user.user_path(user_id)), PublicUser
        )

    async def check_if_users_follow_playlist(
        self, playlist_id: str, user_ids: Iterable[str]
    ) -> List[bool]:
        """Up to five users, answered in request order."""
        return await self._http.send(
            RequestSpec(
                "GET",
                _user.playlist_followers_path(playlist_id, "contains"),
                _user.check_users_follow_query(user_ids),
            ),
            List[bool],
        )


class UserClient(AuthenticatedClient):
    """Client authorised by a user; adds the /me endpoints."""

    # =========================================================================
    # Profile and library
    # =========================================================================

    async def get_current_user_profile(self) -> User:
        return await self._http.send(RequestSpec("GET", "/me"), User)

    def current_user_playlists(self) -> _playlist.CurrentUserPlaylistsBuilder:
        return _playlist.CurrentUserPlaylistsBuilder(self._http)

    def user_top_items(self, item_type: UserItemType) -> _user.UserTopItemsBuilder:
        return _user.UserTopItemsBuilder(self._http, item_type)

    def saved_albums(self) -> _album.SavedAlbumsBuilder:
        return _album.SavedAlbumsBuilder(self._http)

    def saved_audiobooks(self) -> _audiobook.SavedAudiobooksBuilder:
        return _audiobook.SavedAudiobooksBuilder(self._http)

    def saved_episodes(self) -> _show.SavedEpisodesBuilder:
        return _show.SavedEpisodesBuilder(self._http)

    def saved_shows(self) -> _show.SavedShowsBuilder:
        return _show.SavedShowsBuilder(self._http)

    def saved_tracks(self) -> _track.SavedTracksBuilder:
        return _track.SavedTracksBuilder(self._http)

    def library(self, kind: ResourceKind, ids: Iterable[str]) -> _library.LibraryBuilder:
        """
        Save, remove or check items of one kind in the user's library.

        Example:
            await client.library(ResourceKind.TRACK, track_ids).save()
        """
        return _library.LibraryBuilder(self._http, kind, ids)

    async def save_albums(self, album_ids: Iterable[str]) -> Nil:
        return await self.library(ResourceKind.ALBUM, album_ids).save()

    async def remove_saved_albums(self, album_ids: Iterable[str]) -> Nil:
        return await self.library(ResourceKind.ALBUM, album_ids).remove()

    async def check_saved_albums(self, album_ids: Iterable[str]) -> List[bool]:
        return await self.library(ResourceKind.ALBUM, album_ids).check()

    async def save_tracks(self, track_ids: Iterable[str]) -> Nil:
        return await self.library(ResourceKind.TRACK, track_ids).save()

    async def remove_saved_tracks(self, track_ids: Iterable[str]) -> Nil:
        return await self.library(ResourceKind.TRACK, track_ids).remove()

    async def check_saved_tracks(self, track_ids: Iterable[str]) -> List[bool]:
        return await self.library(ResourceKind.TRACK, track_ids).check()

    async def save_shows(self, show_ids: Iterable[str]) -> Nil:
        return await self.library(ResourceKind.SHOW, show_ids).save()

    async def remove_saved_shows(self, show_ids: Iterable[str]) -> Nil:
        return await self.library(ResourceKind.SHOW, show_ids).remove()

    async def check_saved_shows(self, show_ids: Iterable[str]) -> List[bool]:
        return await self.library(ResourceKind.SHOW, show_ids).check()

    async def save_episodes(self, episode_ids: Iterable[str]) -> Nil:
        return await self.library(ResourceKind.EPISODE, episode_ids).save()

    async def remove_saved_episodes(self, episode_ids: Iterable[str]) -> Nil:
        return await self.library(ResourceKind.EPISODE, episode_ids).remove()

    async def check_saved_episodes(self, episode_ids: Iterable[str]) -> List[bool]:
        return await self.library(ResourceKind.EPISODE, episode_ids).check()

    async def save_audiobooks(self, audiobook_ids: Iterable[str]) -> Nil:
        return await self.library(ResourceKind.AUDIOBOOK, audiobook_ids).save()

    async def remove_saved_audiobooks(self, audiobook_ids: Iterable[str]) -> Nil:
        return await self.library(ResourceKind.AUDIOBOOK, audiobook_ids).remove()

    async def check_saved_audiobooks(self, audiobook_ids: Iterable[str]) -> List[bool]:
        return await self.library(ResourceKind.AUDIOBOOK, audiobook_ids).check()

    # =========================================================================
    # Follow
    # =========================================================================

    def follow_playlist(self, playlist_id: str) -> _playlist.FollowPlaylistBuilder:
        return _playlist.FollowPlaylistBuilder(self._http, playlist_id)

    async def unfollow_playlist(self, playlist_id: str) -> Nil:
        return await self._http.send(
            RequestSpec("DELETE", _user.playlist_followers_path(playlist_id)), Nil
        )

    def followed_artists(self) -> _user.FollowedArtistsBuilder:
        return _user.FollowedArtistsBuilder(self._http)

    def follow_artists(self, artist_ids: Iterable[str]) -> _user.FollowBuilder:
        """Finish with ``follow()``, ``unfollow()`` or ``check()``."""
        return _user.FollowBuilder(self._http, "artist", artist_ids)

    def follow_users(self, user_ids: Iterable[str]) -> _user.FollowBuilder:
        """Finish with ``follow()``, ``unfollow()`` or ``check()``."""
        return _user.FollowBuilder(self._http, "user", user_ids)

    # =========================================================================
    # Player
    # =========================================================================

    def playback_state(self) -> _player.PlaybackStateBuilder:
        return _player.PlaybackStateBuilder(self._http)

    def currently_playing(self) -> _player.PlaybackStateBuilder:
        return _player.PlaybackStateBuilder(self._http, currently_playing=True)

    def transfer_playback(self, device_id: str) -> _player.TransferPlaybackBuilder:
        return _player.TransferPlaybackBuilder(self._http, device_id)

    async def get_available_devices(self):
        return await _player.get_devices(self._http)

    def start_playback(self) -> _player.StartPlaybackBuilder:
        return _player.StartPlaybackBuilder(self._http)

    async def pause_playback(self, device_id: Optional[str] = None) -> Nil:
        return await _player.pause(self._http, device_id)

    async def skip_to_next(self, device_id: Optional[str] = None) -> Nil:
        return await _player.skip_to_next(self._http, device_id)

    async def skip_to_previous(self, device_id: Optional[str] = None) -> Nil:
        return await _player.skip_to_previous(self._http, device_id)

    def seek_to_position(self, position_ms: int) -> _player.SeekToPositionBuilder:
        return _player.SeekToPositionBuilder(self._http, position_ms)

    def set_repeat_mode(self, state: Union[RepeatMode, str]) -> _player.SetRepeatModeBuilder:
        return _player.SetRepeatModeBuilder(self._http, state)

    def set_playback_volume(self, volume: int) -> _player.SetPlaybackVolumeBuilder:
        """Volume percent, clamped to [0, 100]."""
        return _player.SetPlaybackVolumeBuilder(self._http, volume)

    def toggle_shuffle(self, state: bool) -> _player.ToggleShuffleBuilder:
        return _player.ToggleShuffleBuilder(self._http, state)

    def recently_played_tracks(self) -> _player.RecentlyPlayedTracksBuilder:
        return _player.RecentlyPlayedTracksBuilder(self._http)

    async def get_user_queue(self) -> Queue:
        return await _player.get_queue(self._http)

    def add_item_to_queue(self, uri: str) -> _player.AddItemToQueueBuilder:
        return _player.AddItemToQueueBuilder(self._http, uri)
