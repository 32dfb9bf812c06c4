"""Track, audio analysis and recommendation endpoints."""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..enums import ResourceKind
from ..models import (
    AudioAnalysis,
    AudioFeatures,
    AudioFeaturesList,
    Page,
    Recommendations,
    SavedTrack,
    Track,
    Tracks,
)
from ..params import RecommendationLimit, RequestSpec, query_list
from ..url_parser import normalize_id, path_id
from .base import Builder, MarketMixin, PagingMixin

MAX_TRACK_IDS = 50
MAX_AUDIO_FEATURE_IDS = 100
MAX_SEEDS = 5

# Tunable track attributes and the range the API accepts for each.
# None means the attribute is unbounded.
FEATURE_RANGES: Dict[str, Optional[Tuple[Optional[float], Optional[float]]]] = {
    "acousticness": (0.0, 1.0),
    "danceability": (0.0, 1.0),
    "duration_ms": (0, None),
    "energy": (0.0, 1.0),
    "instrumentalness": (0.0, 1.0),
    "key": (0, 11),
    "liveness": (0.0, 1.0),
    "loudness": None,
    "mode": (0, 1),
    "popularity": (0, 100),
    "speechiness": (0.0, 1.0),
    "tempo": (0.0, None),
    "time_signature": (0, 11),
    "valence": (0.0, 1.0),
}


def _clamp_feature(name: str, value: float) -> float:
    bounds = FEATURE_RANGES[name]
    if bounds is None:
        return value
    low, high = bounds
    if low is not None and value < low:
        value = low
    if high is not None and value > high:
        value = high
    return value


class TrackBuilder(MarketMixin, Builder):
    def __init__(self, http, track_id: str):
        super().__init__(http)
        self._id = path_id(track_id, ResourceKind.TRACK)

    async def get(self) -> Track:
        return await self._send("GET", f"/tracks/{self._id}", Track)


class TracksBuilder(MarketMixin, Builder):
    def __init__(self, http, track_ids: Iterable[str]):
        super().__init__(http)
        ids = [normalize_id(i, ResourceKind.TRACK) for i in track_ids]
        self._param("ids", query_list(ids, MAX_TRACK_IDS))

    async def get(self) -> List[Optional[Track]]:
        result = await self._send("GET", "/tracks", Tracks)
        return result.tracks


class SavedTracksBuilder(MarketMixin, PagingMixin, Builder):
    async def get(self) -> Page[SavedTrack]:
        return await self._send("GET", "/me/tracks", Page[SavedTrack])


class RecommendationsBuilder(MarketMixin, Builder):
    """
    Recommendations generated from up to five seeds.

    Seeds may mix artists, genres and tracks. Tunable attributes are
    set with ``feature()``; values outside an attribute's range are
    clamped to it.

    Example:
        recs = await client.recommendations(seed_genres=["ambient"]) \\
            .feature("energy", max=0.4).limit(20).get()
    """

    def __init__(
        self,
        http,
        seed_artists: Sequence[str] = (),
        seed_genres: Sequence[str] = (),
        seed_tracks: Sequence[str] = (),
    ):
        super().__init__(http)
        seed_artists, seed_genres, seed_tracks = (
            [s] if isinstance(s, str) else list(s)
            for s in (seed_artists, seed_genres, seed_tracks)
        )
        total = len(seed_artists) + len(seed_genres) + len(seed_tracks)
        if total == 0:
            raise ValueError("At least one seed is required")
        if total > MAX_SEEDS:
            raise ValueError(f"At most {MAX_SEEDS} seeds are allowed, got {total}")

        if seed_artists:
            ids = [normalize_id(i, ResourceKind.ARTIST) for i in seed_artists]
            self._param("seed_artists", query_list(ids))
        if seed_genres:
            self._param("seed_genres", query_list(seed_genres))
        if seed_tracks:
            ids = [normalize_id(i, ResourceKind.TRACK) for i in seed_tracks]
            self._param("seed_tracks", query_list(ids))

    def limit(self, limit: int):
        """Number of tracks, clamped to [1, 100]."""
        return self._param("limit", RecommendationLimit(limit))

    def feature(
        self,
        name: str,
        min: Optional[float] = None,
        max: Optional[float] = None,
        target: Optional[float] = None,
    ):
        """
        Tune a track attribute.

        Raises:
            ValueError: For an unknown attribute, or when no bound or
                target is given.
        """
        if name not in FEATURE_RANGES:
            raise ValueError(f"Unknown tunable attribute: {name}")
        if min is None and max is None and target is None:
            raise ValueError("Give at least one of min, max or target")
        for prefix, value in (("min", min), ("max", max), ("target", target)):
            if value is not None:
                self._param(f"{prefix}_{name}", _clamp_feature(name, value))
        return self

    async def get(self) -> Recommendations:
        return await self._send("GET", "/recommendations", Recommendations)


async def get_audio_features(http, track_id: str) -> AudioFeatures:
    track_id = path_id(track_id, ResourceKind.TRACK)
    return await http.send(
        RequestSpec("GET", f"/audio-features/{track_id}"), AudioFeatures
    )


async def get_several_audio_features(
    http, track_ids: Iterable[str]
) -> List[Optional[AudioFeatures]]:
    ids = [normalize_id(i, ResourceKind.TRACK) for i in track_ids]
    result = await http.send(
        RequestSpec(
            "GET", "/audio-features",
            {"ids": query_list(ids, MAX_AUDIO_FEATURE_IDS)},
        ),
        AudioFeaturesList,
    )
    return result.audio_features


async def get_audio_analysis(http, track_id: str) -> AudioAnalysis:
    track_id = path_id(track_id, ResourceKind.TRACK)
    return await http.send(
        RequestSpec("GET", f"/audio-analysis/{track_id}"), AudioAnalysis
    )
