"""Audiobook and chapter endpoints."""

from typing import Iterable, List, Optional

from ..enums import ResourceKind
from ..models import (
    Audiobook,
    Audiobooks,
    Chapter,
    Chapters,
    Page,
    SavedAudiobook,
    SimplifiedChapter,
)
from ..params import query_list
from ..url_parser import normalize_id, path_id
from .base import Builder, MarketMixin, PagingMixin

MAX_IDS = 50


class AudiobookBuilder(MarketMixin, Builder):
    def __init__(self, http, audiobook_id: str):
        super().__init__(http)
        self._id = path_id(audiobook_id, ResourceKind.AUDIOBOOK)

    async def get(self) -> Audiobook:
        return await self._send("GET", f"/audiobooks/{self._id}", Audiobook)


class AudiobooksBuilder(MarketMixin, Builder):
    def __init__(self, http, audiobook_ids: Iterable[str]):
        super().__init__(http)
        ids = [normalize_id(i, ResourceKind.AUDIOBOOK) for i in audiobook_ids]
        self._param("ids", query_list(ids, MAX_IDS))

    async def get(self) -> List[Optional[Audiobook]]:
        result = await self._send("GET", "/audiobooks", Audiobooks)
        return result.audiobooks


class AudiobookChaptersBuilder(MarketMixin, PagingMixin, Builder):
    def __init__(self, http, audiobook_id: str):
        super().__init__(http)
        self._id = path_id(audiobook_id, ResourceKind.AUDIOBOOK)

    async def get(self) -> Page[SimplifiedChapter]:
        return await self._send(
            "GET", f"/audiobooks/{self._id}/chapters", Page[SimplifiedChapter]
        )


class ChapterBuilder(MarketMixin, Builder):
    def __init__(self, http, chapter_id: str):
        super().__init__(http)
        self._id = path_id(chapter_id, ResourceKind.CHAPTER)

    async def get(self) -> Chapter:
        return await self._send("GET", f"/chapters/{self._id}", Chapter)


class ChaptersBuilder(MarketMixin, Builder):
    def __init__(self, http, chapter_ids: Iterable[str]):
        super().__init__(http)
        ids = [normalize_id(i, ResourceKind.CHAPTER) for i in chapter_ids]
        self._param("ids", query_list(ids, MAX_IDS))

    async def get(self) -> List[Optional[Chapter]]:
        result = await self._send("GET", "/chapters", Chapters)
        return result.chapters


class SavedAudiobooksBuilder(PagingMixin, Builder):
    async def get(self) -> Page[SavedAudiobook]:
        return await self._send("GET", "/me/audiobooks", Page[SavedAudiobook])
