"""Save, remove and check items in the current user's library."""

from typing import Dict, Iterable, List, NamedTuple

from ..enums import ResourceKind
from ..models import Nil
from ..params import RequestSpec, body_list, query_list
from ..url_parser import normalize_id


class _Collection(NamedTuple):
    path: str
    max_ids: int
    # Audiobooks take their IDs in the query string, not the body.
    ids_in_query: bool = False


COLLECTIONS: Dict[ResourceKind, _Collection] = {
    ResourceKind.ALBUM: _Collection("/me/albums", 20),
    ResourceKind.AUDIOBOOK: _Collection("/me/audiobooks", 50, ids_in_query=True),
    ResourceKind.EPISODE: _Collection("/me/episodes", 50),
    ResourceKind.SHOW: _Collection("/me/shows", 50),
    ResourceKind.TRACK: _Collection("/me/tracks", 50),
}


class LibraryBuilder:
    """
    Library operations for one resource kind.

    Example:
        await client.library(ResourceKind.TRACK, ["4iV5W9uYEdYUVa79Axb7Rh"]).save()
    """

    def __init__(self, http, kind: ResourceKind, ids: Iterable[str]):
        kind = ResourceKind(kind)
        if kind not in COLLECTIONS:
            raise ValueError(f"{kind} items cannot be saved to the library")
        self._http = http
        self._collection = COLLECTIONS[kind]
        self._ids = [normalize_id(i, kind) for i in ids]
        query_list(self._ids, self._collection.max_ids)

    def _write_spec(self, method: str) -> RequestSpec:
        if self._collection.ids_in_query:
            return RequestSpec(
                method, self._collection.path, {"ids": query_list(self._ids)}
            )
        return RequestSpec(
            method, self._collection.path, body=body_list("ids", self._ids)
        )

    async def save(self) -> Nil:
        return await self._http.send(self._write_spec("PUT"), Nil)

    async def remove(self) -> Nil:
        return await self._http.send(self._write_spec("DELETE"), Nil)

    async def check(self) -> List[bool]:
        """Whether each item is saved, in request order."""
        spec = RequestSpec(
            "GET", f"{self._collection.path}/contains", {"ids": query_list(self._ids)}
        )
        return await self._http.send(spec, List[bool])
