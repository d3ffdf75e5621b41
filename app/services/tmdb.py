"""Endpoint map for The Movie Database (TMDB) v3 API."""

from __future__ import annotations

from typing import Any

from ..config import Settings
from ..models import EntityKind
from .fetcher import CatalogFetcher, FetchOutcome

_TMDB_SEGMENT: dict[str, str] = {"movie": "movie", "actor": "person"}


class TMDBClient:
    """Translate discovery intents into TMDB requests.

    All methods return the raw :data:`FetchOutcome`; interpreting the payload
    is left to the controllers.
    """

    def __init__(self, settings: Settings, fetcher: CatalogFetcher):
        self._settings = settings
        self._fetcher = fetcher

    async def popular(self, kind: EntityKind) -> FetchOutcome:
        if kind == "movie":
            return await self._get(
                "/discover/movie", {"sort_by": "popularity.desc"}
            )
        return await self._get("/person/popular")

    async def search(self, kind: EntityKind, query: str) -> FetchOutcome:
        params = {"query": query, "include_adult": "false", "page": 1}
        return await self._get(f"/search/{self._segment(kind)}", params)

    async def discover_by_genre(self, genre_filter: str) -> FetchOutcome:
        params = {"with_genres": genre_filter, "sort_by": "popularity.desc"}
        return await self._get("/discover/movie", params)

    async def trending(self, kind: EntityKind) -> FetchOutcome:
        return await self._get(f"/trending/{self._segment(kind)}/day")

    async def details(self, kind: EntityKind, entity_id: int) -> FetchOutcome:
        return await self._get(f"/{self._segment(kind)}/{int(entity_id)}")

    async def _get(
        self, path: str, params: dict[str, Any] | None = None
    ) -> FetchOutcome:
        resolved: dict[str, Any] = {"language": self._settings.tmdb_language}
        if params:
            resolved.update(params)
        return await self._fetcher.request(path, params=resolved)

    @staticmethod
    def _segment(kind: EntityKind) -> str:
        try:
            return _TMDB_SEGMENT[kind]
        except KeyError:
            raise ValueError(f"Unsupported entity kind: {kind!r}") from None
