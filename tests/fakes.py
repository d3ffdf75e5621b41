"""Test doubles for the catalog and the summary generator."""

from __future__ import annotations

import asyncio
from typing import Any

from app.config import Settings
from app.errors import GenerationError, HttpError
from app.services.fetcher import FetchFailure, FetchOutcome, FetchSuccess


def build_settings(**overrides: Any) -> Settings:
    """Return a settings object with defaults suitable for tests."""

    base: dict[str, Any] = {"TMDB_READ_ACCESS_TOKEN": "test-token"}
    base.update(overrides)
    return Settings(_env_file=None, **base)  # type: ignore[arg-type]


def results(*records: dict[str, Any]) -> FetchSuccess:
    return FetchSuccess({"results": list(records)})


class ScriptedCatalog:
    """Catalog stand-in whose responses are released by the test.

    Each call records ``(method, args)`` and waits on a future the test
    resolves with :meth:`respond`, which makes out-of-order completion easy to
    arrange.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._waiters: list[asyncio.Future[FetchOutcome]] = []
        self.trending_outcome: FetchOutcome = results()

    async def _wait(self, method: str, *args: Any) -> FetchOutcome:
        self.calls.append((method, args))
        future: asyncio.Future[FetchOutcome] = asyncio.get_running_loop().create_future()
        self._waiters.append(future)
        return await future

    def respond(self, index: int, outcome: FetchOutcome) -> None:
        self._waiters[index].set_result(outcome)

    async def popular(self, kind: str) -> FetchOutcome:
        return await self._wait("popular", kind)

    async def search(self, kind: str, query: str) -> FetchOutcome:
        return await self._wait("search", kind, query)

    async def discover_by_genre(self, genre_filter: str) -> FetchOutcome:
        return await self._wait("discover_by_genre", genre_filter)

    async def details(self, kind: str, entity_id: int) -> FetchOutcome:
        return await self._wait("details", kind, entity_id)

    async def trending(self, kind: str) -> FetchOutcome:
        self.calls.append(("trending", (kind,)))
        return self.trending_outcome


class StaticCatalog:
    """Catalog stand-in answering immediately from canned outcomes."""

    def __init__(
        self,
        *,
        lists: FetchOutcome | None = None,
        details: dict[int, FetchOutcome] | None = None,
        trending: FetchOutcome | None = None,
    ) -> None:
        self.lists = lists or results()
        self.detail_outcomes = details or {}
        self.trending_outcome = trending or results()
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    async def popular(self, kind: str) -> FetchOutcome:
        self.calls.append(("popular", (kind,)))
        return self.lists

    async def search(self, kind: str, query: str) -> FetchOutcome:
        self.calls.append(("search", (kind, query)))
        return self.lists

    async def discover_by_genre(self, genre_filter: str) -> FetchOutcome:
        self.calls.append(("discover_by_genre", (genre_filter,)))
        return self.lists

    async def trending(self, kind: str) -> FetchOutcome:
        self.calls.append(("trending", (kind,)))
        return self.trending_outcome

    async def details(self, kind: str, entity_id: int) -> FetchOutcome:
        self.calls.append(("details", (kind, entity_id)))
        return self.detail_outcomes.get(entity_id, FetchFailure(HttpError(404)))


class RecordingGenerator:
    """Summary generator that returns canned text or raises on demand."""

    def __init__(self, text: str = "A **gripping** ride.", *, fail: bool = False):
        self.text = text
        self.fail = fail
        self.prompts: list[str] = []
        self.release: asyncio.Event | None = None

    async def generate_summary(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.release is not None:
            await self.release.wait()
        if self.fail:
            raise GenerationError("model unavailable")
        return self.text
