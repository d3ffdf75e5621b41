"""List state machine for movie and actor discovery."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from .debounce import QueryDebouncer
from .errors import FetchError
from .models import (
    Entity,
    EntityKind,
    ListRequest,
    ListState,
    RequestKind,
    entities_from_payload,
)
from .moods import Mood
from .services.fetcher import FetchFailure, FetchOutcome
from .services.tmdb import TMDBClient

logger = logging.getLogger(__name__)

Listener = Callable[["DiscoveryController"], None]


@dataclass(frozen=True)
class DiscoveryProfile:
    """Per-entity wording and capabilities of a discovery list."""

    kind: EntityKind
    label: str
    error_message: str
    mood_error_message: str | None = None

    @property
    def supports_moods(self) -> bool:
        return self.mood_error_message is not None


MOVIE_DISCOVERY = DiscoveryProfile(
    kind="movie",
    label="movies",
    error_message="Error fetching movies. Please try again later.",
    mood_error_message="Could not load movies for this mood.",
)

ACTOR_DISCOVERY = DiscoveryProfile(
    kind="actor",
    label="actors",
    error_message="Error fetching actors. Please try again later.",
)


class DiscoveryController:
    """Coordinate default, search, mood and trending listings for one kind.

    Every list request is tagged with a fresh sequence number. Results are
    committed only while their sequence is still the latest one issued, so a
    slow response for an older query can never overwrite a newer listing.
    Trending is tracked separately and is not gated by the sequence.
    """

    def __init__(
        self,
        profile: DiscoveryProfile,
        catalog: TMDBClient,
        *,
        debounce_seconds: float = 0.5,
    ) -> None:
        self.profile = profile
        self._catalog = catalog
        self._debouncer = QueryDebouncer(self.query_settled, delay=debounce_seconds)
        self._sequence = 0
        self._active = True
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[Listener] = []
        self._trending_requested = False

        self.query = ""
        self.active_mood: Mood | None = None
        self.state = ListState.idle()
        self.trending: tuple[Entity, ...] = ()

    @property
    def kind(self) -> EntityKind:
        return self.profile.kind

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def active(self) -> bool:
        return self._active

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def start(self) -> asyncio.Task | None:
        """Mount the list: fetch trending once and load the default listing."""

        self.request_trending()
        return self.query_settled(self.query)

    def set_query(self, raw: str, *, immediate: bool = False) -> None:
        """Record a keystroke; the search runs once the input settles."""

        if not self._active:
            return
        self.query = raw or ""
        self._debouncer.push(self.query)
        if immediate:
            self._debouncer.flush()

    def query_settled(self, query: str) -> asyncio.Task | None:
        if not self._active:
            return None
        self.active_mood = None
        if query:
            request = self._next_request(RequestKind.SEARCH, query=query)
        else:
            request = self._next_request(RequestKind.DEFAULT)
        return self._issue(request)

    def activate_mood(self, mood: Mood) -> asyncio.Task | None:
        if not self.profile.supports_moods:
            raise ValueError(f"Mood filtering is not available for {self.profile.label}")
        if not self._active:
            return None
        self.active_mood = mood
        return self._issue(self._next_request(RequestKind.MOOD, mood=mood))

    def request_trending(self) -> asyncio.Task | None:
        """Fetch the trending list; only the first call issues a request."""

        if self._trending_requested or not self._active:
            return None
        self._trending_requested = True
        return self._spawn(self._load_trending())

    def is_current(self, request: ListRequest) -> bool:
        return self._active and request.sequence == self._sequence

    def commit_success(self, sequence: int, items: list[Entity]) -> bool:
        """Apply a finished request's items unless it has been superseded."""

        request = self.state.request
        if not self._active or request is None or sequence != self._sequence:
            logger.debug(
                "Discarding stale %s result #%s (current #%s)",
                self.profile.label,
                sequence,
                self._sequence,
            )
            return False
        self._set_state(ListState.loaded(request, items))
        return True

    def commit_failure(self, sequence: int, error: FetchError) -> bool:
        request = self.state.request
        if not self._active or request is None or sequence != self._sequence:
            logger.debug(
                "Ignoring stale %s failure #%s: %s",
                self.profile.label,
                sequence,
                error.reason,
            )
            return False
        logger.warning(
            "Loading %s failed for %s request: %s",
            self.profile.label,
            request.kind.value,
            error.reason,
        )
        if request.kind is RequestKind.MOOD and self.profile.mood_error_message:
            message = self.profile.mood_error_message
        else:
            message = self.profile.error_message
        self._set_state(ListState.failed(request, message))
        return True

    def dispose(self) -> None:
        """Tear down: no pending emission and no further state changes."""

        self._active = False
        self._debouncer.close()
        for task in list(self._tasks):
            task.cancel()
        self._listeners.clear()

    def to_payload(self) -> dict[str, object]:
        return {
            "kind": self.kind,
            "query": self.query,
            "mood": self.active_mood.id if self.active_mood else None,
            "list": self.state.to_payload(),
            "trending": [item.to_payload() for item in self.trending],
        }

    def _next_request(
        self, kind: RequestKind, *, query: str | None = None, mood: Mood | None = None
    ) -> ListRequest:
        self._sequence += 1
        return ListRequest(kind=kind, sequence=self._sequence, query=query, mood=mood)

    def _issue(self, request: ListRequest) -> asyncio.Task:
        self._set_state(ListState.loading(request))
        return self._spawn(self._run(request))

    async def _run(self, request: ListRequest) -> None:
        outcome = await self._dispatch(request)
        if isinstance(outcome, FetchFailure):
            self.commit_failure(request.sequence, outcome.error)
            return
        self.commit_success(request.sequence, entities_from_payload(outcome.body))

    async def _dispatch(self, request: ListRequest) -> FetchOutcome:
        if request.kind is RequestKind.SEARCH and request.query:
            return await self._catalog.search(self.kind, request.query)
        if request.kind is RequestKind.MOOD and request.mood is not None:
            return await self._catalog.discover_by_genre(request.mood.genre_filter_param)
        if request.kind is RequestKind.TRENDING:
            return await self._catalog.trending(self.kind)
        return await self._catalog.popular(self.kind)

    async def _load_trending(self) -> None:
        outcome = await self._catalog.trending(self.kind)
        if isinstance(outcome, FetchFailure):
            logger.warning(
                "Error fetching trending %s: %s", self.profile.label, outcome.reason
            )
            return
        if not self._active:
            return
        self.trending = tuple(entities_from_payload(outcome.body))
        self._notify()

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _set_state(self, state: ListState) -> None:
        self.state = state
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
