"""UI sessions owning one controller per discovery concern."""

from __future__ import annotations

import logging
import secrets
from typing import Any

from .discovery import ACTOR_DISCOVERY, MOVIE_DISCOVERY, DiscoveryController
from .models import Entity, EntityKind
from .selection import DetailSelectionController
from .services.summaries import SummaryService
from .services.tmdb import TMDBClient

logger = logging.getLogger(__name__)

# URL segments used by the UI mapped onto entity kinds.
KIND_SEGMENTS: dict[str, EntityKind] = {"movies": "movie", "actors": "actor"}


def resolve_kind(segment: str) -> EntityKind:
    try:
        return KIND_SEGMENTS[segment]
    except KeyError:
        raise ValueError(f"Unsupported listing: {segment!r}") from None


class DiscoverySession:
    """Everything one open client needs: list and detail state per kind.

    The summary service is shared across sessions so a subject summarised
    for one user is served from cache for everyone else.
    """

    def __init__(
        self,
        session_id: str,
        catalog: TMDBClient,
        summaries: SummaryService,
        *,
        debounce_seconds: float = 0.5,
    ) -> None:
        self.id = session_id
        self.lists: dict[EntityKind, DiscoveryController] = {
            "movie": DiscoveryController(
                MOVIE_DISCOVERY, catalog, debounce_seconds=debounce_seconds
            ),
            "actor": DiscoveryController(
                ACTOR_DISCOVERY, catalog, debounce_seconds=debounce_seconds
            ),
        }
        self.details: dict[EntityKind, DetailSelectionController] = {
            kind: DetailSelectionController(kind, catalog, summaries)
            for kind in ("movie", "actor")
        }
        self._started = False

    @property
    def movies(self) -> DiscoveryController:
        return self.lists["movie"]

    @property
    def actors(self) -> DiscoveryController:
        return self.lists["actor"]

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        for controller in self.lists.values():
            controller.start()

    def close(self) -> None:
        for controller in self.lists.values():
            controller.dispose()
        for detail in self.details.values():
            detail.dispose()

    def find_entity(self, kind: EntityKind, entity_id: int) -> Entity:
        """Return the listed record for ``entity_id`` or a bare stub."""

        controller = self.lists[kind]
        for item in (*controller.state.items, *controller.trending):
            if item.id == entity_id:
                return item
        return Entity(id=entity_id)

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "movies": {
                **self.movies.to_payload(),
                "selection": self.details["movie"].to_payload(),
            },
            "actors": {
                **self.actors.to_payload(),
                "selection": self.details["actor"].to_payload(),
            },
        }


class SessionRegistry:
    """In-memory registry of open sessions; nothing outlives the process."""

    def __init__(
        self,
        catalog: TMDBClient,
        summaries: SummaryService,
        *,
        debounce_seconds: float = 0.5,
    ) -> None:
        self._catalog = catalog
        self._summaries = summaries
        self._debounce_seconds = debounce_seconds
        self._sessions: dict[str, DiscoverySession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> DiscoverySession:
        session = DiscoverySession(
            secrets.token_urlsafe(16),
            self._catalog,
            self._summaries,
            debounce_seconds=self._debounce_seconds,
        )
        self._sessions[session.id] = session
        session.start()
        logger.info("Opened discovery session %s", session.id)
        return session

    def get(self, session_id: str) -> DiscoverySession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise KeyError(f"Unknown session: {session_id}") from None

    def close(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise KeyError(f"Unknown session: {session_id}")
        session.close()
        logger.info("Closed discovery session %s", session_id)

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)
