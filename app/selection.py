"""On-demand detail loading for the item the user selected."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from pydantic import ValidationError

from .models import Entity, EntityKind, SummaryView
from .rendering import render_summary
from .services.fetcher import FetchFailure
from .services.summaries import SummaryService
from .services.tmdb import TMDBClient

logger = logging.getLogger(__name__)

Listener = Callable[["DetailSelectionController"], None]


class DetailSelectionController:
    """Fetch full details for a selected item and attach its AI summary.

    The selected record is only replaced once a detail fetch has succeeded,
    so a failed fetch keeps whatever was selected before. Like the list
    controller, each selection gets a sequence number and only the latest
    one may commit.
    """

    def __init__(
        self,
        kind: EntityKind,
        catalog: TMDBClient,
        summaries: SummaryService,
    ) -> None:
        self.kind = kind
        self._catalog = catalog
        self._summaries = summaries
        self._sequence = 0
        self._active = True
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[Listener] = []

        self.selected: Entity | None = None
        self.summary: SummaryView | None = None

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def summary_loading(self) -> bool:
        return self.selected is not None and self.summary is None

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def select(self, entity: Entity) -> asyncio.Task | None:
        if not self._active:
            return None
        self._sequence += 1
        task = asyncio.create_task(self._load(self._sequence, entity))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def clear(self) -> None:
        """Close the detail view and drop any selection still loading."""

        self._sequence += 1
        self.selected = None
        self.summary = None
        self._notify()

    def dispose(self) -> None:
        self._active = False
        for task in list(self._tasks):
            task.cancel()
        self._listeners.clear()

    def to_payload(self) -> dict[str, object] | None:
        if self.selected is None:
            return None
        return {
            "record": self.selected.to_payload(),
            "summary": self.summary.to_payload() if self.summary else None,
        }

    def _is_current(self, sequence: int) -> bool:
        return self._active and sequence == self._sequence

    async def _load(self, sequence: int, entity: Entity) -> None:
        outcome = await self._catalog.details(self.kind, entity.id)
        if isinstance(outcome, FetchFailure):
            logger.warning(
                "Failed to fetch %s details for %s: %s",
                self.kind,
                entity.id,
                outcome.reason,
            )
            return
        try:
            record = entity.merge(outcome.body)
        except ValidationError as exc:
            logger.warning(
                "Discarding malformed %s details for %s: %s", self.kind, entity.id, exc
            )
            return
        if not self._is_current(sequence):
            return

        self.selected = record
        self.summary = None
        self._notify()

        entry = await self._summaries.summarize_entry(record, self.kind)
        if not self._is_current(sequence):
            return
        self.summary = SummaryView(
            text=entry.text,
            html=render_summary(entry.text),
            is_fallback=entry.is_fallback,
        )
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
