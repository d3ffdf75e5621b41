"""AI summaries for movies and actors with per-subject caching."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Protocol

from ..errors import GenerationError
from ..models import Entity, EntityKind, SummaryCacheEntry
from ..utils import truncate_words

logger = logging.getLogger(__name__)

FALLBACK_SUMMARIES: dict[str, str] = {
    "movie": (
        "This film highlights the power of storytelling through compelling "
        "visuals and narrative depth."
    ),
    "actor": (
        "This artist has built a remarkable career through dedication, "
        "versatility, and memorable performances."
    ),
}

MOVIE_PROMPT_TEMPLATE = """
Write a short insight about the movie "{title}"{year}.
Genres: {genres}
Plot overview: {overview}

Explain in two or three sentences what makes it worth watching. Use **bold** for at most one key phrase.
"""

ACTOR_PROMPT_TEMPLATE = """
Write a short insight about {name}, known for {department}.
Biography: {biography}

Summarise in two or three sentences what defines their career. Use **bold** for at most one key phrase.
"""

SummaryKey = tuple[str, int]


class SummaryGenerator(Protocol):
    async def generate_summary(self, prompt: str) -> str:  # pragma: no cover - protocol
        ...


def build_summary_prompt(subject: Entity, kind: EntityKind) -> str:
    """Build the generation prompt from the subject's descriptive fields."""

    if kind == "movie":
        year = f" ({subject.release_date[:4]})" if subject.release_date else ""
        genres = ", ".join(
            str(genre.get("name")) for genre in subject.genres if genre.get("name")
        )
        return MOVIE_PROMPT_TEMPLATE.format(
            title=subject.display_title(),
            year=year,
            genres=genres or "not listed",
            overview=truncate_words(subject.overview or "", 200) or "No overview available.",
        ).strip()
    if kind == "actor":
        return ACTOR_PROMPT_TEMPLATE.format(
            name=subject.display_title(),
            department=(subject.known_for_department or "acting").lower(),
            biography=truncate_words(subject.biography or "", 250)
            or "No biography available.",
        ).strip()
    raise ValueError(f"Unsupported summary kind: {kind!r}")


class SummaryService:
    """Generate at most one summary per subject for the lifetime of the process.

    Entries are keyed by ``(kind, id)`` and never evicted. Failed generations
    cache the kind's fallback sentence as well, so a subject whose generation
    failed is not retried later in the session. Concurrent requests for the
    same subject share one in-flight generation.
    """

    def __init__(
        self,
        generator: SummaryGenerator | None,
        *,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._generator = generator
        self._clock = clock
        self._cache: dict[SummaryKey, SummaryCacheEntry] = {}
        self._pending: dict[SummaryKey, asyncio.Future[SummaryCacheEntry]] = {}

    def cached(self, kind: EntityKind, subject_id: int) -> SummaryCacheEntry | None:
        return self._cache.get((kind, subject_id))

    def __len__(self) -> int:
        return len(self._cache)

    async def summarize(self, subject: Entity, kind: EntityKind) -> str:
        entry = await self.summarize_entry(subject, kind)
        return entry.text

    async def summarize_entry(
        self, subject: Entity, kind: EntityKind
    ) -> SummaryCacheEntry:
        if kind not in FALLBACK_SUMMARIES:
            raise ValueError(f"Unsupported summary kind: {kind!r}")
        key: SummaryKey = (kind, subject.id)
        entry = self._cache.get(key)
        if entry is not None:
            return entry

        pending = self._pending.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._generate(key, subject, kind))
            self._pending[key] = pending
            pending.add_done_callback(lambda done: self._forget(key, done))
        # Shielded so one caller going away does not cancel the shared work.
        return await asyncio.shield(pending)

    async def _generate(
        self, key: SummaryKey, subject: Entity, kind: EntityKind
    ) -> SummaryCacheEntry:
        try:
            text = await self._call_generator(build_summary_prompt(subject, kind))
        except Exception as exc:
            logger.warning(
                "Summary generation failed for %s %s: %s", kind, subject.id, exc
            )
            entry = SummaryCacheEntry(
                subject_id=subject.id,
                subject_kind=kind,
                text=FALLBACK_SUMMARIES[kind],
                generated_at=self._clock(),
                is_fallback=True,
            )
        else:
            entry = SummaryCacheEntry(
                subject_id=subject.id,
                subject_kind=kind,
                text=text,
                generated_at=self._clock(),
            )
        self._cache[key] = entry
        return entry

    async def _call_generator(self, prompt: str) -> str:
        if self._generator is None:
            raise GenerationError("No summary generator configured")
        text = await self._generator.generate_summary(prompt)
        if not isinstance(text, str) or not text.strip():
            raise GenerationError("Summary generator returned no text")
        return text.strip()

    def _forget(self, key: SummaryKey, done: asyncio.Future) -> None:
        if self._pending.get(key) is done:
            del self._pending[key]
