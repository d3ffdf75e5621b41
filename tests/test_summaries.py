"""Tests for AI summary generation, caching and fallbacks."""

from __future__ import annotations

import asyncio

import pytest

from app.models import Entity
from app.services.summaries import (
    FALLBACK_SUMMARIES,
    SummaryService,
    build_summary_prompt,
)
from tests.fakes import RecordingGenerator

MOVIE = Entity(id=603, title="The Matrix", overview="A hacker learns the truth.")
ACTOR = Entity(id=6384, name="Keanu Reeves", biography="Canadian actor.")


@pytest.mark.anyio("asyncio")
async def test_summary_is_generated_once_per_subject() -> None:
    generator = RecordingGenerator("A **mind-bending** classic.")
    service = SummaryService(generator)

    first = await service.summarize(MOVIE, "movie")
    second = await service.summarize(MOVIE, "movie")

    assert first == second == "A **mind-bending** classic."
    assert len(generator.prompts) == 1
    entry = service.cached("movie", MOVIE.id)
    assert entry is not None and entry.is_fallback is False


@pytest.mark.anyio("asyncio")
async def test_generation_failure_returns_and_caches_actor_fallback() -> None:
    generator = RecordingGenerator(fail=True)
    service = SummaryService(generator)

    text = await service.summarize(ACTOR, "actor")
    again = await service.summarize(ACTOR, "actor")

    assert text == (
        "This artist has built a remarkable career through dedication, "
        "versatility, and memorable performances."
    )
    assert again == text
    assert len(generator.prompts) == 1
    entry = service.cached("actor", ACTOR.id)
    assert entry is not None and entry.is_fallback is True


@pytest.mark.anyio("asyncio")
async def test_missing_generator_uses_movie_fallback() -> None:
    service = SummaryService(None)

    entry = await service.summarize_entry(MOVIE, "movie")

    assert entry.text == FALLBACK_SUMMARIES["movie"]
    assert entry.is_fallback is True


@pytest.mark.anyio("asyncio")
async def test_blank_generation_is_never_returned() -> None:
    service = SummaryService(RecordingGenerator("   "))

    text = await service.summarize(MOVIE, "movie")

    assert text == FALLBACK_SUMMARIES["movie"]


@pytest.mark.anyio("asyncio")
async def test_kinds_are_cached_independently() -> None:
    """A movie and an actor sharing a numeric id do not collide."""

    generator = RecordingGenerator("Generated.")
    service = SummaryService(generator)

    await service.summarize(Entity(id=1, title="Film"), "movie")
    await service.summarize(Entity(id=1, name="Person"), "actor")

    assert len(generator.prompts) == 2
    assert len(service) == 2


@pytest.mark.anyio("asyncio")
async def test_concurrent_requests_share_one_generation() -> None:
    generator = RecordingGenerator("Shared insight.")
    generator.release = asyncio.Event()
    service = SummaryService(generator)

    first = asyncio.create_task(service.summarize(MOVIE, "movie"))
    second = asyncio.create_task(service.summarize(MOVIE, "movie"))
    await asyncio.sleep(0)
    generator.release.set()

    assert await asyncio.gather(first, second) == ["Shared insight.", "Shared insight."]
    assert len(generator.prompts) == 1


@pytest.mark.anyio("asyncio")
async def test_slow_subject_does_not_block_other_subjects() -> None:
    release = asyncio.Event()

    class _PerSubjectGenerator:
        async def generate_summary(self, prompt: str) -> str:
            if "The Matrix" in prompt:
                await release.wait()
                return "Slow."
            return "Fast."

    service = SummaryService(_PerSubjectGenerator())

    blocked = asyncio.create_task(service.summarize(MOVIE, "movie"))
    await asyncio.sleep(0)
    assert await service.summarize(ACTOR, "actor") == "Fast."
    assert not blocked.done()

    release.set()
    assert await blocked == "Slow."


@pytest.mark.anyio("asyncio")
async def test_cancelled_caller_does_not_cancel_shared_generation() -> None:
    generator = RecordingGenerator("Survives.")
    generator.release = asyncio.Event()
    service = SummaryService(generator)

    impatient = asyncio.create_task(service.summarize(MOVIE, "movie"))
    await asyncio.sleep(0)
    impatient.cancel()
    await asyncio.gather(impatient, return_exceptions=True)

    waiting = asyncio.create_task(service.summarize(MOVIE, "movie"))
    await asyncio.sleep(0)
    generator.release.set()

    assert await waiting == "Survives."
    assert len(generator.prompts) == 1


def test_prompts_use_descriptive_fields() -> None:
    movie_prompt = build_summary_prompt(
        Entity(
            id=1,
            title="Arrival",
            overview="Linguist meets aliens.",
            release_date="2016-11-10",
            genres=[{"id": 878, "name": "Science Fiction"}],
        ),
        "movie",
    )
    actor_prompt = build_summary_prompt(ACTOR, "actor")

    assert '"Arrival" (2016)' in movie_prompt
    assert "Linguist meets aliens." in movie_prompt
    assert "Science Fiction" in movie_prompt
    assert "Keanu Reeves" in actor_prompt
    assert "Canadian actor." in actor_prompt


def test_unknown_kind_is_rejected() -> None:
    with pytest.raises(ValueError):
        build_summary_prompt(MOVIE, "series")  # type: ignore[arg-type]
