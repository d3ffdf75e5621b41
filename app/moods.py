"""Static mood definitions mapped onto TMDB genre filters."""

from __future__ import annotations

from dataclasses import dataclass

from .utils import slugify


@dataclass(frozen=True)
class Mood:
    """A named mood the user can pick to filter the movie listing."""

    id: str
    label: str
    genre_filter_param: str


# Pipe-separated genre ids are OR-ed by TMDB's ``with_genres`` filter.
MOODS: tuple[Mood, ...] = (
    Mood(id="happy", label="Happy", genre_filter_param="35"),
    Mood(id="sad", label="Sad", genre_filter_param="18"),
    Mood(id="excited", label="Excited", genre_filter_param="28|12"),
    Mood(id="romantic", label="Romantic", genre_filter_param="10749"),
    Mood(id="scared", label="Scared", genre_filter_param="27|53"),
    Mood(id="thoughtful", label="Thoughtful", genre_filter_param="99|36"),
    Mood(id="relaxed", label="Relaxed", genre_filter_param="16|10751"),
    Mood(id="curious", label="Curious", genre_filter_param="9648|878"),
)

_MOODS_BY_ID = {mood.id: mood for mood in MOODS}


def list_moods() -> tuple[Mood, ...]:
    """Return every mood in display order."""

    return MOODS


def get_mood(mood_id: str) -> Mood:
    """Resolve a mood by identifier, tolerating case and spacing differences."""

    key = slugify(mood_id or "")
    try:
        return _MOODS_BY_ID[key]
    except KeyError:
        raise KeyError(f"Unknown mood: {mood_id!r}") from None
