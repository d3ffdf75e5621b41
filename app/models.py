"""Models describing catalog records and controller view state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .moods import Mood

EntityKind = Literal["movie", "actor"]

POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"


class Entity(BaseModel):
    """A movie or person record as returned by the catalog.

    Only ``id`` is interpreted by the controllers; the remaining fields are the
    ones the UI displays or the summary prompts read. Anything else the catalog
    sends is preserved untouched.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    title: str | None = None
    name: str | None = None
    overview: str | None = None
    biography: str | None = None
    poster_path: str | None = None
    profile_path: str | None = None
    release_date: str | None = None
    vote_average: float | None = None
    original_language: str | None = None
    known_for_department: str | None = None
    genres: list[dict[str, Any]] = Field(default_factory=list)

    @field_validator("genres", mode="before")
    @classmethod
    def _coerce_genres(cls, value: object) -> object:
        return value or []

    def display_title(self) -> str:
        """Return a human-friendly label for cards and prompts."""

        for candidate in (self.title, self.name):
            if candidate and candidate.strip():
                return candidate.strip()
        return f"TMDb {self.id}"

    def image_url(self) -> str | None:
        path = self.poster_path or self.profile_path
        if not path:
            return None
        if path.startswith("http"):
            return path
        return f"{POSTER_BASE_URL}{path}"

    def merge(self, detail: Mapping[str, Any]) -> "Entity":
        """Return a new record with ``detail`` fields layered over this one."""

        return type(self).model_validate({**self.model_dump(), **dict(detail)})

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json", exclude_none=True)
        image = self.image_url()
        if image:
            payload["image_url"] = image
        return payload


def entities_from_payload(body: Mapping[str, Any]) -> list[Entity]:
    """Parse the ``results`` array of a list endpoint.

    A missing or malformed ``results`` key is an empty listing, not an error.
    Individual records that cannot be validated are skipped.
    """

    raw_results = body.get("results") or []
    if not isinstance(raw_results, list):
        return []
    entities: list[Entity] = []
    for entry in raw_results:
        if not isinstance(entry, dict):
            continue
        try:
            entities.append(Entity.model_validate(entry))
        except ValidationError:
            continue
    return entities


class RequestKind(str, Enum):
    DEFAULT = "default"
    SEARCH = "search"
    MOOD = "mood"
    TRENDING = "trending"


@dataclass(frozen=True, slots=True)
class ListRequest:
    """One fetch intent, tagged with the sequence number that issued it."""

    kind: RequestKind
    sequence: int
    query: str | None = None
    mood: Mood | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"kind": self.kind.value, "sequence": self.sequence}
        if self.query is not None:
            payload["query"] = self.query
        if self.mood is not None:
            payload["mood"] = self.mood.id
        return payload


class ListStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ListState:
    """Visible state of a discovery list."""

    status: ListStatus
    items: tuple[Entity, ...] = ()
    error: str | None = None
    request: ListRequest | None = None

    @classmethod
    def idle(cls) -> "ListState":
        return cls(status=ListStatus.IDLE)

    @classmethod
    def loading(cls, request: ListRequest) -> "ListState":
        return cls(status=ListStatus.LOADING, request=request)

    @classmethod
    def loaded(cls, request: ListRequest, items: list[Entity]) -> "ListState":
        return cls(status=ListStatus.LOADED, items=tuple(items), request=request)

    @classmethod
    def failed(cls, request: ListRequest, message: str) -> "ListState":
        return cls(status=ListStatus.ERROR, error=message, request=request)

    @property
    def sequence(self) -> int | None:
        return self.request.sequence if self.request else None

    def to_payload(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "items": [item.to_payload() for item in self.items],
            "error": self.error,
            "request": self.request.to_payload() if self.request else None,
        }


@dataclass(frozen=True, slots=True)
class SummaryCacheEntry:
    """A generated (or fallback) summary cached for the process lifetime."""

    subject_id: int
    subject_kind: EntityKind
    text: str
    generated_at: datetime = field(default_factory=datetime.utcnow)
    is_fallback: bool = False


@dataclass(frozen=True, slots=True)
class SummaryView:
    """Summary ready for display: the raw markdown and its sanitized HTML."""

    text: str
    html: str
    is_fallback: bool

    def to_payload(self) -> dict[str, Any]:
        return {"text": self.text, "html": self.html, "is_fallback": self.is_fallback}


class QueryUpdate(BaseModel):
    query: str = ""
    immediate: bool = False


class MoodSelection(BaseModel):
    mood: str


class ItemSelection(BaseModel):
    id: int
