"""Entry point for the FastAPI adapter the MovieMitra client talks to."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .models import ItemSelection, MoodSelection, QueryUpdate
from .moods import get_mood, list_moods
from .services.fetcher import CatalogFetcher
from .services.openrouter import OpenRouterClient
from .services.summaries import SummaryService
from .services.tmdb import TMDBClient
from .session import DiscoverySession, SessionRegistry, resolve_kind

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    # Missing credentials abort startup instead of sending anonymous requests.
    settings.require_catalog_token()

    exit_stack = AsyncExitStack()
    catalog_http = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.tmdb_api_url).rstrip("/"),
            timeout=httpx.Timeout(settings.catalog_timeout_seconds, connect=10.0),
        )
    )
    openrouter_http = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.openrouter_api_url).rstrip("/"),
            timeout=httpx.Timeout(settings.openrouter_timeout_seconds, connect=10.0),
        )
    )

    catalog = TMDBClient(settings, CatalogFetcher(settings, catalog_http))
    generator = OpenRouterClient(settings, openrouter_http)
    if not generator.available:
        logger.info("OPENROUTER_API_KEY not set; summaries will use fallback text")
    summaries = SummaryService(generator)
    fastapi_app.state.sessions = SessionRegistry(
        catalog, summaries, debounce_seconds=settings.debounce_seconds
    )

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        fastapi_app.state.sessions.close_all()
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Movie and actor discovery with AI insights, powered by TMDB",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_registry(app: FastAPI) -> SessionRegistry:
    registry = getattr(app.state, "sessions", None)
    if not isinstance(registry, SessionRegistry):
        raise RuntimeError("Session registry not initialised")
    return registry


def register_routes(fastapi_app: FastAPI) -> None:
    def _session(session_id: str) -> DiscoverySession:
        try:
            return get_registry(fastapi_app).get(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Session not found") from exc

    def _kind(segment: str):
        try:
            return resolve_kind(segment)
        except ValueError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/api/moods")
    async def moods() -> list[dict[str, str]]:
        return [{"id": mood.id, "label": mood.label} for mood in list_moods()]

    @fastapi_app.post("/api/sessions", status_code=201)
    async def open_session() -> dict[str, Any]:
        session = get_registry(fastapi_app).create()
        return session.to_payload()

    @fastapi_app.get("/api/sessions/{session_id}")
    async def session_state(session_id: str) -> dict[str, Any]:
        return _session(session_id).to_payload()

    @fastapi_app.delete("/api/sessions/{session_id}", status_code=204)
    async def close_session(session_id: str) -> None:
        try:
            get_registry(fastapi_app).close(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Session not found") from exc

    @fastapi_app.post("/api/sessions/{session_id}/{listing}/query")
    async def update_query(
        session_id: str, listing: str, update: QueryUpdate
    ) -> dict[str, Any]:
        session = _session(session_id)
        controller = session.lists[_kind(listing)]
        controller.set_query(update.query, immediate=update.immediate)
        return controller.to_payload()

    @fastapi_app.post("/api/sessions/{session_id}/movies/mood")
    async def activate_mood(session_id: str, selection: MoodSelection) -> dict[str, Any]:
        session = _session(session_id)
        try:
            mood = get_mood(selection.mood)
        except KeyError as exc:
            raise HTTPException(status_code=400, detail="Unknown mood") from exc
        session.movies.activate_mood(mood)
        return session.movies.to_payload()

    @fastapi_app.post("/api/sessions/{session_id}/{listing}/selection", status_code=202)
    async def select_item(
        session_id: str, listing: str, selection: ItemSelection
    ) -> dict[str, Any]:
        session = _session(session_id)
        kind = _kind(listing)
        detail = session.details[kind]
        detail.select(session.find_entity(kind, selection.id))
        return {"sequence": detail.sequence}

    @fastapi_app.delete("/api/sessions/{session_id}/{listing}/selection", status_code=204)
    async def clear_selection(session_id: str, listing: str) -> None:
        session = _session(session_id)
        session.details[_kind(listing)].clear()


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
