"""Entry point for the FastAPI-powered discovery service."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .catalogue import load_catalogue
from .config import settings
from .database import Database
from .discovery import DEFAULT_MATCH_CONTEXT, MOOD_PRESETS, DiscoverySnapshot
from .media_links import build_embed_url, extract_embed_id, resolve_poster_fallback
from .models import CatalogueRecord, ChatMessage, SavedItem
from .services.openrouter import OpenRouterClient
from .session import DiscoverySession
from .storage import DatabaseKeyValueStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


class QueryRequest(BaseModel):
    query: str


class RegenerateRequest(BaseModel):
    query: str | None = None
    exclude_titles: list[str] | None = None


class MoodRequest(BaseModel):
    mood: str


class ExplainRequest(BaseModel):
    title: str = Field(min_length=1)
    context: str = DEFAULT_MATCH_CONTEXT


class ToggleRequest(BaseModel):
    title: str = Field(min_length=1)
    show_id: str | None = None


class ChatRequest(BaseModel):
    message: str


@asynccontextmanager
async def lifespan(_: FastAPI):
    exit_stack = AsyncExitStack()
    openrouter_http = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.openrouter_api_url),
            timeout=httpx.Timeout(settings.request_timeout_seconds, connect=10.0),
        )
    )
    database = Database(settings.database_url)
    await database.create_all()

    openrouter = OpenRouterClient(settings, openrouter_http)
    session = await DiscoverySession.open(
        openrouter,
        DatabaseKeyValueStore(database),
        catalogue=load_catalogue(settings.catalogue_path),
        history_key=settings.history_key,
        history_limit=settings.history_limit,
    )

    app.state.session = session
    app.state.database = database

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await database.dispose()
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="AI-assisted movie and series discovery powered by OpenRouter",
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


def get_session(app: FastAPI) -> DiscoverySession:
    session = getattr(app.state, "session", None)
    if not isinstance(session, DiscoverySession):
        raise RuntimeError("Discovery session not initialised")
    return session


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/catalogue")
    async def catalogue(
        offset: int = 0, limit: int = 50, genre: str | None = None
    ) -> dict[str, Any]:
        session = get_session(fastapi_app)
        if offset < 0 or limit < 1:
            raise HTTPException(status_code=400, detail="Invalid pagination window")
        matching = session.catalogue
        if genre and genre.strip():
            wanted = genre.strip().casefold()
            matching = [
                record
                for record in matching
                if any(tag.casefold() == wanted for tag in record.genres)
            ]
        return {"total": len(matching), "items": matching[offset : offset + limit]}

    @fastapi_app.get("/catalogue/featured")
    async def featured() -> CatalogueRecord:
        session = get_session(fastapi_app)
        if session.featured is None:
            raise HTTPException(status_code=404, detail="No featured title available")
        return session.featured

    @fastapi_app.get("/discover")
    async def discovery_state() -> DiscoverySnapshot:
        return get_session(fastapi_app).orchestrator.snapshot()

    @fastapi_app.post("/discover")
    async def discover(payload: QueryRequest) -> DiscoverySnapshot:
        return await get_session(fastapi_app).orchestrator.search(payload.query)

    @fastapi_app.post("/discover/regenerate")
    async def regenerate(payload: RegenerateRequest) -> DiscoverySnapshot:
        orchestrator = get_session(fastapi_app).orchestrator
        return await orchestrator.regenerate(payload.query, payload.exclude_titles)

    @fastapi_app.get("/discover/moods")
    async def moods() -> list[str]:
        return list(MOOD_PRESETS)

    @fastapi_app.post("/discover/mood")
    async def discover_mood(payload: MoodRequest) -> DiscoverySnapshot:
        return await get_session(fastapi_app).orchestrator.search_mood(payload.mood)

    @fastapi_app.post("/explain")
    async def explain(payload: ExplainRequest) -> dict[str, str]:
        orchestrator = get_session(fastapi_app).orchestrator
        text = await orchestrator.explain_match(payload.title, payload.context)
        return {"title": payload.title, "explanation": text}

    @fastapi_app.get("/history")
    async def history() -> list[str]:
        return get_session(fastapi_app).history.entries

    @fastapi_app.delete("/history")
    async def clear_history() -> list[str]:
        store = get_session(fastapi_app).history
        await store.clear()
        return store.entries

    @fastapi_app.delete("/history/{query:path}")
    async def remove_history_entry(query: str) -> list[str]:
        store = get_session(fastapi_app).history
        await store.remove(query)
        return store.entries

    @fastapi_app.get("/saved")
    async def saved_items() -> list[SavedItem]:
        return get_session(fastapi_app).saved.items

    @fastapi_app.get("/saved/{title:path}")
    async def saved_status(title: str) -> dict[str, Any]:
        return {"title": title, "saved": get_session(fastapi_app).saved.is_saved(title)}

    @fastapi_app.post("/saved/toggle")
    async def toggle_saved(payload: ToggleRequest) -> dict[str, Any]:
        session = get_session(fastapi_app)
        candidate = session.resolve_candidate(payload.title, payload.show_id)
        if candidate is None:
            raise HTTPException(status_code=404, detail="Title not found")
        saved = session.saved.toggle(candidate)
        return {"title": candidate.title, "saved": saved, "items": session.saved.items}

    @fastapi_app.get("/media/embed")
    async def media_embed(url: str) -> dict[str, str | None]:
        return {"id": extract_embed_id(url), "embed_url": build_embed_url(url)}

    @fastapi_app.get("/media/trailer")
    async def media_trailer(title: str, url: str | None = None) -> dict[str, str | None]:
        orchestrator = get_session(fastapi_app).orchestrator
        return {"title": title, "embed_url": orchestrator.trailer_for(title, url)}

    @fastapi_app.get("/media/poster")
    async def media_poster(title: str) -> dict[str, str]:
        return {"title": title, "url": resolve_poster_fallback(title)}

    @fastapi_app.get("/chat")
    async def chat_transcript() -> list[ChatMessage]:
        return get_session(fastapi_app).chat.messages

    @fastapi_app.post("/chat")
    async def chat(payload: ChatRequest) -> list[ChatMessage]:
        assistant = get_session(fastapi_app).chat
        reply = await assistant.send(payload.message)
        if reply is None:
            raise HTTPException(status_code=400, detail="Message must not be empty")
        return assistant.messages


app = create_app()
