from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from quiet_hn.cache import StoryCache
from quiet_hn.client import HNClient, ItemSource
from quiet_hn.config import Settings
from quiet_hn.fetching import get_top_stories
from quiet_hn.logging_config import get_logger
from quiet_hn.models import DisplayItem
from quiet_hn.render import render_page

logger = get_logger(__name__)


class StoryOut(BaseModel):
    id: int
    title: str
    url: str
    host: str
    by: str
    score: int
    time: int
    descendants: int


class StoriesResponse(BaseModel):
    stories: list[StoryOut]
    elapsed_ms: float


def create_app(
    settings: Optional[Settings] = None,
    source: Optional[ItemSource] = None,
    cache: Optional[StoryCache] = None,
) -> FastAPI:
    """Build the app with its own story cache and item source."""
    settings = settings or Settings()
    owned_client: Optional[HNClient] = None
    if source is None:
        owned_client = HNClient(base_url=settings.api_base)
        source = owned_client

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if owned_client is not None:
            await owned_client.close()

    app = FastAPI(title="Quiet HN", lifespan=lifespan)
    app.state.settings = settings
    app.state.source = source
    app.state.cache = cache or StoryCache(ttl=settings.cache_ttl)

    async def load_stories(request: Request, count: int) -> list[DisplayItem]:
        state = request.app.state

        async def compute(want: int) -> list[DisplayItem]:
            return await get_top_stories(
                state.source,
                want,
                timeout=state.settings.item_timeout,
                max_concurrency=state.settings.max_concurrency,
            )

        try:
            return await state.cache.get_or_compute(count, compute)
        except Exception:
            logger.exception("story_request_failed", count=count)
            raise HTTPException(status_code=500, detail="Failed to load top stories")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def index(
        request: Request,
        count: Optional[int] = Query(default=None, ge=1),
    ) -> HTMLResponse:
        start = time.perf_counter()
        stories = await load_stories(request, count or settings.num_stories)
        return HTMLResponse(render_page(stories, time.perf_counter() - start))

    @app.get("/api/stories", response_model=StoriesResponse)
    async def stories_json(
        request: Request,
        count: Optional[int] = Query(default=None, ge=1),
    ) -> StoriesResponse:
        start = time.perf_counter()
        stories = await load_stories(request, count or settings.num_stories)
        return StoriesResponse(
            stories=[StoryOut(**s.to_dict()) for s in stories],
            elapsed_ms=round((time.perf_counter() - start) * 1000, 3),
        )

    return app
