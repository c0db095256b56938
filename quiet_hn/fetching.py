from __future__ import annotations

import asyncio
import math
import time
from collections.abc import Sequence
from typing import Optional

from quiet_hn.client import ItemSource
from quiet_hn.constants import OVERFETCH_RATIO, STORY_TYPE
from quiet_hn.logging_config import get_logger
from quiet_hn.models import DisplayItem, FetchResult, Item
from quiet_hn.url_utils import extract_host

logger = get_logger(__name__)


def adapt(item: Item) -> DisplayItem:
    """Attach the display host to a resolved item."""
    return DisplayItem(item=item, host=extract_host(item.url))


def is_story_link(story: Optional[DisplayItem]) -> bool:
    """Only stories pointing at an external URL are shown."""
    return story is not None and story.type == STORY_TYPE and story.url != ""


async def _fetch_one(
    source: ItemSource,
    index: int,
    item_id: int,
    results: asyncio.Queue[FetchResult],
    timeout: Optional[float],
    semaphore: Optional[asyncio.Semaphore],
) -> None:
    story: Optional[DisplayItem] = None
    try:
        if semaphore is not None:
            async with semaphore:
                item = await asyncio.wait_for(source.get_item(item_id), timeout)
        else:
            item = await asyncio.wait_for(source.get_item(item_id), timeout)
        story = adapt(item)
    except Exception as e:
        # Failed lookups are dropped from the batch, never retried
        logger.debug("item_lookup_failed", item_id=item_id, error=repr(e))
    finally:
        results.put_nowait(FetchResult(index, story))


async def fetch_stories(
    source: ItemSource,
    ids: Sequence[int],
    *,
    timeout: Optional[float] = None,
    semaphore: Optional[asyncio.Semaphore] = None,
) -> list[Optional[DisplayItem]]:
    """
    Look up every id concurrently and return the results in input order.

    One task is started per id. Each task reports to a shared queue tagged
    with its position; once all ``len(ids)`` reports are in, they are sorted
    back into input order. A failed or timed-out lookup yields ``None`` at
    its position instead of failing the batch.
    """
    if not ids:
        return []

    results: asyncio.Queue[FetchResult] = asyncio.Queue()
    tasks = [
        asyncio.create_task(
            _fetch_one(source, i, item_id, results, timeout, semaphore)
        )
        for i, item_id in enumerate(ids)
    ]

    collected: list[FetchResult] = []
    try:
        for _ in range(len(ids)):
            collected.append(await results.get())
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()

    collected.sort(key=lambda r: r.index)
    return [r.story for r in collected]


async def collect_stories(
    source: ItemSource,
    ids: Sequence[int],
    want: int,
    *,
    timeout: Optional[float] = None,
    semaphore: Optional[asyncio.Semaphore] = None,
) -> list[DisplayItem]:
    """
    Walk ``ids`` in windows until ``want`` link stories are found.

    Each round asks for the remaining count plus a 25% margin, since
    comments, jobs and self-posts get filtered out. If ``ids`` runs out
    first, the stories found so far are returned.
    """
    if want <= 0:
        raise ValueError(f"want must be positive, got {want}")

    stories: list[DisplayItem] = []
    current = 0
    rounds = 0
    while len(stories) < want:
        if current >= len(ids):
            logger.warning(
                "insufficient_candidates",
                want=want,
                found=len(stories),
                candidates=len(ids),
            )
            break

        need = math.ceil((want - len(stories)) * OVERFETCH_RATIO)
        window = ids[current : min(current + need, len(ids))]
        current += len(window)
        rounds += 1

        batch = await fetch_stories(
            source, window, timeout=timeout, semaphore=semaphore
        )
        kept = [story for story in batch if is_story_link(story)]
        stories.extend(kept)
        logger.debug(
            "fetch_round",
            round=rounds,
            requested=len(window),
            resolved=sum(1 for s in batch if s is not None),
            kept=len(kept),
        )

    return stories[:want]


async def get_top_stories(
    source: ItemSource,
    want: int,
    *,
    timeout: Optional[float] = None,
    max_concurrency: int = 0,
) -> list[DisplayItem]:
    """Fetch the first ``want`` link stories from the top-items ranking.

    Raises ``ListingUnavailable`` if the ranking itself cannot be loaded.
    """
    start = time.perf_counter()
    ids = await source.top_items()
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None
    stories = await collect_stories(
        source, ids, want, timeout=timeout or None, semaphore=semaphore
    )
    logger.info(
        "top_stories_fetched",
        want=want,
        found=len(stories),
        candidates=len(ids),
        elapsed_ms=round((time.perf_counter() - start) * 1000, 1),
    )
    return stories
