from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Optional

from quiet_hn.constants import STORY_CACHE_TTL
from quiet_hn.logging_config import get_logger
from quiet_hn.models import DisplayItem

logger = get_logger(__name__)

ComputeFn = Callable[[int], Awaitable[list[DisplayItem]]]


class StoryCache:
    """
    Single-slot, time-limited cache for the rendered story list.

    Every requester shares the one slot. The expiry check, the recompute and
    the store run under one lock, so concurrent misses trigger a single
    upstream fetch and later waiters read its result. The requested count is
    not part of the key: within the window every caller gets the last list
    computed, whatever count it asked for.
    """

    def __init__(
        self,
        ttl: float = STORY_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._lock = asyncio.Lock()
        self._data: list[DisplayItem] = []
        self._expires_at: Optional[float] = None

    @property
    def data(self) -> list[DisplayItem]:
        return list(self._data)

    @property
    def expires_at(self) -> Optional[float]:
        return self._expires_at

    def is_fresh(self) -> bool:
        return self._expires_at is not None and self._clock() < self._expires_at

    async def get_or_compute(self, want: int, compute: ComputeFn) -> list[DisplayItem]:
        async with self._lock:
            if self.is_fresh():
                logger.debug("story_cache_hit", want=want, size=len(self._data))
                return list(self._data)

            logger.info("story_cache_miss", want=want)
            # On failure the previous entry is left as it was
            stories = await compute(want)
            self._data = list(stories)
            self._expires_at = self._clock() + self.ttl
            return list(self._data)

    def invalidate(self) -> None:
        self._data = []
        self._expires_at = None
