from __future__ import annotations

import logging
from typing import Protocol

import httpx

from quiet_hn.constants import (
    HN_API_BASE,
    HN_HTTP_CONNECT_TIMEOUT,
    HN_HTTP_TIMEOUT,
    HN_ITEM_PATH,
    HN_TOP_STORIES_PATH,
)
from quiet_hn.models import Item, MalformedItem

logger = logging.getLogger(__name__)


class HNAPIError(Exception):
    """Base error for upstream API failures."""


class ListingUnavailable(HNAPIError):
    """The top-item listing could not be loaded."""


class ItemUnavailable(HNAPIError):
    """A single item could not be loaded."""


class ItemSource(Protocol):
    async def top_items(self) -> list[int]: ...

    async def get_item(self, item_id: int) -> Item: ...


class HNClient:
    """Minimal async client for the Hacker News Firebase API."""

    def __init__(
        self,
        base_url: str = HN_API_BASE,
        timeout: float = HN_HTTP_TIMEOUT,
    ) -> None:
        self.client: httpx.AsyncClient = httpx.AsyncClient(
            base_url=base_url,
            follow_redirects=True,
            timeout=httpx.Timeout(timeout, connect=HN_HTTP_CONNECT_TIMEOUT),
        )

    async def top_items(self) -> list[int]:
        try:
            resp: httpx.Response = await self.client.get(HN_TOP_STORIES_PATH)
        except httpx.HTTPError as e:
            raise ListingUnavailable(f"Failed to load top stories: {e}") from e
        if resp.status_code != 200:
            raise ListingUnavailable(
                f"Failed to load top stories: HTTP {resp.status_code}"
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise ListingUnavailable("Failed to load top stories: invalid JSON") from e
        if not isinstance(data, list):
            raise ListingUnavailable("Failed to load top stories: expected a list")

        ids: list[int] = []
        for raw in data:
            if isinstance(raw, int) and not isinstance(raw, bool):
                ids.append(raw)
            else:
                logger.debug(f"Skipping non-integer top item id {raw!r}")
        return ids

    async def get_item(self, item_id: int) -> Item:
        try:
            resp: httpx.Response = await self.client.get(
                HN_ITEM_PATH.format(id=item_id)
            )
        except httpx.HTTPError as e:
            raise ItemUnavailable(f"Failed to load item {item_id}: {e}") from e
        if resp.status_code != 200:
            raise ItemUnavailable(
                f"Failed to load item {item_id}: HTTP {resp.status_code}"
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedItem(f"item {item_id}: invalid JSON") from e
        # Firebase answers null for unknown and deleted-without-trace items
        if data is None:
            raise ItemUnavailable(f"Item {item_id} not found")
        return Item.from_dict(data)

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> HNClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
