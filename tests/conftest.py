import asyncio
from typing import Optional

import pytest

from quiet_hn.client import ItemUnavailable, ListingUnavailable
from quiet_hn.models import Item


class FakeSource:
    """
    In-memory ItemSource. Items are looked up by id; ids in ``failing``
    raise ItemUnavailable and ids in ``delays`` sleep before answering.
    """

    def __init__(
        self,
        items: dict[int, Item],
        order: Optional[list[int]] = None,
        failing: Optional[set[int]] = None,
        delays: Optional[dict[int, float]] = None,
        listing_error: bool = False,
    ):
        self.items = items
        self.order = order if order is not None else list(items)
        self.failing = failing or set()
        self.delays = delays or {}
        self.listing_error = listing_error
        self.requested: list[int] = []
        self.listing_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def top_items(self) -> list[int]:
        self.listing_calls += 1
        if self.listing_error:
            raise ListingUnavailable("Failed to load top stories")
        return list(self.order)

    async def get_item(self, item_id: int) -> Item:
        self.requested.append(item_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(item_id, 0)
            if delay:
                await asyncio.sleep(delay)
            if item_id in self.failing or item_id not in self.items:
                raise ItemUnavailable(f"Item {item_id} not found")
            return self.items[item_id]
        finally:
            self.in_flight -= 1


def story(item_id: int, url: Optional[str] = None, type: str = "story") -> Item:
    if url is None:
        url = f"https://www.example.com/{item_id}"
    return Item(id=item_id, type=type, title=f"Story {item_id}", url=url)


@pytest.fixture
def make_source():
    return FakeSource
