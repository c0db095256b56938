"""Typed data models for quiet-hn."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple, Optional, TypedDict


class MalformedItem(ValueError):
    """Upstream payload could not be read as an item."""


class DisplayItemDict(TypedDict):
    """Serialized DisplayItem payload for API boundaries."""

    id: int
    type: str
    title: str
    url: str
    host: str
    by: str
    score: int
    time: int
    descendants: int


_KNOWN_FIELDS = ("id", "type", "title", "url", "by", "score", "time", "descendants", "text")


@dataclass(frozen=True)
class Item:
    """A resolved Hacker News item."""

    id: int
    type: str = ""
    title: str = ""
    url: str = ""
    by: str = ""
    score: int = 0
    time: int = 0
    descendants: int = 0
    text: str = ""
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, d: Any) -> Item:
        """Create Item from an upstream JSON object."""
        if not isinstance(d, dict):
            raise MalformedItem(f"expected object, got {type(d).__name__}")
        item_id = d.get("id")
        if not isinstance(item_id, int) or isinstance(item_id, bool):
            raise MalformedItem(f"missing or invalid id: {item_id!r}")
        try:
            return cls(
                id=item_id,
                type=str(d.get("type") or ""),
                title=str(d.get("title") or ""),
                url=str(d.get("url") or ""),
                by=str(d.get("by") or ""),
                score=int(d.get("score") or 0),
                time=int(d.get("time") or 0),
                descendants=int(d.get("descendants") or 0),
                text=str(d.get("text") or ""),
                extra={k: v for k, v in d.items() if k not in _KNOWN_FIELDS},
            )
        except (TypeError, ValueError) as e:
            raise MalformedItem(f"item {item_id}: {e}") from e


@dataclass(frozen=True)
class DisplayItem:
    """An Item plus the host name shown next to its title."""

    item: Item
    host: str = ""

    @property
    def id(self) -> int:
        return self.item.id

    @property
    def type(self) -> str:
        return self.item.type

    @property
    def title(self) -> str:
        return self.item.title

    @property
    def url(self) -> str:
        return self.item.url

    def to_dict(self) -> DisplayItemDict:
        """Convert to dict for JSON responses."""
        return {
            "id": self.item.id,
            "type": self.item.type,
            "title": self.item.title,
            "url": self.item.url,
            "host": self.host,
            "by": self.item.by,
            "score": self.item.score,
            "time": self.item.time,
            "descendants": self.item.descendants,
        }


class FetchResult(NamedTuple):
    """Lookup outcome tagged with its position in the requested batch."""

    index: int  # Position in the ids passed to fetch_stories
    story: Optional[DisplayItem]  # None when the lookup failed
