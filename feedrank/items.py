# feedrank/items.py
"""
Plain value types passed between the feed fetcher, the ranker and the API.
Nothing here talks to the network or the database.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are assumed to be UTC (SQLite drops tzinfo)."""
    if not dt:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class FeedItem:
    title: str = ""
    description: str = ""
    link: str = ""
    published: Optional[datetime] = None
    feed_source: str = ""

    @property
    def text(self) -> str:
        # title and description joined by a single space
        return f"{self.title or ''} {self.description or ''}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "link": self.link,
            "published": self.published.isoformat() if self.published else None,
            "feed_source": self.feed_source,
        }


@dataclass
class ArticleScore:
    item: FeedItem
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {**self.item.to_dict(), "score": round(self.score, 4)}


@dataclass
class SearchOptions:
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    source: Optional[str] = None


@dataclass
class SearchResult:
    item: FeedItem
    matches: List[str] = field(default_factory=list)

    @property
    def match_count(self) -> int:
        return len(self.matches)

    def to_dict(self) -> Dict[str, Any]:
        return {**self.item.to_dict(), "matches": self.matches, "match_count": self.match_count}
