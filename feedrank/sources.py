# feedrank/sources.py
"""
Feed list + feed fetching.

The feed list is a plain text file, one URL per line, '#' starts a comment:

    # RSS Feed URLs (one per line)
    https://news.ycombinator.com/rss

Call fetch_all(load_feed_urls(path)) to pull every feed concurrently and get a
single merged List[FeedItem] back, in feed-list order. One broken feed never
sinks the others.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional
import time

import feedparser
from feedparser.datetimes import _parse_date
import requests

from .config import FETCH_TIMEOUT, FETCH_WORKERS, MAX_ARTICLES_PER_FEED, USER_AGENT
from .items import FeedItem
from .logging_setup import get_logger

logger = get_logger("feedrank.sources")

DEFAULT_FEEDS: List[str] = [
    "https://lessnews.dev/rss.xml",
    "https://blog.golang.org/feed.atom",
    "https://news.ycombinator.com/rss",
    "https://dev.to/feed",
]

FEEDS_HEADER = (
    "# RSS Feed URLs (one per line)\n"
    "# Lines starting with # are comments\n"
    "# Example: https://example.com/feed.xml\n\n"
)

_FEED_SUFFIXES = (".xml", ".rss", ".atom", "/feed", "/rss")

# ---------- Utilities ----------

def is_valid_feed_url(url: str) -> bool:
    return url.startswith("http://") or url.startswith("https://")

def looks_like_feed(url: str) -> bool:
    u = url.lower()
    return u.endswith(_FEED_SUFFIXES) or "feed" in u or "rss" in u

def _parse_feed_datetime(entry) -> Optional[datetime]:
    """Best-effort date for a feedparser entry."""
    tt = getattr(entry, "published_parsed", None) or getattr(entry, "updated_parsed", None)
    if not tt:
        raw = getattr(entry, "published", "") or getattr(entry, "updated", "")
        if not raw:
            return None
        try:
            tt = _parse_date(raw)
        except Exception:
            return None
    if not tt:
        return None
    return datetime(*tt[:6], tzinfo=timezone.utc)

# ---------- Feed list file ----------

def save_feed_urls(path: Path, feeds: Iterable[str]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(FEEDS_HEADER + "".join(f"{f}\n" for f in feeds), encoding="utf-8")
    logger.info("FEEDS_SAVED", extra={"path": str(path)})

def load_feed_urls(path: Path) -> List[str]:
    """
    Read the feed list. A missing file is created with DEFAULT_FEEDS.
    Lines that are not http(s) URLs are skipped and reported together.
    """
    path = Path(path)
    if not path.exists():
        save_feed_urls(path, DEFAULT_FEEDS)
        return list(DEFAULT_FEEDS)

    feeds: List[str] = []
    invalid: List[str] = []
    for line_num, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        url = line.strip()
        if not url or url.startswith("#"):
            continue
        if not is_valid_feed_url(url):
            invalid.append(f"line {line_num}: {url}")
            continue
        feeds.append(url)

    if invalid:
        logger.warning("FEEDS_INVALID_LINES", extra={"path": str(path), "invalid": invalid})
    logger.info("FEEDS_LOADED", extra={"path": str(path), "count": len(feeds)})
    return feeds

def add_feed_url(path: Path, url: str) -> List[str]:
    """Append `url` to the feed list (no-op if already present)."""
    url = url.strip()
    if not is_valid_feed_url(url):
        raise ValueError(f"Invalid feed URL (must start with http:// or https://): {url}")
    feeds = load_feed_urls(path)
    if url not in feeds:
        feeds.append(url)
        save_feed_urls(path, feeds)
    return feeds

# ---------- Fetching ----------

def _to_items(feed, source: str, max_items: int) -> List[FeedItem]:
    return [
        FeedItem(
            title=getattr(e, "title", "") or "",
            description=getattr(e, "summary", "") or getattr(e, "description", "") or "",
            link=getattr(e, "link", "") or "",
            published=_parse_feed_datetime(e),
            feed_source=source,
        )
        for e in feed.entries[:max_items]
    ]

def parse_feed(url: str, max_items: int = MAX_ARTICLES_PER_FEED) -> List[FeedItem]:
    """Fetch and parse one feed. Errors are logged and yield []."""
    if not is_valid_feed_url(url):
        logger.warning("FEED_URL_INVALID", extra={"url": url})
        return []
    if not looks_like_feed(url):
        logger.warning("FEED_URL_SUSPICIOUS", extra={"url": url})

    t0 = time.perf_counter()
    try:
        r = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=FETCH_TIMEOUT)
        r.raise_for_status()
        feed = feedparser.parse(r.content)
        source = feed.feed.get("title", url)
        items = _to_items(feed, source, max_items)
    except Exception as e:
        logger.exception("FEED_FETCH_FAILED", extra={"url": url, "error": type(e).__name__})
        return []

    if not items:
        logger.warning("FEED_EMPTY", extra={"url": url})
        return []
    logger.info(
        "FEED_OK",
        extra={"url": url, "source": source, "count": len(items),
               "elapsed_ms": round((time.perf_counter() - t0) * 1000)},
    )
    return items

# ---------- Orchestrator ----------

def fetch_all(
    feeds: Iterable[str],
    max_items_per_feed: int = MAX_ARTICLES_PER_FEED,
    workers: int = FETCH_WORKERS,
) -> List[FeedItem]:
    """
    Fetch every feed concurrently and merge the results in feed-list order.
    Items are not deduplicated across feeds.
    """
    feeds = list(feeds)
    if not feeds:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(feeds)))) as pool:
        batches = list(pool.map(lambda u: parse_feed(u, max_items_per_feed), feeds))
    merged: List[FeedItem] = []
    for batch in batches:
        merged.extend(batch)
    return merged
