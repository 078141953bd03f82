# feedrank/workflow.py
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, List, Optional
from collections import Counter
import uuid
import time

from . import sources
from .config import DEFAULT_PAGE_SIZE, FEEDS_FILE
from .items import FeedItem, SearchOptions
from .logging_setup import get_logger
from .ranker import interest_listing, rank, search, sort_by_date
from .store import profile_session

logger = get_logger("feedrank.workflow")


class ArticleNotFound(LookupError):
    pass


class FeedCache:
    """Latest merged batch of fetched articles. Readers get a snapshot copy."""

    def __init__(self) -> None:
        self._items: List[FeedItem] = []
        self._lock = Lock()
        self.refreshed_at: Optional[datetime] = None

    def replace(self, items: List[FeedItem]) -> None:
        with self._lock:
            self._items = list(items)
            self.refreshed_at = datetime.now(timezone.utc)

    def snapshot(self) -> List[FeedItem]:
        with self._lock:
            return list(self._items)

    def find(self, link: str) -> Optional[FeedItem]:
        for it in self.snapshot():
            if it.link == link:
                return it
        return None


cache = FeedCache()


def refresh_feeds() -> Dict[str, Any]:
    """
    Re-read the feed list, fetch every feed and swap the cache.
    Runs from the scheduler, the lifespan hook and POST /feeds/refresh.
    """
    run_id = uuid.uuid4().hex[:8]
    t0 = time.perf_counter()
    logger.info("REFRESH_START", extra={"run_id": run_id})

    try:
        feeds = sources.load_feed_urls(FEEDS_FILE)
        items = sources.fetch_all(feeds)
    except Exception as e:
        logger.exception("REFRESH_FATAL", extra={"run_id": run_id, "handled": False, "error": type(e).__name__})
        raise

    cache.replace(items)
    per_source = Counter(it.feed_source or "unknown" for it in items)
    logger.info(
        "REFRESH_OK",
        extra={
            "run_id": run_id,
            "feeds": len(feeds),
            "count": len(items),
            "per_source": dict(per_source),
            "elapsed_ms": round((time.perf_counter() - t0) * 1000),
        },
    )
    return {"feeds": len(feeds), "articles": len(items), "per_source": dict(per_source)}


def recommend(user_id: str, limit: Optional[int] = DEFAULT_PAGE_SIZE, order: str = "score") -> List[Dict[str, Any]]:
    items = cache.snapshot()
    with profile_session(user_id, save=False) as profile:
        ranked = sort_by_date(items, profile) if order == "date" else rank(items, profile)
    top = ranked if limit is None else ranked[:limit]
    logger.info(
        "RECOMMEND",
        extra={
            "user": user_id,
            "order": order,
            "candidates": len(items),
            "matched": len(ranked),
            "top5_scores": [round(s.score, 4) for s in top[:5]],
        },
    )
    return [s.to_dict() for s in top]


def list_interests(user_id: str, limit: Optional[int] = None) -> List[Dict[str, float]]:
    with profile_session(user_id, save=False) as profile:
        return interest_listing(profile, limit)


def mark_interesting(
    user_id: str,
    link: str,
    title: Optional[str] = None,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """
    The user liked an article: learn from its text and mark it read.
    Text comes from the request when given, otherwise from the cache.
    """
    if title is None and description is None:
        item = cache.find(link)
        if item is None:
            raise ArticleNotFound(link)
        title, description = item.title, item.description

    with profile_session(user_id) as profile:
        before = len(profile.interests)
        profile.update(f"{title or ''} {description or ''}")
        profile.mark_read(link)
        after = len(profile.interests)

    logger.info("PROFILE_UPDATED", extra={"user": user_id, "link": link, "interests_before": before, "interests_after": after})
    return {"ok": True, "interests": after}


def mark_read(user_id: str, link: str) -> Dict[str, Any]:
    with profile_session(user_id) as profile:
        profile.mark_read(link)
        read = len(profile.read_articles)
    logger.info("ARTICLE_READ", extra={"user": user_id, "link": link})
    return {"ok": True, "read": read}


def search_articles(term: str, options: Optional[SearchOptions] = None) -> List[Dict[str, Any]]:
    results = search(cache.snapshot(), term, options)
    logger.info("SEARCH", extra={"term": term, "results": len(results)})
    return [r.to_dict() for r in results]
