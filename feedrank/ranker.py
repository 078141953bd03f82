# feedrank/ranker.py
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional

from .items import ArticleScore, FeedItem, SearchOptions, SearchResult, as_utc
from .profile import InterestProfile

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def score_item(item: FeedItem, interests: Mapping[str, float]) -> float:
    # Substring containment on purpose: "net" also matches "network".
    t = item.text.lower()
    return float(sum(weight for kw, weight in interests.items() if kw.lower() in t))


def _unread_scored(items: Iterable[FeedItem], profile: InterestProfile) -> List[ArticleScore]:
    scored: List[ArticleScore] = []
    for it in items:
        if profile.is_read(it.link):
            continue
        score = score_item(it, profile.interests)
        if score > 0:
            scored.append(ArticleScore(item=it, score=score))
    return scored


def rank(items: Iterable[FeedItem], profile: InterestProfile) -> List[ArticleScore]:
    """
    Recommendations, best first. Read links and zero scores are dropped;
    equal scores keep their input order. No truncation here.
    """
    # sorted() is stable, reverse=True included
    return sorted(_unread_scored(items, profile), key=lambda s: s.score, reverse=True)


def sort_by_date(items: Iterable[FeedItem], profile: InterestProfile) -> List[ArticleScore]:
    """Same filtering as rank(), newest first; undated items go last."""
    return sorted(
        _unread_scored(items, profile),
        key=lambda s: (s.item.published is not None, as_utc(s.item.published) or _EPOCH),
        reverse=True,
    )


def _in_window(published: Optional[datetime], options: SearchOptions) -> bool:
    if not options.start_date and not options.end_date:
        return True
    published = as_utc(published)
    if published is None:
        return False
    if options.start_date and published < as_utc(options.start_date):
        return False
    if options.end_date and published > as_utc(options.end_date):
        return False
    return True


def search(items: Iterable[FeedItem], term: str, options: Optional[SearchOptions] = None) -> List[SearchResult]:
    options = options or SearchOptions()
    words: List[str] = []
    for w in (term or "").lower().split():
        if w not in words:
            words.append(w)
    source = (options.source or "").strip().lower()

    results: List[SearchResult] = []
    for it in items:
        if source and (it.feed_source or "").lower() != source:
            continue
        if not _in_window(it.published, options):
            continue
        t = it.text.lower()
        matches = [w for w in words if w in t]
        if words and not matches:
            continue
        results.append(SearchResult(item=it, matches=matches))

    return sorted(results, key=lambda r: r.match_count, reverse=True)


def interest_listing(profile: InterestProfile, limit: Optional[int] = None) -> List[Dict[str, float]]:
    return [{"keyword": kw, "weight": round(w, 4)} for kw, w in profile.top_interests(limit)]
