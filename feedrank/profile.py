# feedrank/profile.py
"""
profile.py
==========
The per-user interest profile.

A profile is a bag of weighted keywords plus the set of article links the user
has already seen. Every time the user marks an article as interesting we:

1) add 1.0 per keyword occurrence in the article text,
2) decay *all* weights by 0.95 per elapsed day since the last update,
3) drop anything that decayed below MIN_WEIGHT,
4) trim down to MAX_INTERESTS by evicting the lightest keywords.

Decay only happens inside update(), so an untouched profile keeps its weights
until the next interaction. There is no background timer.

The profile does no locking. If several threads share one, wrap it in
LockedProfile (or go through store.profile_session, which does the same for
persisted profiles).
"""

from __future__ import annotations

import threading
from bisect import bisect_right
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set, Tuple

from .items import as_utc
from .keywords import extract_keywords

MAX_INTERESTS = 100   # max number of keywords kept
MIN_WEIGHT = 0.1      # anything below this after decay is dropped
DECAY_FACTOR = 0.95   # per-day multiplier


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def decay_multiplier(since: datetime, now: datetime) -> float:
    """DECAY_FACTOR ** (elapsed_hours / 24); never above 1.0."""
    elapsed_hours = max(0.0, (now - since).total_seconds() / 3600.0)
    return DECAY_FACTOR ** (elapsed_hours / 24.0)


def trim_threshold(weights: List[float], capacity: int = MAX_INTERESTS) -> Optional[float]:
    """
    Return the weight below which keywords are evicted, or None when nothing
    needs trimming.

    Sorted ascending, the cutoff is the weight at index len - capacity. If ties
    at that value would still leave more than `capacity` entries, the cutoff
    moves up to the next distinct weight and the whole tied group goes
    (float("inf") when everything is tied). So a fresh profile fed one
    article with more than `capacity` distinct keywords, all at weight 1.0,
    comes out empty.
    """
    if len(weights) <= capacity:
        return None
    ordered = sorted(weights)
    threshold = ordered[len(ordered) - capacity]
    if len(ordered) - ordered.index(threshold) > capacity:
        nxt = bisect_right(ordered, threshold)
        threshold = ordered[nxt] if nxt < len(ordered) else float("inf")
    return threshold


@dataclass
class InterestProfile:
    interests: Dict[str, float] = field(default_factory=dict)
    read_articles: Set[str] = field(default_factory=set)
    last_updated: datetime = field(default_factory=_utc_now)

    @classmethod
    def new(cls, now: Optional[datetime] = None) -> "InterestProfile":
        return cls(last_updated=as_utc(now) or _utc_now())

    # ---- Mutations ----

    def update(self, text: str, now: Optional[datetime] = None) -> None:
        now = as_utc(now) or _utc_now()
        last = as_utc(self.last_updated) or now

        for word in extract_keywords(text):
            self.interests[word] = self.interests.get(word, 0.0) + 1.0

        multiplier = decay_multiplier(last, now)
        for word, weight in list(self.interests.items()):
            decayed = weight * multiplier
            if decayed < MIN_WEIGHT:
                del self.interests[word]
            else:
                self.interests[word] = decayed

        threshold = trim_threshold(list(self.interests.values()))
        if threshold is not None:
            for word, weight in list(self.interests.items()):
                if weight < threshold:
                    del self.interests[word]

        self.last_updated = max(last, now)

    def mark_read(self, link: str) -> None:
        self.read_articles.add(link)

    # ---- Queries ----

    def is_read(self, link: str) -> bool:
        return link in self.read_articles

    def top_interests(self, limit: Optional[int] = None) -> List[Tuple[str, float]]:
        ranked = sorted(self.interests.items(), key=lambda kv: (-kv[1], kv[0]))
        return ranked if limit is None else ranked[:limit]

    # ---- Serialization (field names are the store's business) ----

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interests": dict(self.interests),
            "read_articles": sorted(self.read_articles),
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InterestProfile":
        last = data.get("last_updated")
        if isinstance(last, str):
            last = datetime.fromisoformat(last)
        return cls(
            interests={str(k): float(v) for k, v in (data.get("interests") or {}).items()},
            read_articles=set(data.get("read_articles") or []),
            last_updated=as_utc(last) or _utc_now(),
        )


class LockedProfile:
    """
    Single-owner wrapper for a profile shared between threads:

        guard = LockedProfile(profile)
        with guard as p:
            p.update(text)
    """

    def __init__(self, profile: Optional[InterestProfile] = None):
        self._profile = profile or InterestProfile.new()
        self._lock = threading.Lock()

    def __enter__(self) -> InterestProfile:
        self._lock.acquire()
        return self._profile

    def __exit__(self, exc_type, exc, tb) -> None:
        self._lock.release()
