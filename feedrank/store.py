"""
store.py
========
This module is the *persistence gateway* for interest profiles.

It does four things:
1) Creates a connection "engine" to the database.
2) Creates tables (once) based on the SQLModel classes in models.py.
3) Provides a helper to open a database "Session".
4) Converts between the in-memory InterestProfile and its ProfileRecord row,
   and serializes load-mutate-save cycles per user.

The profile model itself knows nothing about SQL; it only exposes its fields.
"""

from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import Dict, Iterator, Optional

from sqlmodel import SQLModel, Session, create_engine, select

from .config import DB_FILE
from .logging_setup import get_logger
from .models import ProfileRecord
from .profile import InterestProfile

logger = get_logger("feedrank.store")

# SQLite file next to the feed list by default; DB_FILE overrides.
# check_same_thread=False because FastAPI runs sync endpoints in a threadpool
# and the refresh job runs on the scheduler's thread.
Path(DB_FILE).parent.mkdir(parents=True, exist_ok=True)
DB_URL = f"sqlite:///{DB_FILE}"
engine = create_engine(DB_URL, echo=False, connect_args={"check_same_thread": False})


def init_db() -> None:
    """
    Create all tables for the SQLModel classes in models.py.
    Safe to call on every startup; it only creates missing tables.
    """
    from . import models  # noqa: F401  (import just to register models with SQLModel)

    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    """
    Open a database Session bound to our engine.

    Usage pattern:
      with get_session() as session:
          ...
          session.commit()
    """
    return Session(engine)


# ---- Profile <-> row ----

def _to_profile(rec: ProfileRecord) -> InterestProfile:
    return InterestProfile.from_dict({
        "interests": rec.interests,
        "read_articles": rec.read_articles,
        "last_updated": rec.last_updated,
    })


def _get_record(s: Session, user_id: str) -> Optional[ProfileRecord]:
    return s.exec(select(ProfileRecord).where(ProfileRecord.user_id == user_id)).first()


def load_profile(s: Session, user_id: str) -> InterestProfile:
    """Stored profile for `user_id`, or a fresh empty one (not yet saved)."""
    rec = _get_record(s, user_id)
    if rec is None:
        logger.info("PROFILE_NEW", extra={"user": user_id})
        return InterestProfile.new()
    return _to_profile(rec)


def save_profile(s: Session, user_id: str, profile: InterestProfile) -> None:
    # to_dict hands over fresh containers; JSON columns only notice reassignment
    data = profile.to_dict()
    rec = _get_record(s, user_id) or ProfileRecord(user_id=user_id)
    rec.interests = data["interests"]
    rec.read_articles = data["read_articles"]
    rec.last_updated = profile.last_updated
    s.add(rec)
    s.commit()
    logger.debug(
        "PROFILE_SAVED",
        extra={"user": user_id, "interests": len(profile.interests), "read": len(profile.read_articles)},
    )


# ---- One owner per profile ----

_locks: Dict[str, Lock] = {}
_locks_guard = Lock()


def _user_lock(user_id: str) -> Lock:
    with _locks_guard:
        return _locks.setdefault(user_id, Lock())


@contextmanager
def profile_session(user_id: str, save: bool = True) -> Iterator[InterestProfile]:
    """
    Load `user_id`'s profile, hand it to the caller, then save it back.
    The per-user lock is held for the whole cycle so concurrent requests for
    the same user cannot interleave. Nothing is saved if the block raises.
    """
    with _user_lock(user_id):
        with get_session() as s:
            profile = load_profile(s, user_id)
            yield profile
            if save:
                save_profile(s, user_id, profile)
