from fastapi import APIRouter, HTTPException

from ..config import FEEDS_FILE
from ..logging_setup import get_logger
from ..schema import FeedIn
from .. import sources, workflow

logger = get_logger("feedrank.routes.feeds")

router = APIRouter(prefix="/feeds")

@router.get("")
def list_feeds():
    refreshed = workflow.cache.refreshed_at
    return {
        "feeds": sources.load_feed_urls(FEEDS_FILE),
        "cached_articles": len(workflow.cache.snapshot()),
        "refreshed_at": refreshed.isoformat() if refreshed else None,
    }

@router.post("")
def add_feed(body: FeedIn):
    logger.info(f"Adding feed {body.url}")
    try:
        feeds = sources.add_feed_url(FEEDS_FILE, body.url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "feeds": feeds}

@router.post("/refresh")
def refresh():
    logger.info("Manual refresh invoked")
    return workflow.refresh_feeds()
