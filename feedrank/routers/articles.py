from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..config import DEFAULT_PAGE_SIZE, DEFAULT_USER
from ..items import SearchOptions
from ..logging_setup import get_logger
from ..schema import InterestingIn, ReadIn
from .. import workflow

logger = get_logger("feedrank.routes.articles")

router = APIRouter()

@router.get("/recommendations")
def get_recommendations(
    user: str = Query(DEFAULT_USER),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=500),
    order: str = Query("score", pattern="^(score|date)$"),
):
    return {"user": user, "order": order, "items": workflow.recommend(user, limit=limit, order=order)}

@router.get("/interests")
def get_interests(user: str = Query(DEFAULT_USER), limit: Optional[int] = Query(None, ge=1)):
    return {"user": user, "interests": workflow.list_interests(user, limit)}

@router.post("/articles/interesting")
def post_interesting(body: InterestingIn):
    logger.info(f"Interesting: user={body.user} link={body.link}")
    try:
        return workflow.mark_interesting(body.user, body.link, body.title, body.description)
    except workflow.ArticleNotFound:
        raise HTTPException(status_code=404, detail=f"Unknown article: {body.link}")

@router.post("/articles/read")
def post_read(body: ReadIn):
    return workflow.mark_read(body.user, body.link)

@router.get("/search")
def get_search(
    q: str = Query("", description="Space separated words; any match counts"),
    source: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
):
    opts = SearchOptions(start_date=start, end_date=end, source=source)
    return {"q": q, "items": workflow.search_articles(q, opts)}
