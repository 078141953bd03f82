from fastapi import APIRouter
from ..logging_setup import get_logger
from .. import workflow

logger = get_logger("feedrank.routes.health")

router = APIRouter()

@router.get("/health")
def health():
    logger.debug("Health check invoked")
    return {"status": "ok"}

@router.get("/")
def read_root():
    logger.debug("Root hit")
    return {
        "status": "ok",
        "message": "feedrank: personalized feed ranking",
        "cached_articles": len(workflow.cache.snapshot()),
    }
