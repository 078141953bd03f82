# feedrank/scheduler.py
from datetime import datetime
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED
import pytz

from .config import TIMEZONE, AUTO_REFRESH_MINUTES
from .workflow import refresh_feeds
from .logging_setup import get_logger

logger = get_logger("feedrank.scheduler")
scheduler = BackgroundScheduler(timezone=pytz.timezone(TIMEZONE))

REFRESH_JOB_ID = "refresh_feeds"

def _job_listener(event):
    if event.exception:
        logger.error(
            "JOB_ERROR",
            exc_info=(type(event.exception), event.exception, event.exception.__traceback__),
            extra={"handled": False, "job_id": event.job_id, "run_time": str(event.scheduled_run_time)},
        )
    else:
        logger.info("JOB_OK", extra={"job_id": event.job_id, "run_time": str(event.scheduled_run_time)})

def add_jobs(minutes: int = AUTO_REFRESH_MINUTES, run_now: bool = False) -> bool:
    """Register the periodic refresh. Returns False when disabled (minutes <= 0)."""
    if minutes <= 0:
        logger.info("Auto refresh disabled")
        return False
    kwargs = {"next_run_time": datetime.now(scheduler.timezone)} if run_now else {}
    scheduler.add_job(
        refresh_feeds,
        IntervalTrigger(minutes=minutes),
        id=REFRESH_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        **kwargs,
    )
    scheduler.add_listener(_job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)
    logger.info(f"Job registered: {REFRESH_JOB_ID} every {minutes} min ({TIMEZONE})")
    return True

def start_scheduler():
    if not scheduler.running:
        scheduler.start()
        logger.info("APScheduler started")

def shutdown_scheduler(wait: bool = False):
    if scheduler.running:
        scheduler.shutdown(wait=wait)
        logger.info("APScheduler stopped")
