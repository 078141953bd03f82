# feedrank/lifespan.py
from contextlib import asynccontextmanager
from fastapi import FastAPI

from .logging_setup import get_logger
from .store import init_db
from .scheduler import add_jobs, start_scheduler, shutdown_scheduler

logger = get_logger("feedrank.lifespan")

@asynccontextmanager
async def lifespan(app: FastAPI):
    # ---- Startup ----
    logger.info("APP STARTUP")
    init_db()

    if not getattr(app.state, "scheduler_started", False):
        # first refresh fires immediately, then every AUTO_REFRESH_MINUTES
        add_jobs(run_now=True)
        start_scheduler()
        app.state.scheduler_started = True

    yield

    # ---- Shutdown ----
    logger.info("APP SHUTDOWN")
    if getattr(app.state, "scheduler_started", False):
        shutdown_scheduler(wait=False)
        app.state.scheduler_started = False
