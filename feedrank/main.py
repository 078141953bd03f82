# feedrank/main.py
from fastapi import FastAPI

from .logging_setup import setup_logging, get_logger
from .middleware import RequestContextMiddleware
from .exception_handling import register_exception_handlers
from .lifespan import lifespan

from .routers import health, articles, feeds

setup_logging()  # <-- set up logging ASAP
logger = get_logger("feedrank.main")

app = FastAPI(title="feedrank", version="0.1.0", lifespan=lifespan)
app.add_middleware(RequestContextMiddleware)

register_exception_handlers(app)

app.include_router(health.router)
app.include_router(articles.router)
app.include_router(feeds.router)
