# feedrank/exception_handling.py
from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .logging_setup import get_logger

logger = get_logger("feedrank.exceptions")


async def http_exception_handler(request: Request, exc: HTTPException):
    # Client errors are expected traffic; no traceback for those
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "HTTP_EXCEPTION",
        extra={"handled": True, "path": str(request.url.path), "status_code": exc.status_code, "detail": exc.detail},
    )
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "UNHANDLED_EXCEPTION",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"handled": False, "path": str(request.url.path), "error": type(exc).__name__},
    )
    return JSONResponse({"detail": "Internal Server Error"}, status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    """Call from feedrank/main.py right after creating the app."""
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
