# feedrank/logging_setup.py
import logging
from logging.config import dictConfig
from logging import LogRecord
from pathlib import Path
import contextvars
import os

# ---- Correlation ID (set per request by the middleware) ----
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")

class RequestIdFilter(logging.Filter):
    def filter(self, record: LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True

# Attributes every LogRecord has; anything else came in through extra=
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "request_id"}

class KeyValueFormatter(logging.Formatter):
    """Standard line, then the extra= fields as key=value pairs."""

    def format(self, record: LogRecord) -> str:
        line = super().format(record)
        extras = {k: v for k, v in vars(record).items() if k not in _RESERVED}
        if not extras:
            return line
        return line + " | " + " ".join(f"{k}={v}" for k, v in sorted(extras.items()))

# ---- Paths & levels ----
BASE_DIR = Path(__file__).resolve().parents[1]  # project root (folder that contains 'feedrank/')
LOG_DIR  = Path(os.getenv("LOG_DIR", BASE_DIR / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)
LOG_FILE = LOG_DIR / "feedrank.log"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

def setup_logging() -> Path:
    handlers = ["console", "file"]
    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "request_id": {"()": RequestIdFilter},
        },
        "formatters": {
            "keyvals": {
                "()": KeyValueFormatter,
                "fmt": "%(asctime)s | %(levelname)s | %(name)s | req=%(request_id)s | %(message)s",
            },
            "access": {"format": "%(asctime)s | %(levelname)s | %(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "keyvals",
                "filters": ["request_id"],
            },
            "file": {
                "class": "logging.handlers.TimedRotatingFileHandler",
                "formatter": "keyvals",
                "filters": ["request_id"],
                "filename": str(LOG_FILE),
                "when": "midnight",
                "backupCount": 14,
                "encoding": "utf-8",
            },
            "access_console": {
                "class": "logging.StreamHandler",
                "formatter": "access",
            },
        },
        "loggers": {
            # feedrank.* children inherit these handlers
            "feedrank":       {"handlers": handlers, "level": LOG_LEVEL, "propagate": False},
            "apscheduler":    {"handlers": handlers, "level": "INFO", "propagate": False},
            "uvicorn.error":  {"handlers": ["access_console", "file"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["access_console", "file"], "level": "INFO", "propagate": False},
        },
        "root": {"handlers": handlers, "level": LOG_LEVEL},
    })

    logging.getLogger("feedrank").info(f"Logging to: {LOG_FILE}")
    return LOG_FILE

def get_logger(name: str = "feedrank") -> logging.Logger:
    return logging.getLogger(name)
