import os
from dotenv import load_dotenv
from pathlib import Path

# Go up one level from feedrank/ to root/
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Where the feed list and the SQLite file live by default
DATA_DIR = Path(os.getenv("DATA_DIR", Path.home() / ".feedrank"))
FEEDS_FILE = Path(os.getenv("FEEDS_FILE", DATA_DIR / "feeds.txt"))
DB_FILE = os.getenv("DB_FILE", str(DATA_DIR / "feedrank.db"))

# Behavior
TIMEZONE = os.getenv("TIMEZONE", "UTC")
AUTO_REFRESH_MINUTES = int(os.getenv("AUTO_REFRESH_MINUTES", "30"))  # 0 disables the job
MAX_ARTICLES_PER_FEED = int(os.getenv("MAX_ARTICLES_PER_FEED", "50"))
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
DEFAULT_USER = os.getenv("DEFAULT_USER", "default")

# Fetching
FETCH_TIMEOUT = float(os.getenv("FETCH_TIMEOUT", "15"))
FETCH_WORKERS = int(os.getenv("FETCH_WORKERS", "8"))
USER_AGENT = os.getenv("USER_AGENT", "feedrank/0.1 (+https://example.com)")
