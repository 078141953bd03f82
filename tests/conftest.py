# tests/conftest.py
import os, pathlib, tempfile, pytest
from dotenv import load_dotenv

# Must run before feedrank.config is imported anywhere
load_dotenv(pathlib.Path(__file__).parent / ".env.test", override=True)
_TMP = pathlib.Path(tempfile.mkdtemp(prefix="feedrank-tests-"))
os.environ["DATA_DIR"] = str(_TMP)
os.environ["DB_FILE"] = str(_TMP / "test.db")
os.environ["FEEDS_FILE"] = str(_TMP / "feeds.txt")
os.environ["LOG_DIR"] = str(_TMP / "logs")

@pytest.fixture(scope="session", autouse=True)
def _init_db():
    from feedrank.store import init_db
    init_db()

@pytest.fixture(autouse=True)
def _empty_cache():
    from feedrank.workflow import cache
    cache.replace([])
    yield
    cache.replace([])

@pytest.fixture()
def client():
    from fastapi.testclient import TestClient
    from feedrank.main import app
    return TestClient(app)
