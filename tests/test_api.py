# tests/test_api.py
from datetime import datetime, timezone

from feedrank.items import FeedItem
from feedrank.workflow import cache

def _seed():
    cache.replace([
        FeedItem(title="Kubernetes networking deep dive", description="CNI plugins", link="http://k8s",
                 published=datetime(2025, 1, 2, tzinfo=timezone.utc), feed_source="Ops"),
        FeedItem(title="Cooking pasta", description="al dente", link="http://pasta",
                 published=datetime(2025, 1, 3, tzinfo=timezone.utc), feed_source="Food"),
        FeedItem(title="Kubernetes operators", description="", link="http://ops",
                 published=datetime(2025, 1, 4, tzinfo=timezone.utc), feed_source="Ops"),
    ])

def test_recommendations_empty_profile(client):
    _seed()
    r = client.get("/recommendations", params={"user": "api-empty"})
    assert r.status_code == 200
    assert r.json()["items"] == []

def test_interesting_then_recommend(client):
    _seed()
    r = client.post("/articles/interesting", json={"user": "api-k8s", "link": "http://x",
                                                   "title": "Kubernetes orchestration patterns"})
    assert r.status_code == 200 and r.json()["interests"] == 3

    r = client.get("/interests", params={"user": "api-k8s"})
    assert {i["keyword"] for i in r.json()["interests"]} == {"kubernetes", "orchestration", "patterns"}

    r = client.get("/recommendations", params={"user": "api-k8s"})
    links = [it["link"] for it in r.json()["items"]]
    assert links == ["http://k8s", "http://ops"]

    r = client.get("/recommendations", params={"user": "api-k8s", "order": "date", "limit": 1})
    assert [it["link"] for it in r.json()["items"]] == ["http://ops"]

def test_interesting_uses_cached_text_and_marks_read(client):
    _seed()
    r = client.post("/articles/interesting", json={"user": "api-cached", "link": "http://k8s"})
    assert r.status_code == 200
    r = client.get("/recommendations", params={"user": "api-cached"})
    # k8s is read now; ops still matches "kubernetes"
    assert [it["link"] for it in r.json()["items"]] == ["http://ops"]

def test_interesting_unknown_article_is_404(client):
    r = client.post("/articles/interesting", json={"user": "api-404", "link": "http://missing"})
    assert r.status_code == 404

def test_mark_read_hides_article(client):
    _seed()
    client.post("/articles/interesting", json={"user": "api-read", "link": "http://seed", "title": "kubernetes"})
    client.post("/articles/read", json={"user": "api-read", "link": "http://ops"})
    r = client.get("/recommendations", params={"user": "api-read"})
    assert [it["link"] for it in r.json()["items"]] == ["http://k8s"]

def test_bad_order_is_rejected(client):
    r = client.get("/recommendations", params={"order": "random"})
    assert r.status_code == 422

def test_search(client):
    _seed()
    r = client.get("/search", params={"q": "kubernetes", "source": "ops"})
    assert r.status_code == 200
    assert [it["link"] for it in r.json()["items"]] == ["http://k8s", "http://ops"]

def test_feeds_add_and_list(client):
    r = client.post("/feeds", json={"url": "https://example.com/feed.xml"})
    assert r.status_code == 200
    assert "https://example.com/feed.xml" in r.json()["feeds"]
    r = client.get("/feeds")
    assert "https://example.com/feed.xml" in r.json()["feeds"]

def test_feeds_add_invalid(client):
    r = client.post("/feeds", json={"url": "example.com"})
    assert r.status_code == 400

def test_feeds_refresh(client, mocker):
    mocker.patch("feedrank.sources.fetch_all", return_value=[FeedItem(title="t", link="u", feed_source="S")])
    r = client.post("/feeds/refresh")
    assert r.status_code == 200
    assert r.json()["articles"] == 1
    assert len(cache.snapshot()) == 1
