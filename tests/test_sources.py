# tests/test_sources.py
from datetime import datetime, timezone

import feedparser
import pytest
import requests

from feedrank import sources
from feedrank.sources import DEFAULT_FEEDS, add_feed_url, fetch_all, load_feed_urls, parse_feed

def _fake_feed(title, entries):
    fake = type("F", (), {})()
    fake.feed = {"title": title}
    fake.entries = entries
    return fake

def _entry(link, title, published="Wed, 01 Jan 2025 12:00:00 GMT"):
    return type("E", (), {"link": link, "title": title, "summary": "sum", "published": published})

def _ok_response(mocker):
    resp = mocker.Mock(content=b"<rss/>")
    resp.raise_for_status.return_value = None
    return resp

def test_parse_feed_shape(mocker):
    mocker.patch.object(requests, "get", return_value=_ok_response(mocker))
    mocker.patch.object(feedparser, "parse", return_value=_fake_feed("Blog", [
        _entry("http://a", "A"),
        _entry("http://b", "B", published=""),
    ]))

    items = parse_feed("https://example.com/rss.xml")
    assert [it.link for it in items] == ["http://a", "http://b"]
    assert items[0].feed_source == "Blog"
    assert items[0].description == "sum"
    assert items[0].published == datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert items[1].published is None

def test_parse_feed_soft_fails(mocker):
    mocker.patch.object(requests, "get", side_effect=requests.ConnectionError("down"))
    assert parse_feed("https://example.com/rss.xml") == []

def test_parse_feed_rejects_non_http(mocker):
    get = mocker.patch.object(requests, "get")
    assert parse_feed("ftp://example.com/rss.xml") == []
    get.assert_not_called()

def test_fetch_all_merges_in_feed_order(mocker):
    def fake_parse(url, max_items):
        return [sources.FeedItem(title=url, link=f"{url}#{i}") for i in range(2)]
    mocker.patch("feedrank.sources.parse_feed", side_effect=fake_parse)

    items = fetch_all(["https://one/rss", "https://two/rss"], max_items_per_feed=5, workers=2)
    assert [it.link for it in items] == [
        "https://one/rss#0", "https://one/rss#1", "https://two/rss#0", "https://two/rss#1",
    ]

def test_fetch_all_empty_list():
    assert fetch_all([]) == []

def test_load_feed_urls_creates_default_file(tmp_path):
    path = tmp_path / "feeds.txt"
    assert load_feed_urls(path) == DEFAULT_FEEDS
    assert path.exists()
    # second read parses the file we just wrote
    assert load_feed_urls(path) == DEFAULT_FEEDS

def test_load_feed_urls_skips_comments_and_invalid(tmp_path):
    path = tmp_path / "feeds.txt"
    path.write_text("# comment\n\nhttps://a/rss\nnot-a-url\n  http://b/feed  \n", encoding="utf-8")
    assert load_feed_urls(path) == ["https://a/rss", "http://b/feed"]

def test_add_feed_url(tmp_path):
    path = tmp_path / "feeds.txt"
    path.write_text("https://a/rss\n", encoding="utf-8")
    assert add_feed_url(path, "https://b/rss") == ["https://a/rss", "https://b/rss"]
    assert add_feed_url(path, "https://b/rss") == ["https://a/rss", "https://b/rss"]
    assert load_feed_urls(path) == ["https://a/rss", "https://b/rss"]

def test_add_feed_url_rejects_invalid(tmp_path):
    with pytest.raises(ValueError):
        add_feed_url(tmp_path / "feeds.txt", "example.com/rss")

def test_unparseable_date_does_not_sink_the_refresh(mocker):
    mocker.patch.object(requests, "get", return_value=_ok_response(mocker))
    mocker.patch.object(feedparser, "parse", side_effect=[
        _fake_feed("Good", [_entry("http://a", "A")]),
        _fake_feed("Vague", [_entry("http://b", "B", published="sometime last week")]),
    ])

    items = fetch_all(["https://one/rss", "https://two/rss"], workers=1)
    assert [it.link for it in items] == ["http://a", "http://b"]
    assert items[0].published == datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert items[1].published is None

def test_broken_entry_only_drops_its_own_feed(mocker):
    mocker.patch.object(requests, "get", return_value=_ok_response(mocker))
    mocker.patch("feedrank.sources._parse_feed_datetime", side_effect=[RuntimeError("boom"), None])
    mocker.patch.object(feedparser, "parse", side_effect=[
        _fake_feed("Broken", [_entry("http://a", "A")]),
        _fake_feed("Fine", [_entry("http://b", "B")]),
    ])

    items = fetch_all(["https://one/rss", "https://two/rss"], workers=1)
    assert [it.link for it in items] == ["http://b"]
