# tests/test_keywords.py
from feedrank.keywords import STOP_WORDS, extract_keywords

def test_extract_lowercases_and_filters_short_words():
    assert extract_keywords("Kubernetes orchestration patterns in Go") == [
        "kubernetes", "orchestration", "patterns",
    ]

def test_extract_drops_stop_words_and_keeps_duplicates_in_order():
    out = extract_keywords("Rust THIS rust with Python from rust")
    assert out == ["rust", "rust", "python", "rust"]

def test_extract_only_returns_allowed_tokens():
    text = "The quick brown fox jumps over that lazy dog, and your HAVE-nots are here"
    for w in extract_keywords(text):
        assert len(w) > 3
        assert w == w.lower()
        assert w not in STOP_WORDS

def test_extract_empty_input():
    assert extract_keywords("") == []
    assert extract_keywords("   \n\t ") == []
    assert extract_keywords(None) == []
