# feedrank/keywords.py
from typing import List, Optional

# Deliberately tiny; no stemming or language detection.
STOP_WORDS = frozenset("""
the and for that with this from your have are
""".split())

MIN_KEYWORD_LEN = 4


def is_stop_word(word: str) -> bool:
    return word in STOP_WORDS


def extract_keywords(text: Optional[str]) -> List[str]:
    """
    Lower-case `text`, split on whitespace and keep tokens longer than 3 chars
    that are not stop words. Order and duplicates are preserved; callers that
    need frequencies count them themselves.
    """
    if not text:
        return []
    return [w for w in text.lower().split() if len(w) >= MIN_KEYWORD_LEN and not is_stop_word(w)]
