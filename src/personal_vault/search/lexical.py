"""
Lexical scoring helpers used alongside semantic similarity.
"""

from __future__ import annotations

from collections.abc import Iterable


TITLE_BOOST = 0.2
TAG_BOOST = 0.15

_MIN_QUERY_TOKEN_LENGTH = 3


def lexical_score(query: str, text: str) -> float:
    """Fraction of query tokens found in *text*.

    Query tokens shorter than three characters are ignored. A token matches
    when it contains, or is contained by, any token of *text*.
    """
    query_tokens = [
        token
        for token in query.lower().split()
        if len(token) >= _MIN_QUERY_TOKEN_LENGTH
    ]
    if not query_tokens:
        return 0.0

    text_tokens = text.lower().split()
    matches = 0
    for token in query_tokens:
        if any(token in candidate or candidate in token for candidate in text_tokens):
            matches += 1
    return matches / len(query_tokens)


def title_boost(query: str, title: str) -> float:
    return TITLE_BOOST if query.lower() in title.lower() else 0.0


def tag_boost(query: str, tags: Iterable[str]) -> float:
    needle = query.lower()
    if any(needle in tag.lower() for tag in tags):
        return TAG_BOOST
    return 0.0
