"""
Keyword-based tag suggestions for new vault items.
"""

from __future__ import annotations

import re


STOP_WORDS: frozenset[str] = frozenset(
    {
        "the", "and", "or", "but", "in", "on", "at", "to", "for", "of",
        "with", "by", "is", "are", "was", "were", "be", "been", "have",
        "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "can", "must", "shall", "a", "an",
    }
)  # fmt: skip

MAX_TAGS = 5

_WORD_RE = re.compile(r"\b[a-z]{3,12}\b")


def suggest_tags(title: str | None, content: str | None = None) -> list[str]:
    """Return up to five lowercase keywords from *title* and *content*.

    Words keep their first-occurrence order. Stop words are dropped.
    """
    text = f"{title or ''} {content or ''}".lower()
    tags: list[str] = []
    for word in _WORD_RE.findall(text):
        if word in STOP_WORDS or word in tags:
            continue
        tags.append(word)
        if len(tags) >= MAX_TAGS:
            break
    return tags
