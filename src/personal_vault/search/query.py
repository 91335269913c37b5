"""
Query expansion applied before embedding a search query.
"""

from __future__ import annotations


# Trigger substring -> expansion phrase, applied in declaration order.
QUERY_SYNONYMS: dict[str, str] = {
    "ai": "artificial intelligence machine learning",
    "ml": "machine learning artificial intelligence",
    "tech": "technology technical",
    "dev": "development developer programming",
    "code": "programming development software",
}


def enhance_query(query: str, synonyms: dict[str, str] | None = None) -> str:
    """Append synonym expansions for every trigger found in *query*.

    The result always starts with the original query. Matching is a
    case-insensitive substring test, so "maintain" triggers "ai".
    """
    mapping = QUERY_SYNONYMS if synonyms is None else synonyms
    lowered = query.lower()
    parts = [query]
    for trigger, expansion in mapping.items():
        if trigger in lowered:
            parts.append(expansion)
    return " ".join(parts)
