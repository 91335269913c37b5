"""
Chat replies built from the most relevant vault items.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .search.ranker import ScoredResult


NO_MATCH_RESPONSE = (
    "I don't have any relevant information in your vault about that topic. "
    "Try adding some notes first!"
)
PREVIEW_CHARS = 200


@dataclass(frozen=True)
class ChatSource:
    title: str
    similarity: int


@dataclass(frozen=True)
class ChatReply:
    response: str
    sources: list[ChatSource] = field(default_factory=list)


def as_percentage(score: float) -> int:
    return round(score * 100)


def compose_reply(results: list[ScoredResult]) -> ChatReply:
    """Summarize the top result and list every result as a source."""
    if not results:
        return ChatReply(response=NO_MATCH_RESPONSE)

    top = results[0].item
    preview = top.content[:PREVIEW_CHARS]
    if len(top.content) > PREVIEW_CHARS:
        preview += "..."
    return ChatReply(
        response=f'Based on your notes about "{top.title}": {preview}',
        sources=[
            ChatSource(title=result.item.title, similarity=as_percentage(result.score))
            for result in results
        ],
    )
