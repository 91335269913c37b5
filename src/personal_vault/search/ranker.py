"""
Ranking helpers for blending semantic and lexical signals.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..storage import ItemKind, StoredItem, VaultItemRecord


@dataclass(frozen=True)
class BlendWeights:
    semantic: float
    lexical: float


NOTE_WEIGHTS = BlendWeights(semantic=0.7, lexical=0.2)
VAULT_WEIGHTS = BlendWeights(semantic=0.65, lexical=0.2)

DEFAULT_SCORE_THRESHOLD = 0.1
DEFAULT_RESULT_LIMIT = 3


@dataclass(frozen=True)
class ScoredResult:
    """A stored item paired with its relevance for one query."""

    item: StoredItem
    score: float
    semantic_score: float = 0.0
    lexical_score: float = 0.0
    boost: float = 0.0

    @property
    def kind(self) -> ItemKind:
        return self.item.kind

    @property
    def tags(self) -> list[str] | None:
        if isinstance(self.item, VaultItemRecord):
            return self.item.tags
        return None


def weights_for(item: StoredItem) -> BlendWeights:
    if isinstance(item, VaultItemRecord):
        return VAULT_WEIGHTS
    return NOTE_WEIGHTS


def blend_score(
    item: StoredItem,
    *,
    semantic: float,
    lexical: float,
    boost: float,
) -> float:
    # Boosts are additive on top of the weighted signals, so scores can exceed 1.
    weights = weights_for(item)
    return weights.semantic * semantic + weights.lexical * lexical + boost


def rank_results(
    results: list[ScoredResult],
    *,
    threshold: float = DEFAULT_SCORE_THRESHOLD,
    limit: int = DEFAULT_RESULT_LIMIT,
) -> list[ScoredResult]:
    """Drop results at or below *threshold*, sort by score and apply limit.

    The sort is stable, so equal scores keep their input order.
    """
    kept = [
        result
        for result in results
        if not math.isnan(result.score) and result.score > threshold
    ]
    ordered = sorted(kept, key=lambda result: -result.score)
    return ordered[: max(limit, 0)]
