"""
Query ranking over stored notes and vault items.

Embeds an enhanced query once, scores every stored item with a blend of
cosine similarity, token overlap and title/tag boosts, then filters, sorts
and truncates the result set.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..config import VaultConfig
from ..embeddings import EmbeddingProvider
from ..errors import DimensionMismatchError, VaultValidationError
from ..storage import StorageBackend, StoredItem, VaultItemRecord
from .lexical import lexical_score, tag_boost, title_boost
from .query import enhance_query
from .ranker import (
    DEFAULT_RESULT_LIMIT,
    DEFAULT_SCORE_THRESHOLD,
    ScoredResult,
    blend_score,
    rank_results,
)
from .similarity import cosine_similarity

logger = logging.getLogger(__name__)

DEFAULT_CHAT_THRESHOLD = 0.3


class RankingPipeline:
    """Rank stored items against a free-text query."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        *,
        storage: StorageBackend | None = None,
        threshold: float = DEFAULT_SCORE_THRESHOLD,
        chat_threshold: float = DEFAULT_CHAT_THRESHOLD,
        limit: int = DEFAULT_RESULT_LIMIT,
    ) -> None:
        self.embedding_provider = embedding_provider
        self.storage = storage
        self.threshold = threshold
        self.chat_threshold = chat_threshold
        self.limit = limit

    @classmethod
    def from_config(
        cls,
        config: VaultConfig,
        embedding_provider: EmbeddingProvider,
        *,
        storage: StorageBackend | None = None,
    ) -> RankingPipeline:
        return cls(
            embedding_provider,
            storage=storage,
            threshold=config.search_threshold,
            chat_threshold=config.chat_threshold,
            limit=config.result_limit,
        )

    def search(self, query: str) -> list[ScoredResult]:
        """Rank every note and vault item in the attached storage."""
        _require_text(query, "Query required")
        return self.rank(query, self._load_items())

    def rank(self, query: str, items: Sequence[StoredItem]) -> list[ScoredResult]:
        """Return the best-scoring *items* for *query*, highest first."""
        _require_text(query, "Query required")

        enhanced = enhance_query(query)
        logger.debug("Enhanced query %r -> %r", query, enhanced)
        query_vector = self.embedding_provider.embed_query(enhanced)

        scored: list[ScoredResult] = []
        for item in items:
            result = self._score_item(query, query_vector, item)
            if result is not None:
                scored.append(result)

        ranked = rank_results(scored, threshold=self.threshold, limit=self.limit)
        logger.debug(
            "Ranked %d of %d items for query %r", len(ranked), len(items), query
        )
        return ranked

    def retrieve_for_chat(
        self,
        message: str,
        items: Sequence[VaultItemRecord] | None = None,
    ) -> list[ScoredResult]:
        """Plain cosine retrieval over vault items for the chat endpoint."""
        _require_text(message, "Message is required")
        if items is None:
            items = self._require_storage().list_vault_items()

        query_vector = self.embedding_provider.embed_query(message)
        scored: list[ScoredResult] = []
        for item in items:
            semantic = self._semantic(query_vector, item)
            if semantic is None:
                continue
            scored.append(ScoredResult(item=item, score=semantic, semantic_score=semantic))
        return rank_results(scored, threshold=self.chat_threshold, limit=self.limit)

    def _score_item(
        self, query: str, query_vector: list[float], item: StoredItem
    ) -> ScoredResult | None:
        semantic = self._semantic(query_vector, item)
        if semantic is None:
            return None

        lexical = lexical_score(query, item.content)
        boost = title_boost(query, item.title)
        if isinstance(item, VaultItemRecord):
            boost += tag_boost(query, item.tags)

        return ScoredResult(
            item=item,
            score=blend_score(item, semantic=semantic, lexical=lexical, boost=boost),
            semantic_score=semantic,
            lexical_score=lexical,
            boost=boost,
        )

    @staticmethod
    def _semantic(query_vector: list[float], item: StoredItem) -> float | None:
        try:
            return cosine_similarity(query_vector, item.embedding)
        except DimensionMismatchError as exc:
            logger.warning("Skipping %s id=%s: %s", item.kind, item.id, exc)
            return None

    def _load_items(self) -> list[StoredItem]:
        storage = self._require_storage()
        items: list[StoredItem] = []
        items.extend(storage.list_notes())
        items.extend(storage.list_vault_items())
        return items

    def _require_storage(self) -> StorageBackend:
        if self.storage is None:
            raise RuntimeError("RankingPipeline has no storage attached.")
        return self.storage


def _require_text(value: str | None, message: str) -> None:
    if value is None or not value.strip():
        raise VaultValidationError(message)
