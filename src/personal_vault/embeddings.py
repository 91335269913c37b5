"""
Embedding provider for vault items and search queries.

Wraps the Google GenAI embedding API for single-text embedding and
normalizes whatever shape comes back into one flat vector.
"""

from __future__ import annotations

import logging
import numbers
from typing import Any

from google.genai import Client as GenAIClient

from .config import DEFAULT_EMBEDDING_DIM, DEFAULT_EMBEDDING_MODEL, VaultConfig
from .errors import ProviderError

logger = logging.getLogger(__name__)

RawEmbedding = float | list[float] | list[list[float]]


def normalize_embedding(raw: Any) -> list[float]:
    """Coerce a raw provider response into a single flat vector.

    A scalar becomes a one-element vector, a batch of one is unwrapped and a
    flat vector is returned as is.
    """
    if hasattr(raw, "tolist"):
        raw = raw.tolist()

    if not isinstance(raw, (list, tuple)):
        return [_as_float(raw)]

    if not raw:
        raise ProviderError("Embedding response is empty.")

    if isinstance(raw[0], (list, tuple)):
        if len(raw) != 1:
            raise ProviderError(
                f"Expected a batch of one embedding, got {len(raw)} rows."
            )
        raw = raw[0]
        if not raw:
            raise ProviderError("Embedding response is empty.")

    return [_as_float(value) for value in raw]


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ProviderError(f"Non-numeric embedding value: {value!r}")
    return float(value)


class EmbeddingProvider:
    """Generate text embeddings via Google GenAI."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        dim: int | None = None,
        client: Any | None = None,
    ) -> None:
        self.model = model or DEFAULT_EMBEDDING_MODEL
        self.dim = dim or DEFAULT_EMBEDDING_DIM

        if client is not None:
            self._client = client
        else:
            if not api_key:
                raise ValueError(
                    "GOOGLE_API_KEY not found. "
                    "Provide api_key or set the environment variable."
                )
            self._client = GenAIClient(api_key=api_key)

    @classmethod
    def from_config(
        cls, config: VaultConfig, *, client: Any | None = None
    ) -> EmbeddingProvider:
        return cls(
            api_key=config.api_key,
            model=config.embedding_model,
            dim=config.embedding_dim,
            client=client,
        )

    def embed_raw(self, text: str, *, task_type: str) -> RawEmbedding:
        """Call the embedding API and return the response as nested lists."""
        try:
            result = self._client.models.embed_content(
                model=self.model,
                contents=[text],
                config={
                    "task_type": task_type,
                    "output_dimensionality": self.dim,
                },
            )
        except Exception as exc:
            raise ProviderError(f"Embedding request failed: {exc}") from exc

        embeddings = getattr(result, "embeddings", None)
        if not embeddings:
            raise ProviderError("Embedding response contained no embeddings.")
        return [list(emb.values or []) for emb in embeddings]

    def embed_document(self, text: str) -> list[float]:
        """Embed the text of a note or vault item for storage."""
        return normalize_embedding(
            self.embed_raw(text, task_type="RETRIEVAL_DOCUMENT")
        )

    def embed_query(self, query: str) -> list[float]:
        """Embed a single query text for retrieval."""
        vector = normalize_embedding(self.embed_raw(query, task_type="RETRIEVAL_QUERY"))
        logger.debug("Embedded query into %d dimensions", len(vector))
        return vector
