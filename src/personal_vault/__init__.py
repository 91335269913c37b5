"""
PersonalVault - semantic search over personal notes and vault items.

Notes and vault items (documents, cards, IDs) are embedded with Google
GenAI when they are stored and later ranked against natural-language
queries with a blend of cosine similarity and lexical signals.

Example usage:
    >>> from personal_vault import RankingPipeline, EmbeddingProvider
    >>> pipeline = RankingPipeline(EmbeddingProvider(api_key="..."), storage=storage)
    >>> results = pipeline.search("japan trip savings")
"""

from .chat import ChatReply, ChatSource, compose_reply
from .config import VaultConfig, load_config, resolve_db_path
from .embeddings import EmbeddingProvider, normalize_embedding
from .errors import DimensionMismatchError, ProviderError, VaultValidationError
from .ingest import ItemIngestor
from .search import (
    RankingPipeline,
    ScoredResult,
    cosine_similarity,
    enhance_query,
    lexical_score,
)
from .storage import DuckDBStorage, NoteRecord, VaultItemRecord
from .tags import suggest_tags

__all__ = [
    # Chat
    "ChatReply",
    "ChatSource",
    "compose_reply",
    # Config
    "VaultConfig",
    "load_config",
    "resolve_db_path",
    # Embeddings
    "EmbeddingProvider",
    "normalize_embedding",
    # Errors
    "DimensionMismatchError",
    "ProviderError",
    "VaultValidationError",
    # Ingest
    "ItemIngestor",
    # Search
    "RankingPipeline",
    "ScoredResult",
    "cosine_similarity",
    "enhance_query",
    "lexical_score",
    # Storage
    "DuckDBStorage",
    "NoteRecord",
    "VaultItemRecord",
    # Tags
    "suggest_tags",
]
