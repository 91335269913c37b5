"""Storage backends for the personal vault."""

from .base import (
    ItemKind,
    NoteRecord,
    StorageBackend,
    StoredItem,
    VaultItemRecord,
    deserialize_embedding,
    deserialize_tags,
    serialize_embedding,
    serialize_tags,
)
from .duckdb import DuckDBStorage

__all__ = [
    "ItemKind",
    "NoteRecord",
    "StorageBackend",
    "StoredItem",
    "VaultItemRecord",
    "deserialize_embedding",
    "deserialize_tags",
    "serialize_embedding",
    "serialize_tags",
    "DuckDBStorage",
]
