"""
Storage interfaces and data models for vault persistence.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Protocol, TypeAlias


ItemKind: TypeAlias = Literal["note", "vault"]


@dataclass(frozen=True)
class NoteRecord:
    """A free-form note with its content embedding."""

    id: int
    title: str
    content: str
    embedding: list[float]
    created_at: datetime

    @property
    def kind(self) -> ItemKind:
        return "note"


@dataclass(frozen=True)
class VaultItemRecord:
    """A document, card or ID stored in the vault."""

    id: int
    title: str
    content: str
    embedding: list[float]
    created_at: datetime
    tags: list[str] = field(default_factory=list)
    type: str = "document"
    category: str = "Recent files"

    @property
    def kind(self) -> ItemKind:
        return "vault"


StoredItem: TypeAlias = NoteRecord | VaultItemRecord


def serialize_embedding(embedding: list[float]) -> str:
    return json.dumps([float(value) for value in embedding])


def deserialize_embedding(raw: str) -> list[float]:
    """Decode a stored embedding, raising ``ValueError`` on malformed text."""
    values = json.loads(raw)
    if not isinstance(values, list):
        raise ValueError(f"Stored embedding is not a list: {type(values).__name__}")
    return [float(value) for value in values]


def serialize_tags(tags: list[str]) -> str:
    return json.dumps(list(tags))


def deserialize_tags(raw: str) -> list[str]:
    values = json.loads(raw) if raw else []
    if not isinstance(values, list):
        return []
    return [str(value) for value in values]


class StorageBackend(Protocol):
    """Protocol for persistence operations used by ingest and ranking."""

    def initialize(self) -> None:
        """Initialize required tables/sequences."""

    def create_note(
        self, *, title: str, content: str, embedding: list[float]
    ) -> NoteRecord:
        """Insert a note and return the stored record."""

    def create_vault_item(
        self,
        *,
        title: str,
        content: str,
        tags: list[str],
        type: str,
        category: str,
        embedding: list[float],
    ) -> VaultItemRecord:
        """Insert a vault item and return the stored record."""

    def list_notes(self) -> list[NoteRecord]:
        """List all notes, newest first."""

    def list_vault_items(self) -> list[VaultItemRecord]:
        """List all vault items, newest first."""

    def delete_note(self, note_id: int) -> bool:
        """Delete a note. Return True if a row was removed."""

    def delete_vault_item(self, item_id: int) -> bool:
        """Delete a vault item. Return True if a row was removed."""
