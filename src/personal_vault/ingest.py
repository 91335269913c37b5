"""
Item creation: validate input, embed its text and persist the record.
"""

from __future__ import annotations

import logging

from .embeddings import EmbeddingProvider
from .errors import VaultValidationError
from .storage import NoteRecord, StorageBackend, VaultItemRecord

logger = logging.getLogger(__name__)

DEFAULT_ITEM_TYPE = "document"
DEFAULT_CATEGORY = "Recent files"


def vault_item_embedding_text(title: str, content: str, tags: list[str]) -> str:
    return f"{title} {content} {' '.join(tags)}"


class ItemIngestor:
    """Create and delete notes and vault items."""

    def __init__(
        self,
        storage: StorageBackend,
        embedding_provider: EmbeddingProvider,
    ) -> None:
        self.storage = storage
        self.embedding_provider = embedding_provider

    def add_note(self, *, title: str | None, content: str | None) -> NoteRecord:
        if not title or not content:
            raise VaultValidationError("Missing fields")

        embedding = self.embedding_provider.embed_document(content)
        note = self.storage.create_note(
            title=title, content=content, embedding=embedding
        )
        logger.info("Stored note id=%s (%d dims)", note.id, len(embedding))
        return note

    def add_vault_item(
        self,
        *,
        title: str | None,
        content: str | None = None,
        tags: list[str] | None = None,
        type: str | None = None,
        category: str | None = None,
    ) -> VaultItemRecord:
        if not title:
            raise VaultValidationError("Title is required")

        content = content or ""
        tags = list(tags or [])
        embedding = self.embedding_provider.embed_document(
            vault_item_embedding_text(title, content, tags)
        )
        item = self.storage.create_vault_item(
            title=title,
            content=content,
            tags=tags,
            type=type or DEFAULT_ITEM_TYPE,
            category=category or DEFAULT_CATEGORY,
            embedding=embedding,
        )
        logger.info("Stored vault item id=%s (%d dims)", item.id, len(embedding))
        return item

    def delete_note(self, note_id: int | str | None) -> bool:
        return self.storage.delete_note(_parse_id(note_id))

    def delete_vault_item(self, item_id: int | str | None) -> bool:
        return self.storage.delete_vault_item(_parse_id(item_id))


def _parse_id(raw: int | str | None) -> int:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise VaultValidationError("ID is required")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise VaultValidationError(f"Invalid ID: {raw!r}") from exc
