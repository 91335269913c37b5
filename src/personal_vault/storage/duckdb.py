"""
DuckDB storage backend for notes and vault items.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import duckdb

from .base import (
    NoteRecord,
    VaultItemRecord,
    deserialize_embedding,
    deserialize_tags,
    serialize_embedding,
    serialize_tags,
)

logger = logging.getLogger(__name__)


class DuckDBStorage:
    """DuckDB-backed persistence for notes and vault items."""

    def __init__(
        self,
        db_path: str,
        *,
        read_only: bool = False,
        initialize: bool = True,
    ) -> None:
        self.db_path = str(Path(db_path).expanduser().resolve())
        self.read_only = read_only
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = duckdb.connect(self.db_path, read_only=read_only)
        if initialize and not read_only:
            self.initialize()

    def close(self) -> None:
        """Close the underlying DuckDB connection."""
        self._conn.close()

    def initialize(self) -> None:
        self._conn.execute("CREATE SEQUENCE IF NOT EXISTS note_ids START 1;")
        self._conn.execute("CREATE SEQUENCE IF NOT EXISTS vault_item_ids START 1;")
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS notes (
                id INTEGER PRIMARY KEY DEFAULT nextval('note_ids'),
                title VARCHAR NOT NULL,
                content VARCHAR NOT NULL,
                embedding VARCHAR NOT NULL,
                created_at TIMESTAMP NOT NULL
            );
            """
        )
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS vault_items (
                id INTEGER PRIMARY KEY DEFAULT nextval('vault_item_ids'),
                title VARCHAR NOT NULL,
                content VARCHAR NOT NULL DEFAULT '',
                tags VARCHAR NOT NULL DEFAULT '[]',
                type VARCHAR NOT NULL DEFAULT 'document',
                category VARCHAR NOT NULL DEFAULT 'Recent files',
                embedding VARCHAR NOT NULL,
                created_at TIMESTAMP NOT NULL
            );
            """
        )

    def create_note(
        self, *, title: str, content: str, embedding: list[float]
    ) -> NoteRecord:
        created_at = datetime.now()
        row = self._conn.execute(
            """
            INSERT INTO notes (title, content, embedding, created_at)
            VALUES (?, ?, ?, ?)
            RETURNING id
            """,
            [title, content, serialize_embedding(embedding), created_at],
        ).fetchone()
        if row is None:
            raise RuntimeError("Failed to insert note")
        return NoteRecord(
            id=int(row[0]),
            title=title,
            content=content,
            embedding=list(embedding),
            created_at=created_at,
        )

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
        created_at = datetime.now()
        row = self._conn.execute(
            """
            INSERT INTO vault_items (
                title, content, tags, type, category, embedding, created_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?)
            RETURNING id
            """,
            [
                title,
                content,
                serialize_tags(tags),
                type,
                category,
                serialize_embedding(embedding),
                created_at,
            ],
        ).fetchone()
        if row is None:
            raise RuntimeError("Failed to insert vault item")
        return VaultItemRecord(
            id=int(row[0]),
            title=title,
            content=content,
            embedding=list(embedding),
            created_at=created_at,
            tags=list(tags),
            type=type,
            category=category,
        )

    def list_notes(self) -> list[NoteRecord]:
        rows = self._conn.execute(
            """
            SELECT id, title, content, embedding, created_at
            FROM notes
            ORDER BY created_at DESC, id DESC
            """
        ).fetchall()
        return [
            NoteRecord(
                id=int(row[0]),
                title=str(row[1]),
                content=str(row[2]),
                embedding=self._decode_embedding(row[3], table="notes", row_id=row[0]),
                created_at=row[4],
            )
            for row in rows
        ]

    def list_vault_items(self) -> list[VaultItemRecord]:
        rows = self._conn.execute(
            """
            SELECT id, title, content, tags, type, category, embedding, created_at
            FROM vault_items
            ORDER BY created_at DESC, id DESC
            """
        ).fetchall()
        return [
            VaultItemRecord(
                id=int(row[0]),
                title=str(row[1]),
                content=str(row[2] or ""),
                tags=deserialize_tags(str(row[3])),
                type=str(row[4]),
                category=str(row[5]),
                embedding=self._decode_embedding(
                    row[6], table="vault_items", row_id=row[0]
                ),
                created_at=row[7],
            )
            for row in rows
        ]

    def delete_note(self, note_id: int) -> bool:
        return self._delete(table="notes", row_id=note_id)

    def delete_vault_item(self, item_id: int) -> bool:
        return self._delete(table="vault_items", row_id=item_id)

    def count_items(self) -> dict[str, int]:
        notes = self._conn.execute("SELECT COUNT(*) FROM notes").fetchone()
        items = self._conn.execute("SELECT COUNT(*) FROM vault_items").fetchone()
        return {
            "notes": int(notes[0]) if notes else 0,
            "vault_items": int(items[0]) if items else 0,
        }

    def _delete(self, *, table: str, row_id: int) -> bool:
        row = self._conn.execute(
            f"DELETE FROM {table} WHERE id = ? RETURNING id",
            [row_id],
        ).fetchone()
        return row is not None

    @staticmethod
    def _decode_embedding(raw: Any, *, table: str, row_id: Any) -> list[float]:
        # Undecodable rows surface as empty vectors and are skipped at ranking time.
        try:
            return deserialize_embedding(str(raw))
        except (ValueError, TypeError) as exc:
            logger.warning("Unreadable embedding in %s id=%s: %s", table, row_id, exc)
            return []
