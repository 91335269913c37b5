from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

from personal_vault.embeddings import EmbeddingProvider
from personal_vault.storage import DuckDBStorage


@dataclass
class FakeEmbedding:
    values: list[float]


@dataclass
class FakeEmbedResult:
    embeddings: list[FakeEmbedding]


class FakeModels:
    """Records calls and returns the vector registered for each text."""

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        default: list[float] | None = None,
    ) -> None:
        self.vectors = vectors or {}
        self.default = default or [1.0, 1.0]
        self.calls: list[dict[str, Any]] = []

    def embed_content(
        self, *, model: str, contents: list[str], config: dict
    ) -> FakeEmbedResult:
        self.calls.append({"model": model, "contents": contents, "config": config})
        return FakeEmbedResult(
            embeddings=[
                FakeEmbedding(values=list(self.vectors.get(text, self.default)))
                for text in contents
            ]
        )


class FakeClient:
    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        default: list[float] | None = None,
    ) -> None:
        self.models = FakeModels(vectors, default)


class FailingModels:
    def embed_content(self, **kwargs: Any) -> FakeEmbedResult:
        raise ConnectionError("inference endpoint unavailable")


class FailingClient:
    def __init__(self) -> None:
        self.models = FailingModels()


def make_provider(
    vectors: dict[str, list[float]] | None = None,
    default: list[float] | None = None,
) -> EmbeddingProvider:
    return EmbeddingProvider(client=FakeClient(vectors, default), dim=2)


@pytest.fixture()
def storage(tmp_path: Path):
    store = DuckDBStorage(str(tmp_path / "vault.duckdb"))
    yield store
    store.close()
