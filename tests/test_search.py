"""Tests for similarity, lexical scoring, query expansion and ranking."""

from __future__ import annotations

import math
from datetime import datetime

import pytest

from conftest import FailingClient, make_provider
from personal_vault.embeddings import EmbeddingProvider
from personal_vault.errors import DimensionMismatchError, ProviderError, VaultValidationError
from personal_vault.search import (
    RankingPipeline,
    ScoredResult,
    cosine_similarity,
    enhance_query,
    lexical_score,
    rank_results,
    tag_boost,
    title_boost,
)
from personal_vault.storage import NoteRecord, VaultItemRecord

_NOW = datetime(2024, 5, 1, 12, 0, 0)


def _note(id: int, title: str, content: str, embedding: list[float]) -> NoteRecord:
    return NoteRecord(
        id=id, title=title, content=content, embedding=embedding, created_at=_NOW
    )


def _vault(
    id: int,
    title: str,
    content: str,
    embedding: list[float],
    tags: list[str] | None = None,
) -> VaultItemRecord:
    return VaultItemRecord(
        id=id,
        title=title,
        content=content,
        embedding=embedding,
        created_at=_NOW,
        tags=tags or [],
    )


# ---------------------------------------------------------------------------
# Cosine similarity
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("vector", [[1.0, 2.0, 3.0], [0.5, -0.25], [7.0]])
def test_cosine_of_vector_with_itself_is_one(vector) -> None:
    assert cosine_similarity(vector, vector) == pytest.approx(1.0)


@pytest.mark.parametrize("scale", [0.001, 2.0, 1000.0])
def test_cosine_ignores_positive_scaling(scale) -> None:
    a = [0.3, -1.2, 4.0]
    assert cosine_similarity(a, [scale * x for x in a]) == pytest.approx(1.0)


def test_cosine_is_symmetric() -> None:
    a = [0.9, 0.1, -0.4]
    b = [0.2, 0.7, 0.5]
    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_cosine_orthogonal_and_opposite() -> None:
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 0.0], [-2.0, 0.0]) == pytest.approx(-1.0)


def test_cosine_zero_norm_scores_zero() -> None:
    score = cosine_similarity([0.0, 0.0], [1.0, 2.0])
    assert score == 0.0
    assert not math.isnan(score)


def test_cosine_rejects_dimension_mismatch() -> None:
    with pytest.raises(DimensionMismatchError):
        cosine_similarity([1.0, 0.0, 0.0], [1.0, 0.0])


# ---------------------------------------------------------------------------
# Query expansion
# ---------------------------------------------------------------------------


def test_enhance_query_appends_synonyms() -> None:
    enhanced = enhance_query("best ai tools")
    assert enhanced.startswith("best ai tools")
    assert "artificial intelligence machine learning" in enhanced


def test_enhance_query_is_case_insensitive_and_ordered() -> None:
    enhanced = enhance_query("Dev CODE")
    assert enhanced == (
        "Dev CODE development developer programming "
        "programming development software"
    )


def test_enhance_query_each_trigger_once() -> None:
    enhanced = enhance_query("ai ai ai")
    assert enhanced.count("artificial intelligence machine learning") == 1


def test_enhance_query_without_triggers_is_unchanged() -> None:
    assert enhance_query("grocery list") == "grocery list"


# ---------------------------------------------------------------------------
# Lexical scoring
# ---------------------------------------------------------------------------


def test_lexical_score_full_match() -> None:
    score = lexical_score("machine learning", "I love machine learning and learning")
    assert score == 1.0


def test_lexical_score_no_match() -> None:
    assert lexical_score("xyz", "abc def") == 0.0


def test_lexical_score_ignores_short_query_tokens() -> None:
    assert lexical_score("a to", "a to") == 0.0
    assert lexical_score("go trips", "trip") == 1.0


def test_lexical_score_partial_and_bidirectional() -> None:
    score = lexical_score("japan trip savings", "Saved for Japan trip, total $3000")
    assert score == pytest.approx(2 / 3)


def test_title_and_tag_boosts() -> None:
    assert title_boost("budget", "Trip Budget") == 0.2
    assert title_boost("groceries", "Trip Budget") == 0.0
    assert tag_boost("PASS", ["passport", "travel"]) == 0.15
    assert tag_boost("visa", ["passport"]) == 0.0
    assert tag_boost("visa", []) == 0.0


# ---------------------------------------------------------------------------
# rank_results
# ---------------------------------------------------------------------------


def test_rank_results_filters_sorts_and_truncates() -> None:
    results = [
        ScoredResult(item=_note(i, f"n{i}", "", [1.0]), score=score)
        for i, score in enumerate([0.05, 0.1, 0.4, 0.9, 0.6, 0.2])
    ]

    ranked = rank_results(results, threshold=0.1, limit=3)

    assert [r.score for r in ranked] == [0.9, 0.6, 0.4]


def test_rank_results_is_stable_for_ties() -> None:
    results = [
        ScoredResult(item=_note(i, f"n{i}", "", [1.0]), score=0.5) for i in range(3)
    ]

    ranked = rank_results(results)

    assert [r.item.id for r in ranked] == [0, 1, 2]


def test_rank_results_drops_nan() -> None:
    results = [ScoredResult(item=_note(1, "n", "", [1.0]), score=float("nan"))]
    assert rank_results(results) == []


# ---------------------------------------------------------------------------
# RankingPipeline
# ---------------------------------------------------------------------------


def _trip_items() -> list[NoteRecord]:
    return [
        _note(1, "Trip Budget", "Saved for Japan trip, total $3000", [1.0, 0.0]),
        _note(2, "Grocery List", "milk eggs bread", [0.0, 1.0]),
    ]


def test_rank_end_to_end_trip_budget() -> None:
    provider = make_provider({"japan trip savings": [0.9, 0.1]})
    pipeline = RankingPipeline(provider)

    results = pipeline.rank("japan trip savings", _trip_items())

    assert len(results) == 1
    top = results[0]
    assert top.item.title == "Trip Budget"
    assert top.kind == "note"
    assert top.semantic_score == pytest.approx(0.994, abs=1e-3)
    assert top.score == pytest.approx(0.7 * top.semantic_score + 0.2 * (2 / 3))


def test_rank_embeds_enhanced_query() -> None:
    provider = make_provider()
    pipeline = RankingPipeline(provider)

    pipeline.rank("ai notes", [])

    contents = provider._client.models.calls[0]["contents"]
    assert contents == ["ai notes artificial intelligence machine learning"]


def test_rank_is_idempotent() -> None:
    provider = make_provider({"japan trip savings": [0.9, 0.1]})
    pipeline = RankingPipeline(provider)
    items = _trip_items()

    first = pipeline.rank("japan trip savings", items)
    second = pipeline.rank("japan trip savings", items)

    assert [(r.item.id, r.score) for r in first] == [(r.item.id, r.score) for r in second]


def test_rank_truncates_to_three() -> None:
    provider = make_provider(default=[1.0, 0.0])
    items = [_note(i, f"note {i}", "body", [1.0, 0.0]) for i in range(6)]

    results = RankingPipeline(provider).rank("anything", items)

    assert len(results) == 3
    assert [r.item.id for r in results] == [0, 1, 2]


def test_rank_vault_items_use_vault_weights_and_tag_boost() -> None:
    provider = make_provider(default=[1.0, 0.0])
    item = _vault(7, "Documents", "scan", [1.0, 0.0], tags=["Passport", "id"])

    results = RankingPipeline(provider).rank("passport", [item])

    assert len(results) == 1
    result = results[0]
    assert result.kind == "vault"
    assert result.tags == ["Passport", "id"]
    assert result.boost == pytest.approx(0.15)
    assert result.score == pytest.approx(0.65 * 1.0 + 0.2 * 0.0 + 0.15)


def test_title_boost_rescues_low_similarity_match() -> None:
    provider = make_provider(default=[1.0, 0.0])
    item = _note(3, "Wifi password", "router in hallway", [0.0, 1.0])

    results = RankingPipeline(provider).rank("wifi", [item])

    assert len(results) == 1
    assert results[0].score == pytest.approx(0.2)


def test_rank_skips_dimension_mismatch() -> None:
    provider = make_provider(default=[1.0, 0.0])
    items = [
        _note(1, "ok", "body", [1.0, 0.0]),
        _note(2, "wrong size", "body", [1.0, 0.0, 0.0]),
        _note(3, "unreadable", "body", []),
    ]

    results = RankingPipeline(provider).rank("query", items)

    assert [r.item.id for r in results] == [1]


def test_rank_empty_store_returns_empty_list() -> None:
    assert RankingPipeline(make_provider()).rank("anything", []) == []


def test_rank_rejects_empty_query_before_embedding() -> None:
    provider = make_provider()
    pipeline = RankingPipeline(provider)

    with pytest.raises(VaultValidationError, match="Query required"):
        pipeline.rank("   ", _trip_items())
    assert provider._client.models.calls == []


def test_rank_propagates_provider_error() -> None:
    pipeline = RankingPipeline(EmbeddingProvider(client=FailingClient(), dim=2))

    with pytest.raises(ProviderError):
        pipeline.rank("japan", _trip_items())


def test_search_reads_notes_and_vault_items_from_storage(storage) -> None:
    storage.create_note(
        title="Trip Budget", content="Japan travel plans", embedding=[1.0, 0.0]
    )
    storage.create_vault_item(
        title="Passport",
        content="",
        tags=["travel"],
        type="id",
        category="IDs",
        embedding=[0.8, 0.2],
    )
    storage.create_note(title="Groceries", content="milk", embedding=[0.0, 1.0])
    provider = make_provider(default=[1.0, 0.0])

    results = RankingPipeline(provider, storage=storage).search("travel")

    assert [r.item.title for r in results] == ["Trip Budget", "Passport"]
    assert [r.kind for r in results] == ["note", "vault"]


def test_retrieve_for_chat_uses_plain_cosine_over_vault_items() -> None:
    provider = make_provider({"where is my passport": [1.0, 0.0]})
    items = [
        _vault(1, "Passport", "drawer", [1.0, 0.0]),
        _vault(2, "Insurance card", "wallet", [0.6, 0.8]),
        _vault(3, "Recipe", "pasta", [0.2, 0.98]),
    ]

    results = RankingPipeline(provider).retrieve_for_chat("where is my passport", items)

    assert [r.item.id for r in results] == [1, 2]
    assert results[0].score == pytest.approx(1.0)
    assert results[1].score == pytest.approx(0.6)
    assert provider._client.models.calls[0]["contents"] == ["where is my passport"]


def test_retrieve_for_chat_requires_message() -> None:
    with pytest.raises(VaultValidationError, match="Message is required"):
        RankingPipeline(make_provider()).retrieve_for_chat("", [])
