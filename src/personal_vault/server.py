"""
FastAPI server for the personal vault.

Thin request handlers over item ingest, ranked search, chat retrieval and
tag suggestion. Validation failures return 400 with a specific message;
everything else collapses to a generic 500.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .chat import compose_reply
from .config import VaultConfig, load_config
from .embeddings import EmbeddingProvider
from .errors import VaultValidationError
from .ingest import ItemIngestor
from .search import RankingPipeline, ScoredResult
from .storage import DuckDBStorage, NoteRecord, StorageBackend, VaultItemRecord
from .tags import suggest_tags

logger = logging.getLogger(__name__)

app = FastAPI(title="PersonalVault", description="Semantic search over personal notes")

SERVER_ERROR = {"error": "Server error"}


@dataclass
class VaultServices:
    """Process-wide collaborators shared by the request handlers."""

    storage: StorageBackend
    ingestor: ItemIngestor
    pipeline: RankingPipeline

    @classmethod
    def build(
        cls,
        config: VaultConfig,
        *,
        storage: StorageBackend | None = None,
        embedding_provider: EmbeddingProvider | None = None,
    ) -> "VaultServices":
        storage = storage or DuckDBStorage(config.db_path)
        provider = embedding_provider or EmbeddingProvider.from_config(config)
        return cls(
            storage=storage,
            ingestor=ItemIngestor(storage, provider),
            pipeline=RankingPipeline.from_config(config, provider, storage=storage),
        )


@lru_cache(maxsize=1)
def get_services() -> VaultServices:
    return VaultServices.build(load_config())


class NoteRequest(BaseModel):
    """Request model for note creation."""

    title: str | None = None
    content: str | None = None


class VaultItemRequest(BaseModel):
    """Request model for vault item creation."""

    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None
    type: str | None = None
    category: str | None = None


class SearchRequest(BaseModel):
    query: str | None = None


class ChatRequest(BaseModel):
    message: str | None = None


class TagRequest(BaseModel):
    title: str | None = None
    content: str | None = None


def note_payload(note: NoteRecord) -> dict[str, Any]:
    return {
        "id": note.id,
        "title": note.title,
        "content": note.content,
        "created_at": note.created_at.isoformat(),
    }


def vault_item_payload(item: VaultItemRecord) -> dict[str, Any]:
    return {
        "id": item.id,
        "title": item.title,
        "content": item.content,
        "tags": item.tags,
        "type": item.type,
        "category": item.category,
        "created_at": item.created_at.isoformat(),
        "last_accessed": item.created_at.date().isoformat(),
    }


def result_payload(result: ScoredResult) -> dict[str, Any]:
    if isinstance(result.item, VaultItemRecord):
        payload = vault_item_payload(result.item)
        payload["item_type"] = payload.pop("type")
    else:
        payload = note_payload(result.item)
    payload["type"] = result.kind
    payload["score"] = result.score
    return payload


def _validation_error(exc: VaultValidationError) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=400)


@app.post("/api/add-note")
async def add_note(
    request: NoteRequest, services: VaultServices = Depends(get_services)
):
    """Embed and store a new note."""
    try:
        note = services.ingestor.add_note(title=request.title, content=request.content)
        return {"success": True, "note": note_payload(note)}
    except VaultValidationError as exc:
        return _validation_error(exc)
    except Exception:
        logger.exception("Embedding error while adding note")
        return JSONResponse(SERVER_ERROR, status_code=500)


@app.get("/api/notes")
async def list_notes(services: VaultServices = Depends(get_services)):
    """List notes, newest first."""
    try:
        return {"notes": [note_payload(note) for note in services.storage.list_notes()]}
    except Exception:
        logger.exception("Failed to list notes")
        return JSONResponse(SERVER_ERROR, status_code=500)


@app.post("/api/vault")
async def add_vault_item(
    request: VaultItemRequest, services: VaultServices = Depends(get_services)
):
    """Embed and store a new vault item."""
    try:
        item = services.ingestor.add_vault_item(
            title=request.title,
            content=request.content,
            tags=request.tags,
            type=request.type,
            category=request.category,
        )
        return {"success": True, "item": vault_item_payload(item)}
    except VaultValidationError as exc:
        return _validation_error(exc)
    except Exception:
        logger.exception("Vault error while adding item")
        return JSONResponse(SERVER_ERROR, status_code=500)


@app.get("/api/vault")
async def list_vault_items(services: VaultServices = Depends(get_services)):
    """List vault items, newest first."""
    try:
        items = services.storage.list_vault_items()
        return {"items": [vault_item_payload(item) for item in items]}
    except Exception:
        logger.exception("Failed to list vault items")
        return JSONResponse(SERVER_ERROR, status_code=500)


@app.delete("/api/vault")
async def delete_vault_item(
    id: str | None = None, services: VaultServices = Depends(get_services)
):
    """Delete a vault item by id."""
    try:
        deleted = services.ingestor.delete_vault_item(id)
        return {"success": True, "deleted": deleted}
    except VaultValidationError as exc:
        return _validation_error(exc)
    except Exception:
        logger.exception("Failed to delete vault item %s", id)
        return JSONResponse(SERVER_ERROR, status_code=500)


@app.post("/api/search")
async def search(
    request: SearchRequest, services: VaultServices = Depends(get_services)
):
    """Rank notes and vault items against a free-text query."""
    try:
        results = services.pipeline.search(request.query or "")
        return {"results": [result_payload(result) for result in results]}
    except VaultValidationError as exc:
        return _validation_error(exc)
    except Exception:
        logger.exception("Search error")
        return JSONResponse(SERVER_ERROR, status_code=500)


@app.post("/api/chat")
async def chat(request: ChatRequest, services: VaultServices = Depends(get_services)):
    """Answer a chat message from the closest vault items."""
    try:
        results = services.pipeline.retrieve_for_chat(request.message or "")
        reply = compose_reply(results)
        payload: dict[str, Any] = {"response": reply.response}
        if reply.sources:
            payload["sources"] = [
                {"title": source.title, "similarity": source.similarity}
                for source in reply.sources
            ]
        return payload
    except VaultValidationError as exc:
        return _validation_error(exc)
    except Exception:
        logger.exception("Chat error")
        return JSONResponse(SERVER_ERROR, status_code=500)


@app.post("/api/generate-tags")
async def generate_tags(request: TagRequest):
    """Suggest up to five tags from title and content."""
    if not request.title and not request.content:
        return JSONResponse({"error": "Title or content required"}, status_code=400)
    return {"tags": suggest_tags(request.title, request.content)}


def run_server(host: str = "127.0.0.1", port: int = 8000, db_path: str | None = None):
    """Run the FastAPI server."""
    import uvicorn

    # Resolve configuration before binding so a missing API key fails at startup.
    if db_path is None:
        get_services()
    else:
        services = VaultServices.build(load_config(db_path=db_path))
        app.dependency_overrides[get_services] = lambda: services
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
