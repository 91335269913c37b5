"""
Configuration for the vault services.

All settings are collected into one immutable ``VaultConfig`` that is built
once at process start and handed to the components that need it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


DEFAULT_DB_PATH = "~/.personal_vault/vault.duckdb"
DEFAULT_EMBEDDING_MODEL = "gemini-embedding-001"
DEFAULT_EMBEDDING_DIM = 768

ENV_API_KEY = "GOOGLE_API_KEY"
ENV_DB_PATH = "PERSONAL_VAULT_DB_PATH"
ENV_EMBEDDING_MODEL = "PERSONAL_VAULT_EMBEDDING_MODEL"
ENV_EMBEDDING_DIM = "PERSONAL_VAULT_EMBEDDING_DIM"


@dataclass(frozen=True)
class VaultConfig:
    """Resolved runtime settings."""

    api_key: str
    db_path: str
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    embedding_dim: int = DEFAULT_EMBEDDING_DIM
    search_threshold: float = 0.1
    chat_threshold: float = 0.3
    result_limit: int = 3


def resolve_db_path(override_path: str | None = None) -> str:
    """
    Resolve the DuckDB path from CLI override, env var, or default.

    Precedence:
    1) explicit override_path
    2) PERSONAL_VAULT_DB_PATH
    3) default path
    """
    raw_path = override_path or os.getenv(ENV_DB_PATH) or DEFAULT_DB_PATH
    resolved = Path(raw_path).expanduser().resolve()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return str(resolved)


def load_config(
    *,
    api_key: str | None = None,
    db_path: str | None = None,
    embedding_model: str | None = None,
    embedding_dim: int | None = None,
) -> VaultConfig:
    """Build a ``VaultConfig``, failing fast when the API key is missing."""
    resolved_key = api_key or os.getenv(ENV_API_KEY)
    if not resolved_key:
        raise ValueError(
            f"{ENV_API_KEY} not found. "
            "Provide api_key or set the environment variable."
        )
    return VaultConfig(
        api_key=resolved_key,
        db_path=resolve_db_path(db_path),
        embedding_model=embedding_model
        or os.getenv(ENV_EMBEDDING_MODEL, DEFAULT_EMBEDDING_MODEL),
        embedding_dim=embedding_dim
        or int(os.getenv(ENV_EMBEDDING_DIM, str(DEFAULT_EMBEDDING_DIM))),
    )
