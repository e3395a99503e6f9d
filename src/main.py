"""Obsidian-to-ChromaDB sync composition root.

Wires together providers and the sync service from :class:`Settings`.
Nothing is constructed at import time; the CLI (and scripts) call
:func:`run_sync` or the individual ``build_*`` factories.
"""

from __future__ import annotations

from typing import Any

import structlog

from src.config.settings import Settings
from src.models.sync import SyncResult
from src.models.vault import FolderPath
from src.providers.embedding.selection import build_embedding_function
from src.providers.vault.obsidian_rest_provider import ObsidianRestProvider
from src.providers.vector_store.chromadb_provider import ChromaDBProvider
from src.services.sync.sync_service import VaultSyncService
from src.utils.logging import configure_logging, get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def setup_logging(app_settings: Settings) -> None:
    """Configure structlog from settings: JSON in production, console otherwise."""
    configure_logging(
        log_level=app_settings.log_level,
        json_output=(app_settings.app_env == "production"),
    )


# ---------------------------------------------------------------------------
# Provider factories
# ---------------------------------------------------------------------------


def build_vault_provider(app_settings: Settings) -> ObsidianRestProvider:
    return ObsidianRestProvider(settings=app_settings)


async def build_vector_store(
    app_settings: Settings,
    embedding_function: Any = None,
) -> ChromaDBProvider:
    """Connect to the configured Chroma server.

    Raises :class:`VectorStoreError` if the server is unreachable.
    """
    return await ChromaDBProvider.connect(app_settings, embedding_function=embedding_function)


def build_sync_service(
    app_settings: Settings,
    vault: ObsidianRestProvider,
    vector_store: ChromaDBProvider,
    embedding_function: Any,
    collection: str | None = None,
    chunk_size: int | None = None,
) -> VaultSyncService:
    """Construct the sync service, letting CLI flags override settings."""
    return VaultSyncService(
        vault=vault,
        vector_store=vector_store,
        embedding_function=embedding_function,
        collection_name=collection or app_settings.chroma_collection,
        chunk_size=chunk_size or app_settings.sync_chunk_size,
        max_concurrency=app_settings.sync_max_concurrency,
        isolate_chunk_failures=app_settings.sync_isolate_chunk_failures,
    )


# ---------------------------------------------------------------------------
# One-shot sync
# ---------------------------------------------------------------------------


async def run_sync(
    app_settings: Settings,
    root: FolderPath | None = None,
    collection: str | None = None,
    chunk_size: int | None = None,
) -> SyncResult:
    """Build every collaborator, run one sync pass, and close the connections.

    Raises
    ------
    VaultSyncError
        Any subclass, from embedding selection through the last upsert.
    """
    embedding_function = build_embedding_function(app_settings.embedding_model)
    async with build_vault_provider(app_settings) as vault:
        vector_store = await build_vector_store(app_settings, embedding_function)
        async with vector_store:
            service = build_sync_service(
                app_settings,
                vault,
                vector_store,
                embedding_function,
                collection=collection,
                chunk_size=chunk_size,
            )
            _logger.info(
                "sync_configured",
                vault=app_settings.obsidian_base_url,
                vector_store=vector_store.get_provider_name(),
                embedding=type(embedding_function).__name__,
            )
            return await service.sync(root)
