"""Orchestrator for one vault-to-collection synchronization pass.

Pipeline stages: **preflight -> resolve collection -> traverse -> fetch ->
chunk -> partition -> upsert**.

The :class:`VaultSyncService` coordinates three collaborators (vault
provider, vector store, embedding function) without any of them knowing
about each other.  Stages overlap instead of running one after another:

    traversal producer   lists the vault depth by depth and spawns one
                         fetch task per discovered note path
    fetch tasks          push fetched notes onto a queue as they complete
    chunking loop        groups queued notes into fixed-size chunks and
                         spawns one upsert task per full chunk

All tasks live in one fail-fast task group.  By default the first failure
anywhere cancels everything still in flight and propagates; chunks that
already upserted stay committed.  Upsert is keyed by note path and
idempotent, so re-running a failed sync converges.

With ``isolate_chunk_failures`` a failed chunk upsert is logged and counted
instead.  Fetch and traversal failures, and schema violations anywhere,
always abort.
"""

from __future__ import annotations

import asyncio
import time
from contextlib import aclosing
from dataclasses import dataclass
from typing import Any

import structlog

from src.interfaces.vault_provider import IVaultProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.sync import SyncResult
from src.models.vault import FolderPath, Note, NotePath
from src.models.vector_store import Collection, CollectionName
from src.services.sync.partitioner import prepare_notes
from src.services.sync.preflight import verify_embedding_function
from src.services.sync.traversal import VaultTraverser
from src.utils.concurrency import fail_fast_task_group, guarded, throttled_gather
from src.utils.errors import SchemaViolationError, VaultSyncError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_CHUNK_SIZE = 10

_END_OF_NOTES = None


@dataclass
class _RunStats:
    notes_synced: int = 0
    tagged_notes: int = 0
    untagged_notes: int = 0
    chunks_upserted: int = 0
    chunks_failed: int = 0


class VaultSyncService:
    """Synchronize every note of a vault into one vector-store collection.

    Parameters
    ----------
    vault:
        Source of folder listings and note bodies.
    vector_store:
        Destination store.
    embedding_function:
        Function the collection uses to vectorize documents; checked by the
        preflight before anything else runs.
    collection_name:
        Target collection, validated immediately.
    chunk_size:
        Number of notes per upsert unit.
    max_concurrency:
        ``0`` for unbounded fan-out, otherwise the number of vault and
        vector-store calls allowed in flight at once.
    isolate_chunk_failures:
        Log and count failed chunk upserts instead of aborting the run.
    """

    def __init__(
        self,
        vault: IVaultProvider,
        vector_store: IVectorStoreProvider,
        embedding_function: Any,
        collection_name: str = "obsidian_notes",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_concurrency: int = 0,
        isolate_chunk_failures: bool = False,
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
        if max_concurrency < 0:
            raise ValueError(f"max_concurrency must be >= 0, got {max_concurrency}")
        self._vault = vault
        self._vector_store = vector_store
        self._embedding_function = embedding_function
        self._collection_name = CollectionName(collection_name)
        self._chunk_size = chunk_size
        self._max_concurrency = max_concurrency
        self._isolate_chunk_failures = isolate_chunk_failures

    @property
    def collection_name(self) -> CollectionName:
        return self._collection_name

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    @property
    def isolate_chunk_failures(self) -> bool:
        return self._isolate_chunk_failures

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def sync(self, root: FolderPath | None = None) -> SyncResult:
        """Run one full sync pass starting at *root* (the vault root when ``None``).

        Raises
        ------
        EmbeddingPreflightError
            If the embedding function cannot embed a trivial input.
        VaultError, VectorStoreError, SchemaViolationError
            On the first unisolated failure.
        """
        start = time.monotonic()
        log = logger.bind(collection=self._collection_name, root=root or "/")
        log.info("sync_started", chunk_size=self._chunk_size)

        await verify_embedding_function(self._embedding_function)
        collection = await self._vector_store.get_or_create_collection(
            self._collection_name, self._embedding_function
        )

        semaphore = asyncio.Semaphore(self._max_concurrency) if self._max_concurrency else None
        stats = _RunStats()
        notes: asyncio.Queue[Note | None] = asyncio.Queue()

        async with fail_fast_task_group() as group:
            group.create_task(self._produce_notes(root, notes, semaphore))

            chunk: list[Note] = []
            chunk_index = 0
            while (note := await notes.get()) is not _END_OF_NOTES:
                chunk.append(note)
                if len(chunk) == self._chunk_size:
                    group.create_task(
                        self._upsert_chunk(collection, chunk_index, chunk, semaphore, stats)
                    )
                    chunk, chunk_index = [], chunk_index + 1
            if chunk:
                group.create_task(
                    self._upsert_chunk(collection, chunk_index, chunk, semaphore, stats)
                )

        result = SyncResult(
            collection_name=self._collection_name,
            notes_synced=stats.notes_synced,
            tagged_notes=stats.tagged_notes,
            untagged_notes=stats.untagged_notes,
            chunks_upserted=stats.chunks_upserted,
            chunks_failed=stats.chunks_failed,
            elapsed_seconds=round(time.monotonic() - start, 3),
        )
        log.info("sync_complete", **result.model_dump(exclude={"collection_name"}))
        return result

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    async def _produce_notes(
        self,
        root: FolderPath | None,
        notes: asyncio.Queue[Note | None],
        semaphore: asyncio.Semaphore | None,
    ) -> None:
        """Traverse the vault and fetch every note onto *notes*, then signal the end.

        Fetches start as soon as a depth's paths are known, while the next
        depth is being listed.
        """
        traverser = VaultTraverser(self._vault, semaphore)
        async with fail_fast_task_group() as fetches, aclosing(
            traverser.iter_batches(root)
        ) as batches:
            async for paths in batches:
                for path in paths:
                    fetches.create_task(self._fetch_note(path, notes, semaphore))
        await notes.put(_END_OF_NOTES)

    async def _fetch_note(
        self,
        path: NotePath,
        notes: asyncio.Queue[Note | None],
        semaphore: asyncio.Semaphore | None,
    ) -> None:
        note = await guarded(self._vault.get_note(path), semaphore)
        await notes.put(note)

    async def _upsert_chunk(
        self,
        collection: Collection,
        index: int,
        chunk: list[Note],
        semaphore: asyncio.Semaphore | None,
        stats: _RunStats,
    ) -> None:
        """Partition one chunk and upsert its tagged and untagged halves concurrently."""
        prepared = prepare_notes(chunk)
        upserts = [
            guarded(self._vector_store.upsert(collection, records), semaphore)
            for records in prepared
            if len(records) > 0
        ]
        try:
            await throttled_gather(upserts)
        except SchemaViolationError:
            raise
        except VaultSyncError as exc:
            if not self._isolate_chunk_failures:
                raise
            stats.chunks_failed += 1
            logger.warning(
                "sync_chunk_failed",
                chunk=index,
                notes=len(chunk),
                first_note=chunk[0].path,
                error=str(exc),
            )
            return

        stats.chunks_upserted += 1
        stats.notes_synced += len(chunk)
        stats.tagged_notes += len(prepared.with_metadata)
        stats.untagged_notes += len(prepared.without_metadata)
        logger.info(
            "sync_chunk_upserted",
            chunk=index,
            tagged=len(prepared.with_metadata),
            untagged=len(prepared.without_metadata),
        )
