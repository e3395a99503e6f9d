"""ChromaDB vector store provider adapter.

Wraps a ChromaDB client to implement :class:`IVectorStoreProvider`.  In
production the client is ``chromadb.AsyncHttpClient`` talking to a Chroma
server; every client call returns a coroutine.  The provider accepts any
client, though, including the synchronous ``EphemeralClient`` used by the
integration tests, because :meth:`with_connection` handles both plain and
awaitable results.

Chroma mixes two failure modes: argument validation raises immediately,
while network and server failures surface when the returned coroutine is
awaited.  Both become :class:`VectorStoreError`, tagged with an
:class:`ErrorOrigin` so callers can tell them apart.
"""

from __future__ import annotations

import inspect
import os
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

# Chroma reads this before its telemetry client starts.
os.environ.setdefault("ANONYMIZED_TELEMETRY", "False")

import chromadb
import structlog
from chromadb.config import Settings as ChromaSettings
from pydantic import ValidationError

from src.config.settings import Settings
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.vector_store import Collection, CollectionName, RecordSet
from src.utils.errors import ErrorOrigin, SchemaViolationError, VectorStoreError

logger = structlog.get_logger(logger_name=__name__)

_T = TypeVar("_T")

_COLLECTION_METADATA = {"hnsw:space": "cosine"}


class ChromaDBProvider(IVectorStoreProvider):
    """Vector store provider backed by ChromaDB.

    Parameters
    ----------
    client:
        A connected Chroma client (``AsyncClientAPI`` or ``ClientAPI``).
    embedding_function:
        Default embedding function passed when collections are resolved.
        ``None`` lets Chroma use the function persisted with the collection.
    """

    def __init__(self, client: Any, embedding_function: Any = None) -> None:
        self._client = client
        self._embedding_function = embedding_function

    @classmethod
    async def connect(
        cls,
        settings: Settings,
        embedding_function: Any = None,
    ) -> ChromaDBProvider:
        """Open an HTTP connection to the Chroma server and verify it with a heartbeat."""
        try:
            client = await chromadb.AsyncHttpClient(
                host=settings.chroma_host,
                port=settings.chroma_port,
                ssl=settings.chroma_ssl,
                settings=ChromaSettings(anonymized_telemetry=False),
            )
        except Exception as exc:
            raise VectorStoreError(
                message=(
                    f"Could not connect to ChromaDB at "
                    f"{settings.chroma_host}:{settings.chroma_port}: {exc}"
                ),
                provider_name="chromadb",
            ) from exc

        provider = cls(client, embedding_function=embedding_function)
        heartbeat = await provider.with_connection(lambda c: c.heartbeat())
        logger.info(
            "chromadb_connected",
            host=settings.chroma_host,
            port=settings.chroma_port,
            ssl=settings.chroma_ssl,
            heartbeat=heartbeat,
        )
        return provider

    # ------------------------------------------------------------------
    # Error-wrapping execution
    # ------------------------------------------------------------------

    async def with_connection(self, op: Callable[[Any], _T | Awaitable[_T]]) -> _T:
        return await self._run(op, self._client, "with_connection")

    async def with_collection(
        self,
        collection: Collection,
        op: Callable[[Any], _T | Awaitable[_T]],
    ) -> _T:
        handle = collection.handle
        if handle is None:
            handle = await self.with_connection(
                lambda c: c.get_collection(**self._collection_kwargs(collection.name))
            )
        return await self._run(op, handle, "with_collection")

    async def _run(self, op: Callable[[Any], Any], target: Any, scope: str) -> Any:
        try:
            result = op(target)
        except Exception as exc:
            raise VectorStoreError(
                message=f"Synchronous error in `{scope}`: {exc}",
                provider_name=self.get_provider_name(),
                origin=ErrorOrigin.SYNCHRONOUS,
            ) from exc

        if not inspect.isawaitable(result):
            return result
        try:
            return await result
        except Exception as exc:
            raise VectorStoreError(
                message=f"Asynchronous error in `{scope}`: {exc}",
                provider_name=self.get_provider_name(),
                origin=ErrorOrigin.ASYNCHRONOUS,
            ) from exc

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    async def list_collections(self) -> list[Collection]:
        raw_collections = await self.with_connection(lambda c: c.list_collections())
        # Handles from a listing carry whatever embedding function Chroma
        # rebuilt for them, so they are not kept; with_collection re-resolves.
        collections = [self._to_collection(raw, keep_handle=False) for raw in raw_collections]
        logger.info("chromadb_collections_listed", count=len(collections))
        return collections

    async def get_collection(self, name: CollectionName | str) -> Collection:
        validated = CollectionName(name)
        raw = await self.with_connection(
            lambda c: c.get_collection(**self._collection_kwargs(validated))
        )
        return self._to_collection(raw, keep_handle=True)

    async def get_or_create_collection(
        self,
        name: CollectionName | str,
        embedding_function: Any = None,
    ) -> Collection:
        validated = CollectionName(name)
        kwargs = self._collection_kwargs(validated, embedding_function)
        raw = await self.with_connection(
            lambda c: c.get_or_create_collection(metadata=_COLLECTION_METADATA, **kwargs)
        )
        collection = self._to_collection(raw, keep_handle=True)
        logger.info("chromadb_collection_ready", name=collection.name, id=collection.id)
        return collection

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def upsert(self, collection: Collection, records: RecordSet) -> int:
        if len(records) == 0:
            return 0
        kwargs = records.to_upsert_kwargs()
        await self.with_collection(collection, lambda c: c.upsert(**kwargs))
        logger.debug(
            "chromadb_upsert",
            collection=collection.name,
            count=len(records),
            with_metadata="metadatas" in kwargs,
        )
        return len(records)

    def get_provider_name(self) -> str:
        return "chromadb"

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _collection_kwargs(self, name: str, embedding_function: Any = None) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"name": str(name)}
        function = embedding_function if embedding_function is not None else self._embedding_function
        if function is not None:
            kwargs["embedding_function"] = function
        return kwargs

    def _to_collection(self, raw: Any, keep_handle: bool) -> Collection:
        """Validate a client collection object into a :class:`Collection`.

        A store-side collection whose id or name breaks our invariants is a
        schema violation, never silently skipped.
        """
        try:
            collection = Collection(id=str(raw.id), name=raw.name)
        except (AttributeError, ValidationError) as exc:
            raise SchemaViolationError(
                message=f"Vector store returned an invalid collection {raw!r}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        return collection.with_handle(raw) if keep_handle else collection
