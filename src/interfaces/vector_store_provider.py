"""Abstract base class for vector-store providers.

Defines the contract the sync pipeline needs from a vector database:
running arbitrary operations against the connection (or one collection)
with uniform error wrapping, collection lookup and idempotent creation,
and upserting prepared record sets.

ChromaDB is the production implementation (``ChromaDBProvider``).  Nothing
here retries; retry policy belongs to whoever runs the pipeline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from src.models.vector_store import Collection, CollectionName, RecordSet

_T = TypeVar("_T")


class IVectorStoreProvider(ABC):
    """Contract for vector-store access used by the sync pipeline."""

    @abstractmethod
    async def with_connection(self, op: Callable[[Any], _T | Awaitable[_T]]) -> _T:
        """Run *op* against the live client connection.

        *op* may return a plain value or an awaitable.  If it raises before
        returning, the failure is wrapped as a ``VectorStoreError`` with
        ``origin=SYNCHRONOUS``; if the awaitable it returns fails, the
        failure is wrapped with ``origin=ASYNCHRONOUS``.  The original
        exception is chained as ``__cause__``.
        """

    @abstractmethod
    async def with_collection(
        self,
        collection: Collection,
        op: Callable[[Any], _T | Awaitable[_T]],
    ) -> _T:
        """Run *op* against an already-resolved collection, wrapping errors like
        :meth:`with_connection`."""

    @abstractmethod
    async def list_collections(self) -> list[Collection]:
        """Return every collection in the store.

        Raises
        ------
        src.utils.errors.SchemaViolationError
            If the store returns a collection whose name breaks the
            ``CollectionName`` rules.  Such entries are never dropped.
        """

    @abstractmethod
    async def get_collection(self, name: CollectionName | str) -> Collection:
        """Return the collection called *name*.

        The name is validated locally before any remote call.
        """

    @abstractmethod
    async def get_or_create_collection(
        self,
        name: CollectionName | str,
        embedding_function: Any = None,
    ) -> Collection:
        """Return the collection called *name*, creating it if needed.

        Idempotent: repeated calls with the same name resolve to the same
        underlying collection.
        """

    @abstractmethod
    async def upsert(self, collection: Collection, records: RecordSet) -> int:
        """Insert-or-update *records* keyed by id; return the number written.

        One call is one atomic write from the store's point of view.
        Upserting identical records twice leaves the collection unchanged.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier used in logs and error prefixes."""

    async def aclose(self) -> None:
        """Release network resources.  Default: nothing to release."""

    async def __aenter__(self) -> IVectorStoreProvider:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
