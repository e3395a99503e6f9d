"""Shared pytest fixtures for the vault sync test suite."""

from __future__ import annotations

import asyncio
import hashlib
import inspect
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import chromadb
import pytest
from chromadb.api.types import Documents, Embeddings

from src.config.settings import Settings
from src.interfaces.vault_provider import IVaultProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.vault import FolderPath, Note, NotePath, VaultPath
from src.models.vector_store import (
    Collection,
    CollectionName,
    MetadataRecordSet,
    RecordSet,
)
from src.utils.errors import (
    FolderNotFoundError,
    NoteNotFoundError,
    VaultError,
    VectorStoreError,
)

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def make_settings(**overrides: Any) -> Settings:
    """Build a Settings instance with test defaults, ignoring any local .env file."""
    defaults: dict[str, Any] = {
        "obsidian_api_url": "https://127.0.0.1:27124",
        "obsidian_api_port": 27124,
        "obsidian_api_key": "test-api-key",
        "chroma_host": "localhost",
        "chroma_port": 8000,
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def test_settings() -> Settings:
    return make_settings()


# ---------------------------------------------------------------------------
# Embedding function
# ---------------------------------------------------------------------------

_EMBEDDING_DIM = 32


def _hash_to_vector(text: str, dim: int = _EMBEDDING_DIM) -> list[float]:
    """Generate a deterministic unit-length vector by hashing *text*."""
    raw = hashlib.sha256(text.encode("utf-8")).digest()
    while len(raw) < dim:
        raw += hashlib.sha256(raw).digest()
    values = [byte / 255.0 - 0.5 for byte in raw[:dim]]
    magnitude = max(sum(v * v for v in values) ** 0.5, 1e-10)
    return [v / magnitude for v in values]


class HashEmbeddingFunction(chromadb.EmbeddingFunction[Documents]):
    """Deterministic Chroma embedding function that needs no model download."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    def __call__(self, input: Documents) -> Embeddings:
        self.calls.append(list(input))
        return [_hash_to_vector(text) for text in input]

    @staticmethod
    def name() -> str:
        return "test-hash"

    def get_config(self) -> dict[str, Any]:
        return {}

    @staticmethod
    def build_from_config(config: dict[str, Any]) -> HashEmbeddingFunction:
        return HashEmbeddingFunction()


@pytest.fixture
def embedding_function() -> HashEmbeddingFunction:
    return HashEmbeddingFunction()


# ---------------------------------------------------------------------------
# In-memory vault
# ---------------------------------------------------------------------------


def make_note(path: str, content: str | None = None, tags: Iterable[str] = ()) -> Note:
    return Note(path=NotePath(path), content=content or f"# {path}", tags=tuple(tags))


class FakeVault(IVaultProvider):
    """In-memory vault built from a flat collection of notes.

    Folders are implied by note paths; ``empty_folders`` adds folders with
    no children.  Paths in ``failing`` raise ``VaultError`` when listed or
    fetched.  Every call yields to the event loop once so concurrent
    callers actually interleave, and the peak number of in-flight calls is
    recorded.
    """

    def __init__(
        self,
        notes: Iterable[Note] = (),
        empty_folders: Iterable[str] = (),
        failing: Iterable[str] = (),
    ) -> None:
        self.notes: dict[str, Note] = {note.path: note for note in notes}
        self.empty_folders = set(empty_folders)
        self.failing = set(failing)
        self.listed: list[FolderPath | None] = []
        self.fetched: list[NotePath] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    def _folders(self) -> set[str]:
        folders = set(self.empty_folders)
        for path in self.notes:
            parts = path.split("/")[:-1]
            for depth in range(1, len(parts) + 1):
                folders.add("/".join(parts[:depth]))
        return folders

    async def _enter(self, path: str | None) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
        finally:
            self.in_flight -= 1
        if path is not None and path in self.failing:
            raise VaultError(message=f"Injected failure for {path}", provider_name="fake-vault")

    async def list_folder(self, folder: FolderPath | None = None) -> list[VaultPath]:
        self.listed.append(folder)
        await self._enter(folder)
        if folder is not None and folder not in self._folders():
            raise FolderNotFoundError(folder, provider_name="fake-vault")

        prefix = f"{folder}/" if folder is not None else ""
        children: dict[str, VaultPath] = {}
        for path in [*self.notes, *(f"{f}/" for f in self.empty_folders)]:
            if not path.startswith(prefix) or path == prefix:
                continue
            head, sep, _ = path[len(prefix) :].partition("/")
            if sep:
                children.setdefault(head, FolderPath(prefix + head))
            else:
                children.setdefault(head, NotePath(prefix + head))
        return list(children.values())

    async def get_note(self, path: NotePath) -> Note:
        self.fetched.append(path)
        await self._enter(path)
        if path not in self.notes:
            raise NoteNotFoundError(path, provider_name="fake-vault")
        return self.notes[path]

    def get_provider_name(self) -> str:
        return "fake-vault"

    async def aclose(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# In-memory vector store
# ---------------------------------------------------------------------------


class FakeVectorStore(IVectorStoreProvider):
    """In-memory vector store keyed by collection name, then record id.

    ``fail_upsert`` is a predicate over the record set; when it returns
    True the upsert raises ``VectorStoreError``.
    """

    def __init__(self, fail_upsert: Callable[[RecordSet], bool] | None = None) -> None:
        self.collections: dict[str, Collection] = {}
        self.records: dict[str, dict[str, dict[str, Any]]] = {}
        self.upserts: list[tuple[str, RecordSet]] = []
        self.embedding_functions: dict[str, Any] = {}
        self.fail_upsert = fail_upsert
        self.in_flight = 0
        self.max_in_flight = 0

    async def with_connection(self, op):  # noqa: ANN001, ANN201
        result = op(self)
        return await result if inspect.isawaitable(result) else result

    async def with_collection(self, collection, op):  # noqa: ANN001, ANN201
        result = op(self.records[collection.name])
        return await result if inspect.isawaitable(result) else result

    async def list_collections(self) -> list[Collection]:
        return list(self.collections.values())

    async def get_collection(self, name: CollectionName | str) -> Collection:
        validated = CollectionName(name)
        if validated not in self.collections:
            raise VectorStoreError(
                message=f"Collection {validated} does not exist",
                provider_name="fake-store",
            )
        return self.collections[validated]

    async def get_or_create_collection(
        self,
        name: CollectionName | str,
        embedding_function: Any = None,
    ) -> Collection:
        validated = CollectionName(name)
        if validated not in self.collections:
            self.collections[validated] = Collection(
                id=f"id-{len(self.collections)}", name=validated
            )
            self.records[validated] = {}
        self.embedding_functions[validated] = embedding_function
        return self.collections[validated]

    async def upsert(self, collection: Collection, records: RecordSet) -> int:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
        finally:
            self.in_flight -= 1
        if self.fail_upsert is not None and self.fail_upsert(records):
            raise VectorStoreError(message="Injected upsert failure", provider_name="fake-store")

        self.upserts.append((collection.name, records))
        store = self.records[collection.name]
        metadatas = (
            records.metadatas
            if isinstance(records, MetadataRecordSet)
            else (None,) * len(records)
        )
        for record_id, document, metadata in zip(
            records.ids, records.documents, metadatas, strict=True
        ):
            store[record_id] = {"document": document, "metadata": metadata}
        return len(records)

    def get_provider_name(self) -> str:
        return "fake-store"


@pytest.fixture
def fake_vector_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture
def sample_vault() -> FakeVault:
    """Two notes at the root, three one level down, one two levels down."""
    return FakeVault(
        notes=[
            make_note("Inbox.md", tags=["inbox"]),
            make_note("Readme.md"),
            make_note("Projects/Plan.md", tags=["project", "active"]),
            make_note("Projects/Notes.md"),
            make_note("Projects/Ideas.md", tags=["idea"]),
            make_note("Projects/Archive/Old.md"),
        ],
        empty_folders=["Attachments"],
    )
