"""Vector-store data models: collection names, collection handles, record sets.

``CollectionName`` enforces ChromaDB's naming rules locally so an invalid
name is rejected before any remote call.  ``Collection`` is the handle a
store returns; the live client-side collection object rides along as a
private attribute so scoped operations do not need another round trip.

The record sets are the output of the partitioner.  Both enforce that their
parallel sequences line up: ``ids[i]`` belongs with ``documents[i]`` (and
``metadatas[i]``).
"""

from __future__ import annotations

import re
from typing import Any, NamedTuple

from pydantic import (
    BaseModel,
    ConfigDict,
    GetCoreSchemaHandler,
    PrivateAttr,
    model_validator,
)
from pydantic_core import core_schema

from src.models.vault import NotePath
from src.utils.errors import InvalidIdentifierError

_MIN_NAME_LENGTH = 3
_MAX_NAME_LENGTH = 512
_NAME_PATTERN = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9._-]*[A-Za-z0-9])?")


class CollectionName(str):
    """Validated collection name.

    3-512 characters from ``[A-Za-z0-9._-]``, starting and ending with an
    alphanumeric character, with no ``..`` anywhere.
    """

    __slots__ = ()

    def __new__(cls, value: str) -> CollectionName:
        if not isinstance(value, str):
            raise InvalidIdentifierError(
                f"Collection name must be a string, got {type(value).__name__}"
            )
        if not _MIN_NAME_LENGTH <= len(value) <= _MAX_NAME_LENGTH:
            raise InvalidIdentifierError(
                f"Collection name must be {_MIN_NAME_LENGTH}-{_MAX_NAME_LENGTH} characters, "
                f"got {len(value)}"
            )
        if not _NAME_PATTERN.fullmatch(value):
            raise InvalidIdentifierError(
                f"Collection name {value!r} may only contain [A-Za-z0-9._-] and must "
                "start and end with an alphanumeric character"
            )
        if ".." in value:
            raise InvalidIdentifierError(
                f"Collection name {value!r} must not contain two consecutive periods"
            )
        return super().__new__(cls, value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(cls, core_schema.str_schema())


class Collection(BaseModel):
    """A vector-store collection handle.

    ``_handle`` holds the client library's collection object when the
    handle came from a create/get call; it is never serialized.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: CollectionName

    _handle: Any = PrivateAttr(default=None)

    @property
    def handle(self) -> Any:
        return self._handle

    def with_handle(self, handle: Any) -> Collection:
        collection = self.model_copy()
        collection._handle = handle
        return collection


Metadata = dict[str, bool]


class MetadataRecordSet(BaseModel):
    """Parallel ids/documents/metadatas for notes that carry at least one tag."""

    model_config = ConfigDict(frozen=True)

    ids: tuple[NotePath, ...] = ()
    documents: tuple[str, ...] = ()
    metadatas: tuple[Metadata, ...] = ()

    @model_validator(mode="after")
    def _check_alignment(self) -> MetadataRecordSet:
        if not len(self.ids) == len(self.documents) == len(self.metadatas):
            raise ValueError(
                f"Misaligned record set: {len(self.ids)} ids, {len(self.documents)} documents, "
                f"{len(self.metadatas)} metadatas"
            )
        if any(not metadata for metadata in self.metadatas):
            raise ValueError("Every metadata mapping must be non-empty")
        return self

    def __len__(self) -> int:
        return len(self.ids)

    def to_upsert_kwargs(self) -> dict[str, list[Any]]:
        return {
            "ids": list(self.ids),
            "documents": list(self.documents),
            "metadatas": [dict(m) for m in self.metadatas],
        }


class PlainRecordSet(BaseModel):
    """Parallel ids/documents for notes without tags."""

    model_config = ConfigDict(frozen=True)

    ids: tuple[NotePath, ...] = ()
    documents: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_alignment(self) -> PlainRecordSet:
        if len(self.ids) != len(self.documents):
            raise ValueError(
                f"Misaligned record set: {len(self.ids)} ids, {len(self.documents)} documents"
            )
        return self

    def __len__(self) -> int:
        return len(self.ids)

    def to_upsert_kwargs(self) -> dict[str, list[Any]]:
        return {"ids": list(self.ids), "documents": list(self.documents)}


RecordSet = MetadataRecordSet | PlainRecordSet


class PreparedNotes(NamedTuple):
    """Result of partitioning one chunk of notes."""

    with_metadata: MetadataRecordSet
    without_metadata: PlainRecordSet
