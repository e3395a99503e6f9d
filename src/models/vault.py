"""Vault data models: folder paths, note paths, notes, and folder listings.

``FolderPath`` and ``NotePath`` are validated ``str`` subclasses.  They can
only be built through their constructors, which fail closed with
:class:`~src.utils.errors.InvalidIdentifierError`, so a malformed path never
exists as an instance.  Both plug into pydantic, so a model field typed
``NotePath`` validates raw strings from the wire.

On the wire a folder always ends with ``/``; in memory it never does.
:meth:`FolderPath.from_wire` and :meth:`FolderPath.to_wire` convert between
the two.  A note path never ends with ``/``.  The two types are therefore
disjoint: :func:`parse_path` classifies any raw listing entry as exactly one
of them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler
from pydantic_core import core_schema

from src.utils.errors import InvalidIdentifierError

FOLDER_SEPARATOR = "/"


class FolderPath(str):
    """Vault-relative folder path, stored without its trailing separator."""

    __slots__ = ()

    def __new__(cls, value: str) -> FolderPath:
        if not isinstance(value, str):
            raise InvalidIdentifierError(f"Folder path must be a string, got {type(value).__name__}")
        if not value or value.endswith(FOLDER_SEPARATOR):
            raise InvalidIdentifierError(
                f"Folder path {value!r} must be non-empty and stored without a trailing '/'"
            )
        return super().__new__(cls, value)

    @classmethod
    def from_wire(cls, raw: str) -> FolderPath:
        """Decode a wire folder path (``"a/b/"``) into ``FolderPath("a/b")``."""
        if not raw.endswith(FOLDER_SEPARATOR):
            raise InvalidIdentifierError(f"Wire folder path {raw!r} must end with '/'")
        return cls(raw[: -len(FOLDER_SEPARATOR)])

    def to_wire(self) -> str:
        return f"{self}{FOLDER_SEPARATOR}"

    def join(self, name: str) -> str:
        """Return the raw vault-relative path of *name* inside this folder."""
        return f"{self}{FOLDER_SEPARATOR}{name}"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(cls, core_schema.str_schema())


class NotePath(str):
    """Vault-relative note path; never terminated by the folder separator."""

    __slots__ = ()

    def __new__(cls, value: str) -> NotePath:
        if not isinstance(value, str):
            raise InvalidIdentifierError(f"Note path must be a string, got {type(value).__name__}")
        if not value or value.endswith(FOLDER_SEPARATOR):
            raise InvalidIdentifierError(
                f"Note path {value!r} must be non-empty and must not end with '/'"
            )
        return super().__new__(cls, value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(cls, core_schema.str_schema())


VaultPath = FolderPath | NotePath


def parse_path(raw: str) -> VaultPath:
    """Classify a raw wire path: a folder iff it ends with the separator."""
    if raw.endswith(FOLDER_SEPARATOR):
        return FolderPath.from_wire(raw)
    return NotePath(raw)


class Note(BaseModel):
    """A single note as fetched from the vault.

    Immutable once constructed.  Extra keys the vault sends (``frontmatter``,
    ``stat``) are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    path: NotePath
    content: str
    tags: tuple[str, ...] = Field(default_factory=tuple)


class FolderListing(BaseModel):
    """Body of a folder listing response: raw child names relative to the folder."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    files: tuple[str, ...]
