"""Custom exception hierarchy for the vault sync pipeline.

All application exceptions inherit from :class:`VaultSyncError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "obsidian", "chromadb", "fastembed") caused the
failure.

The hierarchy is organized by subsystem:

    VaultSyncError  (base -- catch-all for any sync error)
    +-- VaultError                (remote vault API failure)
    |   +-- NoteNotFoundError     (404 on a note fetch)
    |   +-- FolderNotFoundError   (404 on a folder listing)
    +-- VectorStoreError          (any vector-store failure, tagged by origin)
    +-- EmbeddingPreflightError   (embedding function unusable at startup)
    +-- SchemaViolationError      (remote data broke an invariant -- a defect)
    +-- ConfigurationError        (startup / missing config)
    +-- InvalidIdentifierError    (malformed path or collection name)

Nothing in the package retries.  Every error propagates to the top of the
run; ``SchemaViolationError`` in particular must never be caught and
downgraded.
"""

from __future__ import annotations

from enum import Enum


class VaultSyncError(Exception):
    """Base exception for all vault sync errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name``.  ``__str__`` prefixes the provider name in brackets,
    e.g. ``[obsidian] Note at "a.md" does not exist``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Remote vault errors
# ---------------------------------------------------------------------------


class VaultError(VaultSyncError):
    """Raised for any vault-side failure: transport, status, or unparseable body."""

    def __init__(
        self,
        message: str = "Vault request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NoteNotFoundError(VaultError):
    """Raised when the vault reports 404 for a note path."""

    def __init__(self, note_path: str, provider_name: str | None = None) -> None:
        self._note_path = note_path
        super().__init__(
            message=f'Note at "{note_path}" does not exist',
            provider_name=provider_name,
        )

    @property
    def note_path(self) -> str:
        return self._note_path


class FolderNotFoundError(VaultError):
    """Raised when the vault reports 404 for a folder listing."""

    def __init__(self, folder_path: str | None, provider_name: str | None = None) -> None:
        self._folder_path = folder_path
        super().__init__(
            message=f'Folder at "{folder_path or "/"}" does not exist',
            provider_name=provider_name,
        )

    @property
    def folder_path(self) -> str | None:
        return self._folder_path


# ---------------------------------------------------------------------------
# Vector store errors
# ---------------------------------------------------------------------------


class ErrorOrigin(str, Enum):
    """Where a wrapped vector-store failure was raised."""

    SYNCHRONOUS = "synchronous"
    ASYNCHRONOUS = "asynchronous"


class VectorStoreError(VaultSyncError):
    """Raised when a vector-store operation fails.

    ``origin`` tells callers whether the wrapped operation raised before
    returning (client-side validation, bad arguments) or whether the
    awaitable it returned failed later (network, server).  It is ``None``
    for failures raised outside the wrapping helpers.  The underlying
    exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str = "Vector store operation failed",
        provider_name: str | None = None,
        origin: ErrorOrigin | None = None,
    ) -> None:
        self._origin = origin
        super().__init__(message=message, provider_name=provider_name)

    @property
    def origin(self) -> ErrorOrigin | None:
        return self._origin


# ---------------------------------------------------------------------------
# Startup / invariant errors
# ---------------------------------------------------------------------------


class EmbeddingPreflightError(VaultSyncError):
    """Raised when the embedding function cannot embed a trivial input."""

    def __init__(
        self,
        message: str = "Embedding function preflight failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class SchemaViolationError(VaultSyncError):
    """Raised when a remote system returns data violating a relied-upon invariant.

    This is a defect, not an operational failure.  It is fatal and is never
    retried or isolated.
    """

    def __init__(
        self,
        message: str = "Remote data violated the expected schema",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(VaultSyncError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class InvalidIdentifierError(VaultSyncError, ValueError):
    """Raised by the validating constructors of paths and collection names.

    Subclasses ``ValueError`` so pydantic reports it as a validation error
    when the identifier is parsed as part of a model.
    """

    def __init__(self, message: str = "Invalid identifier") -> None:
        super().__init__(message=message)
