"""Unit tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from src.utils.errors import (
    ConfigurationError,
    EmbeddingPreflightError,
    ErrorOrigin,
    FolderNotFoundError,
    InvalidIdentifierError,
    NoteNotFoundError,
    SchemaViolationError,
    VaultError,
    VaultSyncError,
    VectorStoreError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            VaultError(),
            NoteNotFoundError("a.md"),
            FolderNotFoundError("Projects"),
            VectorStoreError(),
            EmbeddingPreflightError(),
            SchemaViolationError(),
            ConfigurationError(),
            InvalidIdentifierError(),
        ],
    )
    def test_everything_is_a_vault_sync_error(self, error: Exception) -> None:
        assert isinstance(error, VaultSyncError)

    def test_not_found_errors_are_vault_errors(self) -> None:
        assert issubclass(NoteNotFoundError, VaultError)
        assert issubclass(FolderNotFoundError, VaultError)

    def test_invalid_identifier_is_a_value_error(self) -> None:
        assert issubclass(InvalidIdentifierError, ValueError)


class TestMessages:
    def test_provider_prefix(self) -> None:
        error = VaultError(message="boom", provider_name="obsidian")
        assert str(error) == "[obsidian] boom"
        assert error.message == "boom"

    def test_no_prefix_without_provider(self) -> None:
        assert str(ConfigurationError(message="missing")) == "missing"

    def test_note_not_found_names_path(self) -> None:
        error = NoteNotFoundError("Projects/Plan.md", provider_name="obsidian")
        assert error.note_path == "Projects/Plan.md"
        assert '"Projects/Plan.md"' in str(error)

    def test_folder_not_found_root(self) -> None:
        error = FolderNotFoundError(None)
        assert error.folder_path is None
        assert '"/"' in str(error)

    def test_vector_store_origin(self) -> None:
        error = VectorStoreError(message="x", origin=ErrorOrigin.SYNCHRONOUS)
        assert error.origin is ErrorOrigin.SYNCHRONOUS
        assert VectorStoreError().origin is None
