"""Abstract base class for remote vault providers.

Defines the contract for reading a hierarchical note store: listing a
folder's immediate children and fetching one note.  The Obsidian Local REST
API adapter is the production implementation; tests inject in-memory fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from src.models.vault import FolderPath, Note, NotePath, VaultPath


# Concrete implementations:
#   ObsidianRestProvider -- Obsidian Local REST API over HTTP(S)
# Located in: src/providers/vault/
class IVaultProvider(ABC):
    """Contract for the remote vault consumed by the sync pipeline."""

    @abstractmethod
    async def list_folder(self, folder: FolderPath | None = None) -> list[VaultPath]:
        """List the immediate children of *folder* (the vault root when ``None``).

        Returns
        -------
        list[VaultPath]
            Vault-relative ``FolderPath`` and ``NotePath`` entries, each
            already validated.

        Raises
        ------
        src.utils.errors.FolderNotFoundError
            If the vault reports that *folder* does not exist.
        src.utils.errors.VaultError
            For any other transport, status, or body-parsing failure.
        src.utils.errors.SchemaViolationError
            If the body parses but does not match the listing schema.
        """

    @abstractmethod
    async def get_note(self, path: NotePath) -> Note:
        """Fetch a single note's content and tags.

        Raises
        ------
        src.utils.errors.NoteNotFoundError
            If the vault reports 404 for *path*.
        src.utils.errors.VaultError
            For any other failure.
        src.utils.errors.SchemaViolationError
            If the body does not match the note schema.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier used in logs and error prefixes."""

    async def aclose(self) -> None:
        """Release network resources.  Default: nothing to release."""

    async def __aenter__(self) -> IVaultProvider:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
