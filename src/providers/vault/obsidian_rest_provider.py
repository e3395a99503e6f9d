"""Obsidian Local REST API vault provider.

Implements :class:`IVaultProvider` on top of ``httpx.AsyncClient``.  Both
operations hit ``GET /vault/{path}``; the ``Accept`` header selects the
representation:

- ``application/vnd.olrapi.note+json``       -- one note (content, tags, ...)
- ``application/vnd.olrapi.note-list+json``  -- ``{"files": [...]}``

Folder paths go out with their trailing ``/`` and the whole path is
percent-encoded as one segment.  Listing entries come back relative to the
listed folder and are joined with it, so every returned path is
vault-relative.

Status mapping: 404 becomes ``NoteNotFoundError`` / ``FolderNotFoundError``;
any other non-2xx status, transport error, or non-JSON body becomes
``VaultError``.  JSON that does not match the schema is a
``SchemaViolationError``.
"""

from __future__ import annotations

from typing import TypeVar
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from src.config.settings import Settings
from src.interfaces.vault_provider import IVaultProvider
from src.models.vault import FolderListing, FolderPath, Note, NotePath, VaultPath, parse_path
from src.utils.errors import (
    FolderNotFoundError,
    InvalidIdentifierError,
    NoteNotFoundError,
    SchemaViolationError,
    VaultError,
)

logger = structlog.get_logger(logger_name=__name__)

NOTE_MEDIA_TYPE = "application/vnd.olrapi.note+json"
NOTE_LIST_MEDIA_TYPE = "application/vnd.olrapi.note-list+json"

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class ObsidianRestProvider(IVaultProvider):
    """Vault provider backed by the Obsidian Local REST API plugin.

    The ``httpx.AsyncClient`` is shared by every in-flight request of a sync
    run.  Pass *client* to inject a pre-configured one (tests use
    ``httpx.MockTransport``); otherwise one is built from *settings*.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if client is None:
            if settings is None:
                raise ValueError("ObsidianRestProvider needs either settings or a client")
            client = httpx.AsyncClient(
                base_url=settings.obsidian_base_url,
                headers={
                    "Authorization": f"Bearer {settings.obsidian_api_key.get_secret_value()}",
                },
                timeout=httpx.Timeout(settings.obsidian_timeout),
                verify=settings.obsidian_verify_tls,
            )
        self._client = client

    # ------------------------------------------------------------------
    # IVaultProvider implementation
    # ------------------------------------------------------------------

    async def list_folder(self, folder: FolderPath | None = None) -> list[VaultPath]:
        wire_path = folder.to_wire() if folder is not None else ""
        response = await self._get(wire_path, NOTE_LIST_MEDIA_TYPE)

        if response.status_code == httpx.codes.NOT_FOUND:
            raise FolderNotFoundError(folder, provider_name=self.get_provider_name())
        self._raise_for_status(response, f"list folder {wire_path or '/'}")

        listing = self._parse(response, FolderListing, f"folder listing for {wire_path or '/'}")
        try:
            children = [
                parse_path(folder.join(name) if folder is not None else name)
                for name in listing.files
            ]
        except InvalidIdentifierError as exc:
            raise SchemaViolationError(
                message=f"Folder listing for {wire_path or '/'} contains an invalid path: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.debug(
            "vault_folder_listed",
            folder=wire_path or "/",
            entries=len(children),
        )
        return children

    async def get_note(self, path: NotePath) -> Note:
        response = await self._get(path, NOTE_MEDIA_TYPE)

        if response.status_code == httpx.codes.NOT_FOUND:
            raise NoteNotFoundError(path, provider_name=self.get_provider_name())
        self._raise_for_status(response, f"fetch note {path}")

        note = self._parse(response, Note, f"note {path}")
        logger.debug("vault_note_fetched", path=path, tags=len(note.tags))
        return note

    def get_provider_name(self) -> str:
        return "obsidian"

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _get(self, wire_path: str, accept: str) -> httpx.Response:
        url = f"/vault/{quote(wire_path, safe='')}"
        try:
            return await self._client.get(url, headers={"Accept": accept})
        except httpx.HTTPError as exc:
            logger.warning("vault_request_failed", path=wire_path or "/", error=str(exc))
            raise VaultError(
                message=f"Request for {wire_path or '/'} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    def _raise_for_status(self, response: httpx.Response, action: str) -> None:
        if response.is_success:
            return
        raise VaultError(
            message=f"Could not {action}: HTTP {response.status_code}",
            provider_name=self.get_provider_name(),
        )

    def _parse(self, response: httpx.Response, model: type[_ModelT], what: str) -> _ModelT:
        try:
            payload = response.json()
        except ValueError as exc:
            raise VaultError(
                message=f"Response body for {what} is not valid JSON",
                provider_name=self.get_provider_name(),
            ) from exc
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise SchemaViolationError(
                message=f"Response body for {what} does not match {model.__name__}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
