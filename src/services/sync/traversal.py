"""Breadth-first traversal of the vault folder tree.

The walk keeps a *frontier*: the folders to expand at the current depth.
Each step lists every frontier folder concurrently, concatenates the
listings, emits the note paths found at that depth as one batch, and makes
the folder paths the next frontier.  The walk ends when a depth yields no
folders.

The traversal is an async generator, so it is lazy (the next depth is only
listed when the consumer asks for more), finite (a vault tree has no
cycles), and non-restartable (a consumed generator stays exhausted).  A
failed listing anywhere aborts the walk; there is no partial recovery.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import structlog

from src.interfaces.vault_provider import IVaultProvider
from src.models.vault import FolderPath, NotePath
from src.utils.concurrency import throttled_gather

logger = structlog.get_logger(logger_name=__name__)


class VaultTraverser:
    """Walk a vault breadth-first, yielding note paths one depth at a time.

    Parameters
    ----------
    vault:
        Provider used for folder listings.
    semaphore:
        Optional bound on concurrent listings.  ``None`` lists every folder
        of a frontier at once.
    """

    def __init__(
        self,
        vault: IVaultProvider,
        semaphore: asyncio.Semaphore | None = None,
    ) -> None:
        self._vault = vault
        self._semaphore = semaphore

    async def iter_batches(self, root: FolderPath | None = None) -> AsyncIterator[list[NotePath]]:
        """Yield the note paths of each depth as one flattened batch.

        Depths that contain folders but no notes yield nothing.  An empty
        vault yields nothing at all.

        Raises
        ------
        src.utils.errors.FolderNotFoundError
            If *root* (or a folder vanishing mid-walk) does not exist.
        src.utils.errors.VaultError
            If any listing fails.
        """
        frontier: list[FolderPath | None] = [root]
        depth = 0
        while frontier:
            listings = await throttled_gather(
                (self._vault.list_folder(folder) for folder in frontier),
                semaphore=self._semaphore,
            )

            notes: list[NotePath] = []
            next_frontier: list[FolderPath | None] = []
            for listing in listings:
                for path in listing:
                    if isinstance(path, FolderPath):
                        next_frontier.append(path)
                    else:
                        notes.append(path)

            logger.debug(
                "vault_depth_listed",
                depth=depth,
                folders_listed=len(frontier),
                notes=len(notes),
                subfolders=len(next_frontier),
            )
            if notes:
                yield notes

            frontier = next_frontier
            depth += 1
