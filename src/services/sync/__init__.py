"""Vault-to-vector-store synchronization.

Orchestrates one pass: **preflight -> traverse -> fetch -> chunk ->
partition -> upsert**.

1. **Preflight** (preflight.py) -- Embeds a trivial input so a broken
   embedding function fails the run before any vault call.

2. **Traverse** (traversal.py / VaultTraverser) -- Breadth-first walk of
   the vault, listing each depth's folders concurrently.

3. **Partition** (partitioner.py) -- Splits each chunk of fetched notes
   into a tagged record set with metadata and an untagged set without.

4. **Upsert** (sync_service.py / VaultSyncService) -- Ties the stages
   together and upserts every chunk concurrently.
"""

from src.services.sync.partitioner import prepare_notes, tag_metadata
from src.services.sync.preflight import verify_embedding_function
from src.services.sync.sync_service import VaultSyncService
from src.services.sync.traversal import VaultTraverser

__all__ = [
    "VaultSyncService",
    "VaultTraverser",
    "prepare_notes",
    "tag_metadata",
    "verify_embedding_function",
]
