"""Domain models, re-exported from one place.

Import models from ``src.models`` rather than their submodules
(``from src.models import Note``).

The models are organized across three submodules by domain concern:
    - vault.py        -- Vault paths, notes, and folder listings as they
                         arrive from the Obsidian REST API
    - vector_store.py -- Collection names, collection records, and the
                         record sets sent to ChromaDB on upsert
    - sync.py         -- Summary of a completed sync run

If you add a new model class, add it to ``__all__`` too.
"""

from __future__ import annotations

# --- Vault models: paths are validated newtypes so a folder can never be
# confused with a note once parsed. ---
from src.models.vault import (
    FolderListing,
    FolderPath,
    Note,
    NotePath,
    VaultPath,
    parse_path,
)
# --- Vector store models: the write side of a sync. ---
from src.models.vector_store import (
    Collection,
    CollectionName,
    Metadata,
    MetadataRecordSet,
    PlainRecordSet,
    PreparedNotes,
    RecordSet,
)
from src.models.sync import SyncResult

__all__ = [
    # vault
    "FolderListing",
    "FolderPath",
    "Note",
    "NotePath",
    "VaultPath",
    "parse_path",
    # vector store
    "Collection",
    "CollectionName",
    "Metadata",
    "MetadataRecordSet",
    "PlainRecordSet",
    "PreparedNotes",
    "RecordSet",
    # sync
    "SyncResult",
]
