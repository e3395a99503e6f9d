"""Public interface definitions for the external services a sync talks to.

Both external systems are reached only through the abstract base classes in
this package.  Concrete adapters implement them and are constructed in
``src/main.py``, so unit tests can inject in-memory fakes instead of a
running Obsidian or ChromaDB.

CONCRETE PROVIDER MAP:
    Interface                  ->  Concrete implementations (in src/providers/)
    ---------------------------------------------------------------------
    IVaultProvider             ->  ObsidianRestProvider
    IVectorStoreProvider       ->  ChromaDBProvider

Re-exports
----------
IVaultProvider
    Folder listing and note retrieval contract.
IVectorStoreProvider
    Collection management and upsert contract.
"""

from src.interfaces.vault_provider import IVaultProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider

__all__ = [
    "IVaultProvider",
    "IVectorStoreProvider",
]
