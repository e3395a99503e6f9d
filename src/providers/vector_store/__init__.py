"""Vector store provider implementations.

ChromaDB is the sole vector store implementation, reached over HTTP in
production.  To target another vector database, implement
IVectorStoreProvider and wire it in main.py.
"""

from src.providers.vector_store.chromadb_provider import ChromaDBProvider

__all__ = ["ChromaDBProvider"]
