"""Embedding function implementations.

Embedding functions turn note bodies into vectors.  They are handed to
ChromaDB when the target collection is resolved, and Chroma calls them on
every upsert.

Selection (see selection.py):
    1. Chroma's DefaultEmbeddingFunction: ONNX all-MiniLM-L6-v2, no extra
       dependency.  Used when EMBEDDING_MODEL is unset.
    2. FastEmbedEmbeddingFunction: ONNX via fastembed, optional extra.
    3. SentenceTransformerEmbeddingFunction: any HuggingFace model, needs
       sentence-transformers (PyTorch).
"""

from src.providers.embedding.fastembed_embedding_function import FastEmbedEmbeddingFunction
from src.providers.embedding.selection import build_embedding_function

__all__ = ["FastEmbedEmbeddingFunction", "build_embedding_function"]
