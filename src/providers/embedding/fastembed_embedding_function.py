"""Local ONNX-based Chroma embedding function using fastembed.

Wraps the ``fastembed`` library as a ``chromadb.EmbeddingFunction`` so a
collection can vectorize note bodies with ONNX Runtime and **no PyTorch
dependency**.  Selected with ``EMBEDDING_MODEL=fastembed:<model>``.

The model is loaded on first call, not at construction, so building the
function is cheap; the sync preflight is what triggers the download.
"""

from __future__ import annotations

from typing import Any

import chromadb
import structlog
from chromadb.api.types import Documents, Embeddings

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_MODEL = "BAAI/bge-small-en-v1.5"
_BATCH_LIMIT = 64


class FastEmbedEmbeddingFunction(chromadb.EmbeddingFunction[Documents]):
    """Chroma embedding function backed by fastembed (ONNX Runtime)."""

    def __init__(self, model_name: str | None = None) -> None:
        self._model_name = model_name or _DEFAULT_MODEL
        self._model: Any = None

    def _load_model(self) -> Any:
        if self._model is None:
            from fastembed import TextEmbedding

            logger.info("loading_fastembed_model", model=self._model_name)
            self._model = TextEmbedding(model_name=self._model_name)
            logger.info("fastembed_model_loaded", model=self._model_name)
        return self._model

    def __call__(self, input: Documents) -> Embeddings:
        model = self._load_model()
        embeddings: Embeddings = []
        for start in range(0, len(input), _BATCH_LIMIT):
            batch = list(input[start : start + _BATCH_LIMIT])
            # fastembed yields one numpy array per document
            embeddings.extend(model.embed(batch))
        return embeddings

    @property
    def model_name(self) -> str:
        return self._model_name

    @staticmethod
    def name() -> str:
        return "fastembed"

    def get_config(self) -> dict[str, Any]:
        return {"model_name": self._model_name}

    @staticmethod
    def build_from_config(config: dict[str, Any]) -> FastEmbedEmbeddingFunction:
        return FastEmbedEmbeddingFunction(model_name=config.get("model_name"))
