"""Embedding function selection by configuration name.

``EMBEDDING_MODEL`` picks the function Chroma uses to vectorize note bodies:

    unset / "default"      -> Chroma's DefaultEmbeddingFunction (ONNX MiniLM)
    "fastembed:<model>"    -> FastEmbedEmbeddingFunction(<model>)
    anything else          -> SentenceTransformerEmbeddingFunction(<name>)

Chroma's built-in functions import their backing library when constructed,
so a missing optional dependency surfaces here.  It is reported as an
:class:`EmbeddingPreflightError`: the run cannot embed anything either way.
"""

from __future__ import annotations

from typing import Any

import structlog
from chromadb.utils import embedding_functions

from src.providers.embedding.fastembed_embedding_function import FastEmbedEmbeddingFunction
from src.utils.errors import EmbeddingPreflightError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_EMBEDDING_NAME = "default"
_FASTEMBED_PREFIX = "fastembed:"


def build_embedding_function(name: str | None = None) -> Any:
    """Return the Chroma embedding function selected by *name*.

    Raises
    ------
    EmbeddingPreflightError
        If the selected backend cannot be constructed.
    """
    selected = (name or DEFAULT_EMBEDDING_NAME).strip() or DEFAULT_EMBEDDING_NAME
    try:
        if selected == DEFAULT_EMBEDDING_NAME:
            function: Any = embedding_functions.DefaultEmbeddingFunction()
        elif selected.startswith(_FASTEMBED_PREFIX):
            function = FastEmbedEmbeddingFunction(
                model_name=selected[len(_FASTEMBED_PREFIX) :] or None
            )
        else:
            function = embedding_functions.SentenceTransformerEmbeddingFunction(
                model_name=selected
            )
    except Exception as exc:
        raise EmbeddingPreflightError(
            message=f"Could not build embedding function {selected!r}: {exc}",
            provider_name=selected,
        ) from exc

    logger.info("embedding_function_selected", name=selected, kind=type(function).__name__)
    return function
