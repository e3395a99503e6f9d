"""Embedding function preflight.

Every upsert makes Chroma call the collection's embedding function, so a
broken function (missing model weights, missing library, bad credentials)
would otherwise fail once per chunk, deep into the run.  The preflight
embeds one trivial input before traversal starts and aborts the run if that
does not produce a non-empty vector.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from src.utils.errors import EmbeddingPreflightError

logger = structlog.get_logger(logger_name=__name__)

PREFLIGHT_INPUT = ["preflight"]


async def verify_embedding_function(embedding_function: Any) -> int:
    """Embed :data:`PREFLIGHT_INPUT` and return the vector dimension.

    The function is called in a worker thread because Chroma embedding
    functions are blocking.

    Raises
    ------
    EmbeddingPreflightError
        If the call raises or returns no usable vector.
    """
    name = type(embedding_function).__name__
    try:
        vectors = await asyncio.to_thread(embedding_function, PREFLIGHT_INPUT)
    except Exception as exc:
        logger.error("embedding_preflight_failed", function=name, error=str(exc))
        raise EmbeddingPreflightError(
            message=f"Embedding function {name} failed on a trivial input: {exc}",
            provider_name=name,
        ) from exc

    if vectors is None or len(vectors) != len(PREFLIGHT_INPUT) or len(vectors[0]) == 0:
        logger.error("embedding_preflight_empty", function=name)
        raise EmbeddingPreflightError(
            message=f"Embedding function {name} returned no vector for a trivial input",
            provider_name=name,
        )

    dimension = len(vectors[0])
    logger.info("embedding_preflight_ok", function=name, dimension=dimension)
    return dimension
