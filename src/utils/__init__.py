"""Utility modules shared across the sync pipeline.

- **errors** -- Domain exception hierarchy rooted at VaultSyncError; each
  collaborator raises its own subclass so callers can handle failures
  granularly without broad ``except Exception`` blocks.
- **concurrency** -- Fail-fast fan-out helpers over asyncio, with an
  optional semaphore bound.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

# -- Domain exception hierarchy --------------------------------------------
from src.utils.errors import (
    ConfigurationError,
    EmbeddingPreflightError,
    ErrorOrigin,
    FolderNotFoundError,
    InvalidIdentifierError,
    NoteNotFoundError,
    SchemaViolationError,
    VaultError,
    VaultSyncError,
    VectorStoreError,
)

# -- Async concurrency helpers ---------------------------------------------
from src.utils.concurrency import fail_fast_task_group, guarded, throttled_gather

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "EmbeddingPreflightError",
    "ErrorOrigin",
    "FolderNotFoundError",
    "InvalidIdentifierError",
    "NoteNotFoundError",
    "SchemaViolationError",
    "VaultError",
    "VaultSyncError",
    "VectorStoreError",
    "configure_logging",
    "fail_fast_task_group",
    "get_logger",
    "guarded",
    "throttled_gather",
]
