"""Summary of a single synchronization run."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SyncResult(BaseModel):
    """Statistics about one vault-to-collection sync pass."""

    model_config = ConfigDict(frozen=True)

    collection_name: str
    notes_synced: int = Field(default=0, ge=0, description="Notes upserted successfully.")
    tagged_notes: int = Field(default=0, ge=0)
    untagged_notes: int = Field(default=0, ge=0)
    chunks_upserted: int = Field(default=0, ge=0)
    chunks_failed: int = Field(
        default=0,
        ge=0,
        description="Chunks skipped after a failure; only non-zero when isolation is enabled.",
    )
    elapsed_seconds: float = Field(default=0.0, ge=0.0)
