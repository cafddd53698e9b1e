"""
Ingestion result models.

Dependencies: pydantic
System role: Outcomes reported by the loader, the index upserter and the pipeline
"""

from typing import Literal

from pydantic import BaseModel, Field

from docsearch.models.document import Document


class LoadOutcome(BaseModel):
    """Per-file result of a directory load."""

    file_path: str
    status: Literal["loaded", "skipped"]
    reason: str | None = None


class LoadResult(BaseModel):
    """Documents loaded from a directory and the outcome of every file visited."""

    documents: list[Document] = Field(default_factory=list)
    outcomes: list[LoadOutcome] = Field(default_factory=list)

    @property
    def skipped(self) -> list[LoadOutcome]:
        return [o for o in self.outcomes if o.status == "skipped"]


class UpdateResult(BaseModel):
    """Counts from an index synchronization."""

    upserted: int = 0
    deleted: int = 0
    unchanged: int = 0
    orphan_detection: bool = Field(
        default=True,
        description="False when the store could not list IDs, so deleted may under-report",
    )


class IngestionReport(BaseModel):
    """Summary of one ingestion run."""

    strategy: str
    documents_loaded: int
    files_skipped: list[LoadOutcome] = Field(default_factory=list)
    chunk_count: int
    update: UpdateResult
    processing_time_ms: float
