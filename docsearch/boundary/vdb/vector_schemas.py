"""
Vector database schemas.

Pydantic models for vector query results and the protocol every vector
store adapter implements.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from typing import Any, Protocol

from pydantic import BaseModel, Field

from docsearch.models.chunk import IndexRecord, IndexStats


class VectorMatch(BaseModel):
    """Single result from a vector query."""

    id: str = Field(description="Record key (chunk identifier)")
    score: float = Field(description="Similarity score, higher is closer")
    metadata: dict[str, Any] = Field(default_factory=dict)


class VectorStore(Protocol):
    """Operations the ingestion and search layers need from a vector index."""

    async def upsert(self, records: list[IndexRecord]) -> None: ...

    async def delete_many(self, ids: list[str]) -> None: ...

    async def delete_all(self) -> None: ...

    async def query(
        self,
        vector: list[float],
        top_k: int,
        filter: dict[str, Any] | None = None,
        include_metadata: bool = True,
    ) -> list[VectorMatch]: ...

    async def fetch(self, ids: list[str]) -> dict[str, dict[str, Any]]: ...

    async def list_all_ids(self) -> list[str]:
        """Raises ListingNotSupportedError when the store cannot enumerate keys."""
        ...

    async def describe_stats(self) -> IndexStats: ...
