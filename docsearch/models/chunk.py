"""
Chunk domain models for the ingestion pipeline.

Represents a retrievable piece of a document, its embedded form, and the
record shape written to the vector store.

Dependencies: pydantic
System role: Data structures flowing between ingestion tasks
"""

from typing import Any

from pydantic import BaseModel, Field

MetadataValue = str | int | float | bool | list[str]


class ChunkMetadata(BaseModel):
    """Fixed metadata schema carried by every chunk."""

    title: str = ""
    heading: str = ""
    level: int = Field(default=0, ge=0, le=6)
    file_path: str = ""
    framework: str = "common"
    source_url: str = ""
    extra: dict[str, Any] = Field(
        default_factory=dict,
        description="Frontmatter fields passed through to the index",
    )


class Chunk(BaseModel):
    """Document chunk with identifier, heading position and optional parent link."""

    chunk_id: str = Field(description="Deterministic or random chunk identifier")
    content: str = Field(description="Chunk text content")
    level: int = Field(default=0, ge=0, le=6, description="Heading level, 0 for pre-heading text")
    heading: str | None = Field(default=None, description="Text of the enclosing heading")
    parent_id: str | None = Field(default=None, description="Parent chunk identifier")
    metadata: ChunkMetadata = Field(default_factory=ChunkMetadata)

    @property
    def framework(self) -> str:
        return self.metadata.framework

    @property
    def source_url(self) -> str:
        return self.metadata.source_url

    @property
    def file_path(self) -> str:
        return self.metadata.file_path

    @property
    def title(self) -> str:
        return self.metadata.title


class EmbeddedChunk(BaseModel):
    """Chunk paired with its embedding vector."""

    chunk: Chunk
    embedding: list[float]


class IndexRecord(BaseModel):
    """Record upserted into the vector store."""

    id: str
    vector: list[float]
    metadata: dict[str, MetadataValue] = Field(default_factory=dict)


class IndexStats(BaseModel):
    """Vector index statistics."""

    index_name: str
    dimension: int | None = None
    total_vector_count: int | None = None
