"""
Domain and API models.

Exports: Document, Chunk, ChunkMetadata, EmbeddedChunk, IndexRecord,
RetrievalResult, UpdateResult, IngestionReport and friends.
"""

from docsearch.models.chunk import (
    Chunk,
    ChunkMetadata,
    EmbeddedChunk,
    IndexRecord,
    IndexStats,
)
from docsearch.models.common import ErrorResponse, HealthResponse
from docsearch.models.document import FRAMEWORKS, Document, Framework
from docsearch.models.ingestion import (
    IngestionReport,
    LoadOutcome,
    LoadResult,
    UpdateResult,
)
from docsearch.models.retrieval import (
    DocumentResult,
    MergedCandidate,
    RerankHit,
    ResultMetadata,
    RetrievalResult,
    SearchCandidate,
    SearchRequest,
    SearchResponse,
)

__all__ = [
    "FRAMEWORKS",
    "Framework",
    "Document",
    "Chunk",
    "ChunkMetadata",
    "EmbeddedChunk",
    "IndexRecord",
    "IndexStats",
    "ErrorResponse",
    "HealthResponse",
    "LoadOutcome",
    "LoadResult",
    "UpdateResult",
    "IngestionReport",
    "RetrievalResult",
    "ResultMetadata",
    "SearchCandidate",
    "MergedCandidate",
    "RerankHit",
    "SearchRequest",
    "SearchResponse",
    "DocumentResult",
]
