"""
Core business logic module.

Contains the ingestion pipeline, the hybrid search service and the
exception hierarchy shared by both.
"""

from docsearch.core.exceptions import (
    BatchEmbeddingError,
    ChunkIdCollisionError,
    DimensionMismatchError,
    DocSearchException,
    DocumentProcessingError,
    EmbeddingError,
    ListingNotSupportedError,
    ParsingError,
    RerankError,
    RetrievalError,
    SearchError,
    ValidationError,
    VectorStoreError,
    VectorStoreUploadError,
)

__all__ = [
    "DocSearchException",
    "ValidationError",
    "DocumentProcessingError",
    "ParsingError",
    "ChunkIdCollisionError",
    "EmbeddingError",
    "DimensionMismatchError",
    "BatchEmbeddingError",
    "VectorStoreError",
    "VectorStoreUploadError",
    "ListingNotSupportedError",
    "RerankError",
    "RetrievalError",
    "SearchError",
]
