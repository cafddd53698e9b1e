"""
Ingestion pipeline tasks.

Exports: LoadingTask, ChunkingTask, RelationshipTask, EmbeddingTask, VectorStoreTask
"""

from docsearch.core.ingestion.tasks.chunking_task import ChunkingTask
from docsearch.core.ingestion.tasks.embedding_task import EmbeddingTask
from docsearch.core.ingestion.tasks.loading_task import LoadingTask, parse_frontmatter
from docsearch.core.ingestion.tasks.relationship_task import (
    RelationshipTask,
    validate_relationships,
)
from docsearch.core.ingestion.tasks.vector_store_task import VectorStoreTask

__all__ = [
    "LoadingTask",
    "parse_frontmatter",
    "ChunkingTask",
    "RelationshipTask",
    "validate_relationships",
    "EmbeddingTask",
    "VectorStoreTask",
]
