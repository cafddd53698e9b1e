"""
Ingestion pipeline orchestrator.

Coordinates loading, chunking, relationship building, embedding and index
synchronization for a documentation tree.

Dependencies: All task modules, configs, boundary adapters
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
from pathlib import Path

from langchain_core.embeddings import Embeddings

from docsearch.boundary.embeddings.embeddings_wrapper import (
    Tokenizer,
    create_embeddings,
    get_tokenizer,
)
from docsearch.boundary.vdb.vector_schemas import VectorStore
from docsearch.boundary.vdb.vector_store_factory import get_vector_store
from docsearch.configs import Settings, get_settings
from docsearch.configs.ingestion import UpdateStrategy
from docsearch.core.ingestion.hierarchy import parse_file_hierarchy
from docsearch.core.ingestion.tasks import (
    ChunkingTask,
    EmbeddingTask,
    LoadingTask,
    RelationshipTask,
    VectorStoreTask,
    validate_relationships,
)
from docsearch.models.chunk import Chunk, EmbeddedChunk
from docsearch.models.ingestion import IngestionReport, UpdateResult

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Orchestrate ingestion: load -> chunk -> link -> embed -> sync index."""

    def __init__(
        self,
        settings: Settings | None = None,
        embeddings: Embeddings | None = None,
        store: VectorStore | None = None,
        tokenizer: Tokenizer | None = None,
    ) -> None:
        """
        Initialize pipeline with configuration and provider clients.

        Args:
            settings: Application settings (uses get_settings() if None)
            embeddings: Embedding provider (OpenAI client from settings if None)
            store: Vector store (S3 Vectors from settings if None)
            tokenizer: Tokenizer for input truncation (tiktoken if None)
        """
        self._settings = settings or get_settings()
        ingestion = self._settings.ingestion
        embedding = self._settings.embedding

        self._loading_task = LoadingTask()
        self._chunking_task = ChunkingTask(
            chunk_size=ingestion.chunk_size,
            chunk_overlap=ingestion.chunk_overlap,
            deterministic_ids=ingestion.deterministic_ids,
        )
        self._embedding_task = EmbeddingTask(
            embeddings=embeddings or create_embeddings(embedding),
            tokenizer=tokenizer or get_tokenizer(embedding.tokenizer_encoding),
            dimensions=embedding.dimensions,
            batch_size=ingestion.embedding_batch_size,
            max_tokens=ingestion.embedding_max_tokens,
            max_retries=ingestion.max_retries,
            retry_delay=ingestion.retry_delay,
        )
        self._vector_store_task = VectorStoreTask(
            store=store or get_vector_store(self._settings.vector_store),
            batch_size=ingestion.upsert_batch_size,
            max_retries=ingestion.max_retries,
            retry_delay=ingestion.retry_delay,
        )

    async def run(
        self,
        docs_dir: str | Path | None = None,
        strategy: UpdateStrategy | None = None,
        hierarchical: bool | None = None,
    ) -> IngestionReport:
        """
        Ingest a documentation tree into the index.

        Args:
            docs_dir: Documentation root (settings value if None)
            strategy: smart, rebuild or upsert (settings value if None)
            hierarchical: Build parent/child links (settings value if None)

        Returns:
            IngestionReport: Counts, skipped files and timing

        Raises:
            ChunkIdCollisionError: Two chunks share an identifier
            BatchEmbeddingError: An embedding batch failed after retries
            VectorStoreUploadError: An index batch failed after retries
        """
        ingestion = self._settings.ingestion
        root = Path(docs_dir or ingestion.docs_dir)
        strategy = strategy or ingestion.strategy
        hierarchical = ingestion.hierarchical if hierarchical is None else hierarchical

        if strategy == "smart" and not ingestion.deterministic_ids:
            logger.warning(
                f"{__name__}:run - Smart update with random chunk IDs replaces every record"
            )

        start_time = time.perf_counter()
        logger.info(
            f"{__name__}:run - Starting ingestion",
            extra={"docs_dir": str(root), "strategy": strategy, "hierarchical": hierarchical},
        )

        loaded = self._loading_task.load_directory(root)
        chunks = self._chunking_task.chunk_documents(loaded.documents)
        if hierarchical:
            chunks = self._link(chunks, root)

        embedded = await self._embedding_task.embed(chunks)
        update = await self._sync_index(embedded, strategy)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        report = IngestionReport(
            strategy=strategy,
            documents_loaded=len(loaded.documents),
            files_skipped=loaded.skipped,
            chunk_count=len(chunks),
            update=update,
            processing_time_ms=elapsed_ms,
        )
        logger.info(
            f"{__name__}:run - Ingestion complete",
            extra={
                "documents": report.documents_loaded,
                "skipped": len(report.files_skipped),
                "chunks": report.chunk_count,
                "elapsed_ms": round(elapsed_ms, 1),
            },
        )
        return report

    def _link(self, chunks: list[Chunk], root: Path) -> list[Chunk]:
        by_file: dict[str, list[Chunk]] = {}
        for chunk in chunks:
            by_file.setdefault(chunk.file_path, []).append(chunk)

        linked = RelationshipTask(parse_file_hierarchy(root)).build(by_file)

        valid, errors = validate_relationships(linked)
        if not valid:
            logger.warning(
                f"{__name__}:_link - Invalid chunk relationships",
                extra={"error_count": len(errors), "first_error": errors[0]},
            )
        return linked

    async def _sync_index(
        self, embedded: list[EmbeddedChunk], strategy: UpdateStrategy
    ) -> UpdateResult:
        if strategy == "rebuild":
            return await self._vector_store_task.rebuild(embedded)
        if strategy == "upsert":
            upserted = await self._vector_store_task.upsert_chunks(embedded)
            return UpdateResult(upserted=upserted)
        return await self._vector_store_task.smart_update(embedded)
