"""
Index upsert task.

Writes embedded chunks to the vector store and keeps the index in sync with
the current documentation set: clear-and-rebuild, plain upsert, or smart
update that also deletes records whose chunks no longer exist.

Dependencies: tenacity, docsearch.boundary.vdb
System role: Final stage of the documentation ingestion pipeline
"""

import logging
from collections.abc import Awaitable, Callable

from tenacity import AsyncRetrying, stop_after_attempt, wait_incrementing

from docsearch.boundary.vdb.vector_schemas import VectorStore
from docsearch.core.exceptions import ListingNotSupportedError, VectorStoreUploadError
from docsearch.models.chunk import EmbeddedChunk, IndexRecord, IndexStats, MetadataValue
from docsearch.models.ingestion import UpdateResult

logger = logging.getLogger(__name__)


def _is_metadata_value(value: object) -> bool:
    if isinstance(value, (str, int, float, bool)):
        return True
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def build_record(embedded: EmbeddedChunk) -> IndexRecord:
    """
    Convert an embedded chunk into a vector store record.

    Frontmatter extras that the store cannot hold (nested objects, mixed
    lists) are dropped.

    Args:
        embedded: Chunk with its vector

    Returns:
        IndexRecord: Record keyed by chunk ID
    """
    chunk = embedded.chunk
    meta = chunk.metadata

    metadata: dict[str, MetadataValue] = {
        key: value for key, value in meta.extra.items() if _is_metadata_value(value)
    }
    metadata.update(
        {
            "chunk_id": chunk.chunk_id,
            "parent_id": chunk.parent_id or "",
            "framework": meta.framework,
            "source_url": meta.source_url,
            "content": chunk.content,
            "title": meta.title,
            "heading": chunk.heading or "",
            "level": chunk.level,
            "file_path": meta.file_path,
        }
    )
    return IndexRecord(id=chunk.chunk_id, vector=embedded.embedding, metadata=metadata)


class VectorStoreTask:
    """Synchronize embedded chunks into a vector store."""

    def __init__(
        self,
        store: VectorStore,
        batch_size: int = 100,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        """
        Initialize index upsert task.

        Args:
            store: Vector store adapter
            batch_size: Records per upsert/delete call (1..500)
            max_retries: Total attempts per batch
            retry_delay: Base delay in seconds; attempt n waits base * n

        Raises:
            ValueError: When configuration is out of range
        """
        if not 1 <= batch_size <= 500:
            raise ValueError("batch_size must be between 1 and 500")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self._store = store
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    async def upsert_chunks(self, embedded: list[EmbeddedChunk]) -> int:
        """
        Upsert chunks in sequential batches.

        Args:
            embedded: Chunks with vectors

        Returns:
            int: Number of records written

        Raises:
            VectorStoreUploadError: When a batch fails after all attempts
        """
        records = [build_record(item) for item in embedded]
        total_batches = (len(records) + self.batch_size - 1) // self.batch_size

        for start in range(0, len(records), self.batch_size):
            batch = records[start : start + self.batch_size]
            batch_number = start // self.batch_size + 1
            await self._with_retry("upsert", batch_number, lambda b=batch: self._store.upsert(b))
            logger.info(
                f"{__name__}:upsert_chunks - Upserted batch {batch_number}/{total_batches}",
                extra={"records": len(batch)},
            )

        return len(records)

    async def delete_chunks(self, ids: list[str]) -> int:
        """
        Delete records by chunk ID in sequential batches.

        Args:
            ids: Chunk IDs to delete

        Returns:
            int: Number of IDs submitted for deletion
        """
        for start in range(0, len(ids), self.batch_size):
            batch = ids[start : start + self.batch_size]
            batch_number = start // self.batch_size + 1
            await self._with_retry("delete", batch_number, lambda b=batch: self._store.delete_many(b))

        if ids:
            logger.info(f"{__name__}:delete_chunks - Deleted {len(ids)} records")
        return len(ids)

    async def clear_index(self) -> None:
        """Delete every record in the index."""
        logger.info(f"{__name__}:clear_index - Clearing index")
        await self._store.delete_all()

    async def rebuild(self, embedded: list[EmbeddedChunk]) -> UpdateResult:
        """
        Clear the index and write all chunks.

        Args:
            embedded: Complete set of chunks with vectors

        Returns:
            UpdateResult: upserted count; deleted is not tracked for a full clear
        """
        await self.clear_index()
        upserted = await self.upsert_chunks(embedded)
        return UpdateResult(upserted=upserted)

    async def smart_update(self, embedded: list[EmbeddedChunk]) -> UpdateResult:
        """
        Upsert the current chunk set and delete records no longer produced.

        Args:
            embedded: Complete set of chunks with vectors

        Returns:
            UpdateResult: Counts of upserted, deleted and unchanged records.
                When the store cannot list IDs, nothing is deleted and
                `orphan_detection` is False.
        """
        new_ids = {item.chunk.chunk_id for item in embedded}

        try:
            existing_ids = await self._store.list_all_ids()
        except ListingNotSupportedError:
            logger.warning(
                f"{__name__}:smart_update - Store cannot list IDs, orphans will not be deleted"
            )
            upserted = await self.upsert_chunks(embedded)
            return UpdateResult(upserted=upserted, orphan_detection=False)

        orphans = [chunk_id for chunk_id in existing_ids if chunk_id not in new_ids]
        logger.info(
            f"{__name__}:smart_update - Compared index contents",
            extra={"existing": len(existing_ids), "incoming": len(new_ids), "orphans": len(orphans)},
        )

        if orphans:
            await self.delete_chunks(orphans)
        upserted = await self.upsert_chunks(embedded)

        result = UpdateResult(
            upserted=upserted,
            deleted=len(orphans),
            unchanged=len(existing_ids) - len(orphans),
        )
        logger.info(
            f"{__name__}:smart_update - Smart update complete",
            extra=result.model_dump(),
        )
        return result

    async def get_index_stats(self) -> IndexStats:
        """Return statistics reported by the store."""
        return await self._store.describe_stats()

    async def _with_retry(
        self,
        operation: str,
        batch_number: int,
        call: Callable[[], Awaitable[None]],
    ) -> None:
        attempts = 0
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                wait=wait_incrementing(start=self.retry_delay, increment=self.retry_delay),
                before_sleep=lambda state: logger.warning(
                    f"{__name__}:{operation} - Batch {batch_number} attempt "
                    f"{state.attempt_number} failed: {state.outcome.exception()}"
                ),
                reraise=True,
            ):
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    await call()
        except Exception as e:
            raise VectorStoreUploadError(
                f"Failed to {operation} batch {batch_number} after {attempts} attempts: {e}",
                operation=operation,
                details={"batch_number": batch_number, "attempts": attempts},
            ) from e
