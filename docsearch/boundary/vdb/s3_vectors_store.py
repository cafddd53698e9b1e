"""
S3 Vectors store for the documentation index.

Wraps the boto3 `s3vectors` client behind the VectorStore protocol. Blocking
boto3 calls run in worker threads; queries are retried with exponential
backoff on throttling.

Metadata keys written per record: chunk_id, parent_id, framework, source_url,
title, heading, level, file_path, content plus frontmatter extras. `content`
should be declared non-filterable on the index to stay within the filterable
metadata size limit.

Dependencies: boto3, botocore, tenacity
System role: Production vector store (S3 Vectors)
"""

import asyncio
import logging
from typing import Any

import boto3
from botocore.exceptions import ClientError
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from docsearch.boundary.vdb.vector_schemas import VectorMatch
from docsearch.core.exceptions import VectorStoreError
from docsearch.models.chunk import IndexRecord, IndexStats

logger = logging.getLogger(__name__)

# Service limits per request
MAX_WRITE_BATCH = 500
MAX_TOP_K = 100
LIST_PAGE_SIZE = 1000

THROTTLING_CODES = {
    "ThrottlingException",
    "TooManyRequestsException",
    "ServiceUnavailableException",
    "InternalServerException",
}


def _is_throttling(error: BaseException) -> bool:
    if not isinstance(error, ClientError):
        return False
    return error.response.get("Error", {}).get("Code") in THROTTLING_CODES


class S3VectorsStore:
    """
    Vector store backed by Amazon S3 Vectors.

    Scores returned by `query` are `1 - distance`, so higher is closer for
    cosine indexes.
    """

    def __init__(
        self,
        vectors_bucket: str,
        index_name: str = "docs",
        region: str = "us-east-1",
        client: Any | None = None,
    ) -> None:
        """
        Initialize S3 Vectors store.

        Args:
            vectors_bucket: S3 Vectors bucket name
            index_name: Index name within the bucket
            region: AWS region for S3 Vectors
            client: Preconfigured boto3 `s3vectors` client (created when None)

        Raises:
            ValueError: When vectors_bucket or index_name is empty
        """
        if not vectors_bucket:
            raise ValueError("vectors_bucket cannot be empty")
        if not index_name:
            raise ValueError("index_name cannot be empty")

        self._vectors_bucket = vectors_bucket
        self._index_name = index_name
        self._client = client or boto3.client("s3vectors", region_name=region)

        logger.info(
            f"{__name__}:__init__ - S3 Vectors store ready",
            extra={"bucket": vectors_bucket, "index": index_name, "region": region},
        )

    @property
    def _target(self) -> dict[str, str]:
        return {"vectorBucketName": self._vectors_bucket, "indexName": self._index_name}

    async def upsert(self, records: list[IndexRecord]) -> None:
        """
        Write records, overwriting existing keys.

        Args:
            records: Records to write

        Raises:
            VectorStoreError: When S3 Vectors rejects a request
        """
        for start in range(0, len(records), MAX_WRITE_BATCH):
            batch = records[start : start + MAX_WRITE_BATCH]
            vectors = [
                {"key": r.id, "data": {"float32": r.vector}, "metadata": r.metadata}
                for r in batch
            ]
            await self._call("upsert", self._client.put_vectors, vectors=vectors)

    async def delete_many(self, ids: list[str]) -> None:
        """Delete records by key."""
        for start in range(0, len(ids), MAX_WRITE_BATCH):
            keys = ids[start : start + MAX_WRITE_BATCH]
            await self._call("delete", self._client.delete_vectors, keys=keys)

    async def delete_all(self) -> None:
        """Delete every record in the index (S3 Vectors has no bulk clear)."""
        ids = await self.list_all_ids()
        await self.delete_many(ids)
        logger.info(
            f"{__name__}:delete_all - Cleared index",
            extra={"index": self._index_name, "deleted": len(ids)},
        )

    async def query(
        self,
        vector: list[float],
        top_k: int,
        filter: dict[str, Any] | None = None,
        include_metadata: bool = True,
    ) -> list[VectorMatch]:
        """
        Nearest-neighbour search.

        Args:
            vector: Query vector
            top_k: Number of results (capped at the service limit)
            filter: S3 Vectors metadata filter
            include_metadata: Return record metadata

        Returns:
            list[VectorMatch]: Closest records first

        Raises:
            VectorStoreError: After retries are exhausted
        """
        params: dict[str, Any] = {
            **self._target,
            "topK": max(1, min(top_k, MAX_TOP_K)),
            "queryVector": {"float32": vector},
            "returnMetadata": include_metadata,
            "returnDistance": True,
        }
        if filter:
            params["filter"] = filter

        try:
            response = await asyncio.to_thread(self._query_with_retry, params)
        except ClientError as e:
            logger.error(f"{__name__}:query - ClientError after retries: {e}")
            raise VectorStoreError(f"Vector query failed: {e}", operation="query") from e

        matches = [
            VectorMatch(
                id=item["key"],
                score=1.0 - float(item.get("distance", 1.0)),
                metadata=item.get("metadata") or {},
            )
            for item in response.get("vectors", [])
        ]
        logger.debug(
            f"{__name__}:query - Found {len(matches)} matches",
            extra={"top_k": top_k},
        )
        return matches

    @retry(
        retry=retry_if_exception(_is_throttling),
        stop=stop_after_attempt(5),
        wait=wait_exponential_jitter(initial=1, max=30, jitter=5),
        before_sleep=lambda retry_state: logger.warning(
            f"{__name__}:query - Retry {retry_state.attempt_number}/5 after throttling"
        ),
        reraise=True,
    )
    def _query_with_retry(self, params: dict[str, Any]) -> dict[str, Any]:
        """Execute query_vectors with retry on throttling."""
        return self._client.query_vectors(**params)

    async def fetch(self, ids: list[str]) -> dict[str, dict[str, Any]]:
        """
        Fetch metadata for records by key.

        Args:
            ids: Record keys

        Returns:
            dict: key -> metadata for the keys that exist
        """
        if not ids:
            return {}

        response = await self._call(
            "fetch",
            self._client.get_vectors,
            keys=ids,
            returnData=False,
            returnMetadata=True,
        )
        return {
            item["key"]: item.get("metadata") or {}
            for item in response.get("vectors", [])
        }

    async def list_all_ids(self) -> list[str]:
        """Enumerate every key in the index, following pagination."""
        return await asyncio.to_thread(self._list_all_ids_sync)

    def _list_all_ids_sync(self) -> list[str]:
        ids: list[str] = []
        params: dict[str, Any] = {**self._target, "maxResults": LIST_PAGE_SIZE}

        try:
            while True:
                response = self._client.list_vectors(**params)
                ids.extend(item["key"] for item in response.get("vectors", []))
                token = response.get("nextToken")
                if not token:
                    break
                params["nextToken"] = token
        except ClientError as e:
            raise VectorStoreError(f"Failed to list vectors: {e}", operation="list") from e

        return ids

    async def describe_stats(self) -> IndexStats:
        """Return index dimension and record count."""
        response = await self._call("describe", self._client.get_index)
        index = response.get("index", {})
        count = len(await self.list_all_ids())
        return IndexStats(
            index_name=self._index_name,
            dimension=index.get("dimension"),
            total_vector_count=count,
        )

    async def _call(self, operation: str, method: Any, **kwargs: Any) -> dict[str, Any]:
        try:
            return await asyncio.to_thread(method, **self._target, **kwargs)
        except ClientError as e:
            logger.error(
                f"{__name__}:{operation} - S3 Vectors request failed",
                extra={"error": str(e)},
            )
            raise VectorStoreError(f"S3 Vectors {operation} failed: {e}", operation=operation) from e
