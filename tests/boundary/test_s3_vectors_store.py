"""Tests for the S3 Vectors store adapter with a mocked boto3 client."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from docsearch.boundary.vdb.s3_vectors_store import S3VectorsStore
from docsearch.core.exceptions import VectorStoreError
from docsearch.models.chunk import IndexRecord


def client_error(code: str, operation: str = "QueryVectors") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def store(client: MagicMock) -> S3VectorsStore:
    return S3VectorsStore(vectors_bucket="bucket", index_name="docs", client=client)


class TestS3VectorsStore:
    """Test request shapes and error mapping."""

    def test_requires_bucket_and_index(self, client: MagicMock) -> None:
        """Should reject empty names."""
        with pytest.raises(ValueError):
            S3VectorsStore(vectors_bucket="", client=client)
        with pytest.raises(ValueError):
            S3VectorsStore(vectors_bucket="bucket", index_name="", client=client)

    @pytest.mark.asyncio
    async def test_upsert_splits_at_service_limit(self, store: S3VectorsStore, client: MagicMock) -> None:
        """Should send at most 500 vectors per put_vectors call."""
        records = [IndexRecord(id=f"c{i}", vector=[0.1], metadata={"chunk_id": f"c{i}"}) for i in range(501)]

        await store.upsert(records)

        calls = client.put_vectors.call_args_list
        assert [len(c.kwargs["vectors"]) for c in calls] == [500, 1]
        first = calls[0].kwargs
        assert first["vectorBucketName"] == "bucket"
        assert first["indexName"] == "docs"
        assert first["vectors"][0] == {
            "key": "c0",
            "data": {"float32": [0.1]},
            "metadata": {"chunk_id": "c0"},
        }

    @pytest.mark.asyncio
    async def test_query_converts_distance_and_clamps_top_k(
        self, store: S3VectorsStore, client: MagicMock
    ) -> None:
        """Should report 1 - distance and cap topK at 100."""
        client.query_vectors.return_value = {
            "vectors": [
                {"key": "a", "distance": 0.1, "metadata": {"content": "A"}},
                {"key": "b", "distance": 0.4},
            ]
        }
        filter = {"$or": [{"framework": "flow"}, {"framework": "common"}]}

        matches = await store.query([0.1, 0.2], top_k=150, filter=filter)

        assert [m.id for m in matches] == ["a", "b"]
        assert matches[0].score == pytest.approx(0.9)
        assert matches[0].metadata == {"content": "A"}
        assert matches[1].metadata == {}
        kwargs = client.query_vectors.call_args.kwargs
        assert kwargs["topK"] == 100
        assert kwargs["filter"] == filter
        assert kwargs["queryVector"] == {"float32": [0.1, 0.2]}
        assert kwargs["returnDistance"] is True

    @pytest.mark.asyncio
    async def test_query_omits_empty_filter(self, store: S3VectorsStore, client: MagicMock) -> None:
        """Should not send a filter when none is given."""
        client.query_vectors.return_value = {"vectors": []}

        assert await store.query([0.1], top_k=5) == []
        assert "filter" not in client.query_vectors.call_args.kwargs

    @pytest.mark.asyncio
    async def test_query_retries_throttling(
        self, store: S3VectorsStore, client: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Should retry throttled queries."""
        monkeypatch.setattr(S3VectorsStore._query_with_retry.retry, "sleep", lambda seconds: None)
        client.query_vectors.side_effect = [
            client_error("ThrottlingException"),
            {"vectors": [{"key": "a", "distance": 0.0}]},
        ]

        matches = await store.query([0.1], top_k=5)

        assert [m.id for m in matches] == ["a"]
        assert client.query_vectors.call_count == 2

    @pytest.mark.asyncio
    async def test_query_error_not_retried(self, store: S3VectorsStore, client: MagicMock) -> None:
        """Should wrap non-throttling errors immediately."""
        client.query_vectors.side_effect = client_error("ValidationException")

        with pytest.raises(VectorStoreError) as exc_info:
            await store.query([0.1], top_k=5)

        assert exc_info.value.details["operation"] == "query"
        assert client.query_vectors.call_count == 1

    @pytest.mark.asyncio
    async def test_fetch(self, store: S3VectorsStore, client: MagicMock) -> None:
        """Should map keys to metadata."""
        client.get_vectors.return_value = {"vectors": [{"key": "a", "metadata": {"content": "A"}}]}

        assert await store.fetch(["a", "b"]) == {"a": {"content": "A"}}
        assert client.get_vectors.call_args.kwargs["keys"] == ["a", "b"]
        assert await store.fetch([]) == {}
        assert client.get_vectors.call_count == 1

    @pytest.mark.asyncio
    async def test_list_follows_pagination(self, store: S3VectorsStore, client: MagicMock) -> None:
        """Should collect keys from every page."""
        client.list_vectors.side_effect = [
            {"vectors": [{"key": "a"}, {"key": "b"}], "nextToken": "t1"},
            {"vectors": [{"key": "c"}]},
        ]

        assert await store.list_all_ids() == ["a", "b", "c"]
        assert client.list_vectors.call_args_list[1].kwargs["nextToken"] == "t1"

    @pytest.mark.asyncio
    async def test_delete_all(self, store: S3VectorsStore, client: MagicMock) -> None:
        """Should list every key and delete them."""
        client.list_vectors.return_value = {"vectors": [{"key": "a"}, {"key": "b"}]}

        await store.delete_all()

        assert client.delete_vectors.call_args.kwargs["keys"] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_describe_stats(self, store: S3VectorsStore, client: MagicMock) -> None:
        """Should combine index dimension and record count."""
        client.get_index.return_value = {"index": {"dimension": 1536}}
        client.list_vectors.return_value = {"vectors": [{"key": "a"}]}

        stats = await store.describe_stats()

        assert stats.index_name == "docs"
        assert stats.dimension == 1536
        assert stats.total_vector_count == 1

    @pytest.mark.asyncio
    async def test_write_error_wrapped(self, store: S3VectorsStore, client: MagicMock) -> None:
        """Should raise VectorStoreError naming the operation."""
        client.delete_vectors.side_effect = client_error("AccessDeniedException", "DeleteVectors")

        with pytest.raises(VectorStoreError) as exc_info:
            await store.delete_many(["a"])

        assert exc_info.value.details["operation"] == "delete"
