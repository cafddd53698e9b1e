"""Tests for batched embedding generation with retry."""

from functools import partial

import httpx
import openai
import pytest
from conftest import CharTokenizer, FakeEmbeddings, RecordingSleep, WrongDimensionEmbeddings
from tenacity import AsyncRetrying

from docsearch.core.exceptions import BatchEmbeddingError, DimensionMismatchError
from docsearch.core.ingestion.tasks import embedding_task
from docsearch.core.ingestion.tasks.embedding_task import (
    EmbeddingTask,
    build_embedding_text,
)
from docsearch.models.chunk import Chunk, ChunkMetadata


class FailOnSecondBatchEmbeddings(FakeEmbeddings):
    """Succeeds for the first call, fails every call after it."""

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if self.document_calls:
            self.document_calls.append(list(texts))
            raise RuntimeError("provider down")
        return super().embed_documents(texts)


class FlakyBatchEmbeddings(FakeEmbeddings):
    """Fails the first two attempts of every distinct batch."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.attempts: dict[tuple[str, ...], int] = {}

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        key = tuple(texts)
        self.attempts[key] = self.attempts.get(key, 0) + 1
        if self.attempts[key] <= 2:
            self.document_calls.append(list(texts))
            raise RuntimeError("rate limited")
        return super().embed_documents(texts)


def make_chunks(count: int, framework: str = "common") -> list[Chunk]:
    return [
        Chunk(
            chunk_id=f"c{i}",
            content=f"content {i}",
            level=1,
            heading=f"Heading {i}",
            metadata=ChunkMetadata(title="Doc", framework=framework),
        )
        for i in range(count)
    ]


def make_task(embeddings: FakeEmbeddings, **kwargs) -> EmbeddingTask:
    kwargs.setdefault("retry_delay", 0.0)
    return EmbeddingTask(embeddings=embeddings, tokenizer=CharTokenizer(), **kwargs)


class TestBuildEmbeddingText:
    """Test embedding input composition."""

    def test_includes_context_prefixes(self) -> None:
        """Should prefix title, heading and a non-common framework."""
        chunk = make_chunks(1, framework="flow")[0]
        assert build_embedding_text(chunk) == (
            "Title: Doc\nHeading: Heading 0\nFramework: flow\ncontent 0"
        )

    def test_omits_common_framework_and_missing_fields(self) -> None:
        """Should skip absent title and heading and the common framework."""
        chunk = Chunk(chunk_id="x", content="body")
        assert build_embedding_text(chunk) == "body"

    def test_truncates_to_token_limit(self) -> None:
        """Should cut the input to max_tokens tokens."""
        task = make_task(FakeEmbeddings(), max_tokens=10)
        chunk = Chunk(chunk_id="x", content="abcdefghijklmnopqrstuvwxyz")

        assert task.prepare_text(chunk) == "abcdefghij"


class TestEmbeddingTask:
    """Test batching, validation and retries."""

    @pytest.mark.asyncio
    async def test_embeds_in_sequential_batches(self) -> None:
        """Should call the provider once per batch and keep input order."""
        embeddings = FakeEmbeddings()
        task = make_task(embeddings, batch_size=50)

        result = await task.embed(make_chunks(120))

        assert [len(call) for call in embeddings.document_calls] == [50, 50, 20]
        assert [r.chunk.chunk_id for r in result] == [f"c{i}" for i in range(120)]
        assert all(len(r.embedding) == 1536 for r in result)

    @pytest.mark.asyncio
    async def test_empty_input(self) -> None:
        """Should not call the provider for no chunks."""
        embeddings = FakeEmbeddings()
        assert await make_task(embeddings).embed([]) == []
        assert embeddings.document_calls == []

    @pytest.mark.asyncio
    async def test_retries_transient_failure(self) -> None:
        """Should succeed when a later attempt works."""
        embeddings = FakeEmbeddings(failures=[RuntimeError("rate limited")])
        task = make_task(embeddings)

        result = await task.embed(make_chunks(3))

        assert len(result) == 3
        assert len(embeddings.document_calls) == 2

    @pytest.mark.asyncio
    async def test_backoff_grows_linearly_per_batch(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should wait base * attempt seconds, restarting for each batch."""
        sleep = RecordingSleep()
        monkeypatch.setattr(embedding_task, "AsyncRetrying", partial(AsyncRetrying, sleep=sleep))
        embeddings = FlakyBatchEmbeddings()
        task = make_task(embeddings, batch_size=2, max_retries=3, retry_delay=1.0)

        result = await task.embed(make_chunks(4))

        assert len(result) == 4
        assert sleep.delays == [1.0, 2.0, 1.0, 2.0]
        assert len(embeddings.document_calls) == 6

    @pytest.mark.asyncio
    async def test_wrong_dimension_fails_batch_after_three_attempts(self) -> None:
        """Should retry a dimension mismatch and then name the failing batch."""
        embeddings = WrongDimensionEmbeddings(dimensions=1536, returned=1000)
        task = make_task(embeddings, batch_size=2, max_retries=3)

        with pytest.raises(BatchEmbeddingError) as exc_info:
            await task.embed(make_chunks(2))

        error = exc_info.value
        assert error.batch_number == 1
        assert error.attempts == 3
        assert "batch 1" in str(error)
        assert isinstance(error.__cause__, DimensionMismatchError)
        assert len(embeddings.document_calls) == 3

    @pytest.mark.asyncio
    async def test_failure_in_later_batch_names_that_batch(self) -> None:
        """Should report the batch number of the failing batch."""
        embeddings = FailOnSecondBatchEmbeddings()
        task = make_task(embeddings, batch_size=2, max_retries=2)

        with pytest.raises(BatchEmbeddingError) as exc_info:
            await task.embed(make_chunks(4))

        assert exc_info.value.batch_number == 2
        assert exc_info.value.attempts == 2
        assert len(embeddings.document_calls) == 3

    @pytest.mark.asyncio
    async def test_fatal_provider_error_not_retried(self) -> None:
        """Should give up after one attempt on a rejected request."""
        request = httpx.Request("POST", "https://api.openai.com/v1/embeddings")
        error = openai.BadRequestError(
            "invalid input", response=httpx.Response(400, request=request), body=None
        )
        embeddings = FakeEmbeddings(failures=[error])

        with pytest.raises(BatchEmbeddingError) as exc_info:
            await make_task(embeddings, max_retries=3).embed(make_chunks(1))

        assert exc_info.value.attempts == 1
        assert len(embeddings.document_calls) == 1

    @pytest.mark.asyncio
    async def test_embed_query(self) -> None:
        """Should delegate single strings to aembed_query."""
        embeddings = FakeEmbeddings(dimensions=3072)
        vector = await make_task(embeddings, dimensions=3072).embed_query("grid")

        assert len(vector) == 3072
        assert embeddings.query_calls == ["grid"]

    @pytest.mark.parametrize(
        "kwargs",
        [{"dimensions": 1024}, {"batch_size": 0}, {"batch_size": 101}, {"max_retries": 0}],
    )
    def test_rejects_invalid_configuration(self, kwargs: dict) -> None:
        """Should validate dimensions, batch size and retries."""
        with pytest.raises(ValueError):
            make_task(FakeEmbeddings(), **kwargs)
