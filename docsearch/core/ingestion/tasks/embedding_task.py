"""
Embedding generation task.

Embeds chunks in fixed-size batches through a langchain Embeddings provider,
validating vector dimensions and retrying failed batches with a linearly
increasing delay.

Dependencies: langchain_core, tenacity, openai
System role: Fourth stage of the documentation ingestion pipeline
"""

import logging

import openai
from langchain_core.embeddings import Embeddings
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_incrementing,
)

from docsearch.boundary.embeddings.embeddings_wrapper import (
    Tokenizer,
    truncate_to_token_limit,
)
from docsearch.configs.embeddings import SUPPORTED_DIMENSIONS
from docsearch.core.exceptions import BatchEmbeddingError, DimensionMismatchError
from docsearch.models.chunk import Chunk, EmbeddedChunk

logger = logging.getLogger(__name__)

# Requests the provider rejects outright; retrying cannot help.
FATAL_PROVIDER_ERRORS: tuple[type[Exception], ...] = (
    openai.BadRequestError,
    openai.AuthenticationError,
    openai.PermissionDeniedError,
)


def is_retryable(error: BaseException) -> bool:
    return isinstance(error, Exception) and not isinstance(error, FATAL_PROVIDER_ERRORS)


def build_embedding_text(chunk: Chunk) -> str:
    """
    Compose the text sent to the embedding model for a chunk.

    Title, heading and a non-common framework are prefixed so the vector
    carries the chunk's context.

    Args:
        chunk: Chunk to embed

    Returns:
        str: Embedding input before truncation
    """
    text = ""
    if chunk.metadata.title:
        text += f"Title: {chunk.metadata.title}\n"
    if chunk.heading:
        text += f"Heading: {chunk.heading}\n"
    if chunk.framework and chunk.framework != "common":
        text += f"Framework: {chunk.framework}\n"
    return text + chunk.content


class EmbeddingTask:
    """Generate embeddings for chunks in sequential batches."""

    def __init__(
        self,
        embeddings: Embeddings,
        tokenizer: Tokenizer,
        dimensions: int = 1536,
        batch_size: int = 50,
        max_tokens: int = 8000,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        """
        Initialize embedding task.

        Args:
            embeddings: langchain Embeddings provider
            tokenizer: Tokenizer used to truncate inputs
            dimensions: Expected vector length (1536 or 3072)
            batch_size: Chunks per provider call (1..100)
            max_tokens: Token budget per input
            max_retries: Total attempts per batch
            retry_delay: Base delay in seconds; attempt n waits base * n

        Raises:
            ValueError: When configuration is out of range
        """
        if dimensions not in SUPPORTED_DIMENSIONS:
            raise ValueError(f"dimensions must be one of {SUPPORTED_DIMENSIONS}")
        if not 1 <= batch_size <= 100:
            raise ValueError("batch_size must be between 1 and 100")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if max_tokens <= 0:
            raise ValueError("max_tokens must be positive")

        self._embeddings = embeddings
        self._tokenizer = tokenizer
        self.dimensions = dimensions
        self.batch_size = batch_size
        self.max_tokens = max_tokens
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    def prepare_text(self, chunk: Chunk) -> str:
        """Build and truncate the embedding input for a chunk."""
        return truncate_to_token_limit(
            build_embedding_text(chunk), self.max_tokens, self._tokenizer
        )

    async def embed(self, chunks: list[Chunk]) -> list[EmbeddedChunk]:
        """
        Embed all chunks, one batch at a time.

        Args:
            chunks: Chunks to embed

        Returns:
            list[EmbeddedChunk]: Same order as the input

        Raises:
            BatchEmbeddingError: When a batch fails after all attempts
        """
        if not chunks:
            return []

        total_batches = (len(chunks) + self.batch_size - 1) // self.batch_size
        results: list[EmbeddedChunk] = []

        for start in range(0, len(chunks), self.batch_size):
            batch = chunks[start : start + self.batch_size]
            batch_number = start // self.batch_size + 1
            logger.info(
                f"{__name__}:embed - Processing batch {batch_number}/{total_batches}",
                extra={"batch_size": len(batch)},
            )
            results.extend(await self._process_batch(batch, batch_number))

        logger.info(
            f"{__name__}:embed - Generated embeddings",
            extra={"chunks": len(results), "batches": total_batches},
        )
        return results

    async def embed_query(self, text: str) -> list[float]:
        """
        Embed a single query string.

        Args:
            text: Query text

        Returns:
            list[float]: Query vector
        """
        return await self._embeddings.aembed_query(text)

    async def _process_batch(self, batch: list[Chunk], batch_number: int) -> list[EmbeddedChunk]:
        texts = [self.prepare_text(chunk) for chunk in batch]
        attempts = 0

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                wait=wait_incrementing(start=self.retry_delay, increment=self.retry_delay),
                retry=retry_if_exception(is_retryable),
                before_sleep=lambda state: logger.warning(
                    f"{__name__}:_process_batch - Batch {batch_number} attempt "
                    f"{state.attempt_number} failed: {state.outcome.exception()}"
                ),
                reraise=True,
            ):
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    vectors = await self._embeddings.aembed_documents(texts)
                    self._validate_vectors(vectors, len(texts))
        except Exception as e:
            logger.error(
                f"{__name__}:_process_batch - Batch {batch_number} failed",
                extra={"attempts": attempts, "error_type": type(e).__name__},
            )
            raise BatchEmbeddingError(batch_number, attempts, e) from e

        return [
            EmbeddedChunk(chunk=chunk, embedding=vector)
            for chunk, vector in zip(batch, vectors)
        ]

    def _validate_vectors(self, vectors: list[list[float]], expected_count: int) -> None:
        if len(vectors) != expected_count:
            raise ValueError(
                f"Provider returned {len(vectors)} embeddings for {expected_count} inputs"
            )

        wrong = [v for v in vectors if len(v) != self.dimensions]
        if wrong:
            raise DimensionMismatchError(
                expected=self.dimensions,
                actual=len(wrong[0]),
                affected=len(wrong),
                total=len(vectors),
            )
