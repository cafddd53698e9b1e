"""
Exception hierarchy for the documentation search service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DocSearchException(Exception):
    """Base exception for all documentation search errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(DocSearchException):
    """Raised when caller input is malformed. Never retried."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class DocumentProcessingError(DocSearchException):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            file_path: Relative path of the document that failed
            details: Additional context
        """
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, details)


class ParsingError(DocumentProcessingError):
    """Raised when a document cannot be read or its frontmatter parsed."""

    pass


class ChunkIdCollisionError(DocumentProcessingError):
    """Raised when two chunks in one ingestion run share an identifier."""

    def __init__(self, chunk_id: str, file_paths: list[str]) -> None:
        """
        Initialize collision error.

        Args:
            chunk_id: The duplicated chunk identifier
            file_paths: Files that produced the duplicate
        """
        super().__init__(
            f"Chunk ID collision: '{chunk_id}' produced by {', '.join(file_paths)}",
            details={"chunk_id": chunk_id, "file_paths": file_paths},
        )
        self.chunk_id = chunk_id


class EmbeddingError(DocSearchException):
    """Raised when embedding generation fails."""

    pass


class DimensionMismatchError(EmbeddingError):
    """Raised when the provider returns vectors of the wrong length."""

    def __init__(self, expected: int, actual: int, affected: int, total: int) -> None:
        """
        Initialize dimension mismatch error.

        Args:
            expected: Configured dimension
            actual: Length of the first offending vector
            affected: Number of wrong-sized vectors in the response
            total: Number of vectors in the response
        """
        super().__init__(
            f"Embedding dimension mismatch: got {actual}, expected {expected} "
            f"({affected} of {total} embeddings affected)",
            details={"expected": expected, "actual": actual, "affected": affected},
        )


class BatchEmbeddingError(EmbeddingError):
    """Raised when an embedding batch fails after all retries."""

    def __init__(self, batch_number: int, attempts: int, cause: Exception) -> None:
        """
        Initialize batch failure.

        Args:
            batch_number: 1-based batch number
            attempts: Attempts made before giving up
            cause: Last underlying error
        """
        super().__init__(
            f"Failed to generate embeddings for batch {batch_number} "
            f"after {attempts} attempts: {cause}",
            details={
                "batch_number": batch_number,
                "attempts": attempts,
                "error_type": type(cause).__name__,
            },
        )
        self.batch_number = batch_number
        self.attempts = attempts


class VectorStoreError(DocSearchException):
    """Raised when vector store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (upsert, query, delete, list)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class VectorStoreUploadError(VectorStoreError):
    """Raised when an upsert or delete batch fails after all retries."""

    pass


class ListingNotSupportedError(VectorStoreError):
    """Raised by stores that cannot enumerate the IDs they hold."""

    def __init__(self, message: str = "Vector store cannot list record IDs") -> None:
        super().__init__(message, operation="list")


class RerankError(DocSearchException):
    """Raised when the reranking provider fails."""

    pass


class RetrievalError(DocSearchException):
    """Raised when retrieval operations fail."""

    pass


class SearchError(RetrievalError):
    """Raised when both hybrid and semantic-only search fail."""

    def __init__(self, query: str, cause: Exception) -> None:
        """
        Initialize search error.

        Args:
            query: Original query text
            cause: Error from the semantic-only fallback
        """
        super().__init__(
            f"Search failed: {cause}",
            details={"query_preview": query[:50], "error_type": type(cause).__name__},
        )
