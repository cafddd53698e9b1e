"""
Document service for full markdown retrieval.

Serves complete documents from the markdown tree that was ingested, so a
caller holding a search result's file_path can read the whole page.

Dependencies: docsearch.core.ingestion.tasks.loading_task
System role: Full-document retrieval orchestration
"""

import asyncio
import logging
from pathlib import Path, PurePosixPath
from urllib.parse import unquote

from docsearch.core.exceptions import ParsingError, ValidationError
from docsearch.core.ingestion.tasks.loading_task import parse_frontmatter
from docsearch.models.retrieval import DocumentResult

logger = logging.getLogger(__name__)


def _stringify(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class DocumentService:
    """Read markdown documents below a base directory."""

    def __init__(self, base_path: str | Path) -> None:
        """
        Initialize document service.

        Args:
            base_path: Root of the markdown documentation tree
        """
        self._base_path = Path(base_path).resolve()
        logger.info(
            f"{__name__}:__init__ - Document service using markdown path",
            extra={"base_path": str(self._base_path)},
        )

    def resolve_path(self, file_path: str) -> Path:
        """
        Map a caller-supplied relative path to a file under the base directory.

        Args:
            file_path: Relative path, possibly URL-encoded

        Returns:
            Path: Absolute path inside the base directory

        Raises:
            ValidationError: Path is absolute, contains `..` or escapes the base directory
        """
        decoded = unquote(file_path).replace("\\", "/")
        pure = PurePosixPath(decoded)

        if not decoded or pure.is_absolute() or Path(decoded).is_absolute() or ".." in pure.parts:
            raise ValidationError(
                "Invalid file path: path traversal not allowed", field="file_path"
            )

        resolved = (self._base_path / decoded).resolve()
        if not resolved.is_relative_to(self._base_path):
            raise ValidationError(
                "Access denied: path outside markdown directory", field="file_path"
            )
        return resolved

    async def get_document(self, file_path: str) -> DocumentResult | None:
        """
        Load a markdown document with its frontmatter.

        Args:
            file_path: Path relative to the base directory

        Returns:
            DocumentResult | None: None when the file does not exist

        Raises:
            ValidationError: When the path is rejected
            ParsingError: When the file is not valid UTF-8
        """
        resolved = self.resolve_path(file_path)
        if not resolved.is_file():
            logger.info(
                f"{__name__}:get_document - Document not found",
                extra={"file_path": file_path},
            )
            return None

        try:
            text = await asyncio.to_thread(resolved.read_text, encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ParsingError(
                f"Document is not valid UTF-8: {e.reason}",
                file_path=file_path,
                details={"position": e.start},
            ) from e

        frontmatter, body = parse_frontmatter(text)

        return DocumentResult(
            file_path=resolved.relative_to(self._base_path).as_posix(),
            content=body,
            metadata={key: _stringify(value) for key, value in frontmatter.items()},
        )

    def document_exists(self, file_path: str) -> bool:
        """Return True when the path is valid and names an existing file."""
        try:
            return self.resolve_path(file_path).is_file()
        except (ValidationError, OSError, ValueError):
            return False
