"""
Markdown chunking task.

Splits documents at heading lines and re-splits oversized sections with
RecursiveCharacterTextSplitter, assigning each piece a stable identifier
derived from its file path and position.

Dependencies: langchain_text_splitters
System role: Second stage of the documentation ingestion pipeline
"""

import logging
import re
import uuid
from dataclasses import dataclass

from langchain_text_splitters import RecursiveCharacterTextSplitter

from docsearch.core.exceptions import ChunkIdCollisionError
from docsearch.models.chunk import Chunk, ChunkMetadata
from docsearch.models.document import Document

logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)(?:\s+#+)?\s*$")
_FENCE_PATTERN = re.compile(r"^\s*(```|~~~)")
_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:")
_NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9]+")

SPLIT_SEPARATORS = ["\n\n", "\n", " ", ""]
_RESERVED_METADATA_KEYS = {"title", "framework", "source_url", "file_path", "heading", "level"}


@dataclass
class _Section:
    text: str
    level: int
    heading: str | None


def generate_base_id(file_path: str) -> str:
    """
    Derive the identifier prefix shared by all chunks of a file.

    Args:
        file_path: Relative (or absolute) markdown path

    Returns:
        str: Lower-case slug, e.g. `flow/forms/binding` -> `flow-forms-binding`
    """
    normalized = file_path.replace("\\", "/")
    normalized = _DRIVE_PATTERN.sub("", normalized).lstrip("/")
    if normalized.endswith(".md"):
        normalized = normalized[: -len(".md")]
    return _NON_ALNUM_PATTERN.sub("-", normalized.lower()).strip("-")


def split_sections(body: str) -> list[_Section]:
    """
    Split markdown text at heading lines.

    Lines inside fenced code blocks never start a section. Text before the
    first heading becomes a level-0 section. Whitespace-only sections are
    dropped.

    Args:
        body: Markdown body without frontmatter

    Returns:
        list: Sections in document order
    """
    sections: list[_Section] = []
    lines: list[str] = []
    level, heading = 0, None
    fence: str | None = None

    def flush() -> None:
        text = "\n".join(lines)
        if text.strip():
            sections.append(_Section(text=text.strip(), level=level, heading=heading))

    for line in body.split("\n"):
        fence_match = _FENCE_PATTERN.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif fence == marker:
                fence = None
            lines.append(line)
            continue

        heading_match = HEADING_PATTERN.match(line) if fence is None else None
        if heading_match:
            flush()
            lines = [line]
            level = len(heading_match.group(1))
            heading = heading_match.group(2).strip()
            continue

        lines.append(line)

    flush()
    return sections


class ChunkingTask:
    """Split markdown documents into heading-aware chunks."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        deterministic_ids: bool = True,
    ) -> None:
        """
        Initialize chunking task with splitter configuration.

        Args:
            chunk_size: Maximum chunk size in characters
            chunk_overlap: Overlap between consecutive sub-chunks of a section
            deterministic_ids: Derive IDs from path and position instead of random UUIDs

        Raises:
            ValueError: When sizes are out of range
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be >= 0 and smaller than chunk_size")

        self._chunk_size = chunk_size
        self._deterministic_ids = deterministic_ids
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=SPLIT_SEPARATORS,
            length_function=len,
        )

    def chunk(self, document: Document) -> list[Chunk]:
        """
        Split one document into chunks.

        Args:
            document: Loaded markdown document

        Returns:
            list[Chunk]: Chunks in document order, empty for an empty body
        """
        if not document.content.strip():
            return []

        base_id = generate_base_id(document.file_path)
        chunks: list[Chunk] = []

        for i, section in enumerate(split_sections(document.content)):
            pieces = self._split_section(section.text)
            for j, piece in enumerate(pieces):
                chunk_id = self._make_id(base_id, i, j)
                chunks.append(
                    Chunk(
                        chunk_id=chunk_id,
                        content=piece,
                        level=section.level,
                        heading=section.heading,
                        metadata=self._build_metadata(document, section),
                    )
                )

        return chunks

    def chunk_documents(self, documents: list[Document]) -> list[Chunk]:
        """
        Chunk a batch of documents, checking identifiers are unique across the run.

        Args:
            documents: Loaded markdown documents

        Returns:
            list[Chunk]: All chunks, file by file

        Raises:
            ChunkIdCollisionError: When two chunks share an identifier
        """
        all_chunks: list[Chunk] = []
        seen: dict[str, str] = {}

        for document in documents:
            for chunk in self.chunk(document):
                if chunk.chunk_id in seen:
                    raise ChunkIdCollisionError(
                        chunk.chunk_id, [seen[chunk.chunk_id], document.file_path]
                    )
                seen[chunk.chunk_id] = document.file_path
                all_chunks.append(chunk)

        logger.info(
            f"{__name__}:chunk_documents - Chunked documents",
            extra={"documents": len(documents), "chunks": len(all_chunks)},
        )
        return all_chunks

    def _split_section(self, text: str) -> list[str]:
        if len(text) <= self._chunk_size:
            return [text]
        return [piece.strip() for piece in self._splitter.split_text(text) if piece.strip()]

    def _make_id(self, base_id: str, section_index: int, piece_index: int) -> str:
        # Always two numeric suffixes so "x" section 1 and "x-1" section 0 stay distinct
        if not self._deterministic_ids:
            return uuid.uuid4().hex
        return f"{base_id}-{section_index}-{piece_index}"

    @staticmethod
    def _build_metadata(document: Document, section: _Section) -> ChunkMetadata:
        extra = {
            key: value
            for key, value in document.frontmatter.items()
            if key not in _RESERVED_METADATA_KEYS
        }
        return ChunkMetadata(
            title=document.title or "",
            heading=section.heading or "",
            level=section.level,
            file_path=document.file_path,
            framework=document.framework,
            source_url=document.source_url,
            extra=extra,
        )
