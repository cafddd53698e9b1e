"""
Relationship building task.

Links chunks into a parent/child tree: within a file by heading level, and
across files by the directory hierarchy.

Dependencies: docsearch.core.ingestion.hierarchy
System role: Optional third stage of the ingestion pipeline (hierarchical mode)
"""

import logging
import math
import re

from docsearch.core.ingestion.hierarchy import FileHierarchy
from docsearch.models.chunk import Chunk

logger = logging.getLogger(__name__)

_TITLE_LINE_PATTERN = re.compile(r"^#\s+(.+)$", re.MULTILINE)
TOPIC_MATCH_RATIO = 0.6


def link_intra_file(chunks: list[Chunk]) -> list[Chunk]:
    """
    Assign parents within one file from heading levels.

    A chunk's parent is the nearest preceding chunk with a strictly lower,
    non-zero level. Level-0 chunks have no parent and never become one.

    Args:
        chunks: Chunks of a single file in document order

    Returns:
        list[Chunk]: Copies with parent_id set
    """
    stack: list[Chunk] = []
    linked: list[Chunk] = []

    for chunk in chunks:
        while stack and stack[-1].level >= chunk.level:
            stack.pop()

        parent_id = stack[-1].chunk_id if stack and chunk.level > 0 else None
        updated = chunk.model_copy(update={"parent_id": parent_id})
        linked.append(updated)

        if chunk.level > 0:
            stack.append(updated)

    return linked


def validate_relationships(chunks: list[Chunk]) -> tuple[bool, list[str]]:
    """
    Check that parent links point at chunks that exist and form a tree.

    Args:
        chunks: All chunks of an ingestion run

    Returns:
        tuple: (valid, error messages)
    """
    errors: list[str] = []
    parents = {chunk.chunk_id: chunk.parent_id for chunk in chunks}

    for chunk in chunks:
        if chunk.parent_id and chunk.parent_id not in parents:
            errors.append(f"Chunk {chunk.chunk_id} has invalid parent_id: {chunk.parent_id}")
        if chunk.parent_id == chunk.chunk_id:
            errors.append(f"Chunk {chunk.chunk_id} references itself as parent")

    errors.extend(_find_cycles(parents))
    return not errors, errors


def _find_cycles(parents: dict[str, str | None]) -> list[str]:
    errors: list[str] = []
    settled: set[str] = set()

    for start in parents:
        path: list[str] = []
        on_path: set[str] = set()
        current: str | None = start
        while current and current in parents and current not in settled:
            if current in on_path:
                cycle = path[path.index(current):]
                # Self references are reported on their own
                if len(cycle) > 1:
                    errors.append(f"Parent cycle detected: {' -> '.join(cycle + [current])}")
                break
            path.append(current)
            on_path.add(current)
            current = parents[current]
        settled.update(path)

    return errors


class RelationshipTask:
    """Build intra-file and cross-file parent links."""

    def __init__(self, hierarchy: dict[str, FileHierarchy] | None = None) -> None:
        """
        Initialize relationship task.

        Args:
            hierarchy: Relative path -> FileHierarchy. Without it only
                intra-file links are built.
        """
        self._hierarchy = hierarchy or {}

    def build(self, chunks_by_file: dict[str, list[Chunk]]) -> list[Chunk]:
        """
        Link all chunks of a run.

        Args:
            chunks_by_file: Relative path -> chunks in document order

        Returns:
            list[Chunk]: Chunks with parent_id set, file by file in input order
        """
        linked = {path: link_intra_file(chunks) for path, chunks in chunks_by_file.items()}
        overrides = self._cross_file_parents(linked)

        result: list[Chunk] = []
        for chunks in linked.values():
            for chunk in chunks:
                if chunk.chunk_id in overrides:
                    chunk = chunk.model_copy(update={"parent_id": overrides[chunk.chunk_id]})
                result.append(chunk)

        logger.info(
            f"{__name__}:build - Built chunk relationships",
            extra={
                "files": len(chunks_by_file),
                "chunks": len(result),
                "cross_file_links": len(overrides),
            },
        )
        return result

    def _cross_file_parents(self, linked: dict[str, list[Chunk]]) -> dict[str, str]:
        overrides: dict[str, str] = {}

        for path, chunks in linked.items():
            entry = self._hierarchy.get(path)
            if not entry or not entry.parent_path or not chunks:
                continue

            parent_chunks = linked.get(entry.parent_path)
            if not parent_chunks:
                continue

            parent = self._find_best_parent(parent_chunks, chunks)
            root = next((c for c in chunks if not c.parent_id), chunks[0])
            overrides[root.chunk_id] = parent.chunk_id

        return overrides

    def _find_best_parent(self, parent_chunks: list[Chunk], child_chunks: list[Chunk]) -> Chunk:
        topic = self._extract_topic(child_chunks)
        if topic:
            match = self._find_by_topic(parent_chunks, topic)
            if match is not None:
                return match

        first_heading = next((c for c in parent_chunks if c.level > 0), None)
        return first_heading or parent_chunks[0]

    @staticmethod
    def _extract_topic(chunks: list[Chunk]) -> str | None:
        first = next((c for c in chunks if c.level == 1), chunks[0])
        if first.heading:
            return first.heading.lower()

        match = _TITLE_LINE_PATTERN.search(first.content)
        return match.group(1).lower() if match else None

    @staticmethod
    def _find_by_topic(chunks: list[Chunk], topic: str) -> Chunk | None:
        words = [word for word in topic.split() if len(word) > 2]
        if not words:
            return None

        required = math.ceil(len(words) * TOPIC_MATCH_RATIO)
        for chunk in chunks:
            haystack = f"{chunk.content} {chunk.heading or ''}".lower()
            if sum(1 for word in words if word in haystack) >= required:
                return chunk
        return None
