"""
Markdown loading task.

Reads markdown files with a flat frontmatter header from the documentation
tree and turns them into Document models.

Dependencies: pathlib, re
System role: First stage of the documentation ingestion pipeline
"""

import logging
import re
from pathlib import Path

from docsearch.core.exceptions import ParsingError
from docsearch.models.document import Document, FrontmatterValue
from docsearch.models.ingestion import LoadOutcome, LoadResult

logger = logging.getLogger(__name__)

_FRONTMATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*\n(.*)$", re.DOTALL)
_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def parse_frontmatter(text: str) -> tuple[dict[str, FrontmatterValue], str]:
    """
    Split a markdown file into its frontmatter fields and body.

    Only flat `key: value` lines are understood. Quotes around a value are
    removed before the value is typed, so `"true"` becomes a bool.

    Args:
        text: Raw file content

    Returns:
        tuple: (frontmatter dict, body). Without a frontmatter block the dict
            is empty and the body is the full text.
    """
    match = _FRONTMATTER_PATTERN.match(text)
    if not match:
        return {}, text

    header, body = match.groups()
    frontmatter: dict[str, FrontmatterValue] = {}

    for line in header.split("\n"):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        key, sep, value = stripped.partition(":")
        if not sep:
            continue

        key = key.strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]

        frontmatter[key] = _coerce_value(value)

    return frontmatter, body.strip()


def _coerce_value(value: str) -> FrontmatterValue:
    if value == "true":
        return True
    if value == "false":
        return False
    if _NUMBER_PATTERN.match(value):
        try:
            return int(value)
        except ValueError:
            return float(value)
    return value


class LoadingTask:
    """Load markdown documents from a directory tree."""

    def __init__(
        self,
        recursive: bool = True,
        include_pattern: str | None = None,
        encoding: str = "utf-8",
    ) -> None:
        """
        Initialize loading task.

        Args:
            recursive: Descend into subdirectories
            include_pattern: Optional regex a file name must match (searched, not anchored)
            encoding: File encoding
        """
        self._recursive = recursive
        self._include = re.compile(include_pattern) if include_pattern else None
        self._encoding = encoding

    def load_file(self, path: Path, root: Path) -> Document:
        """
        Load a single markdown file.

        Args:
            path: Absolute or root-relative file path
            root: Documentation root the stored path is made relative to

        Returns:
            Document: Loaded document

        Raises:
            ParsingError: When the file cannot be read or decoded
        """
        relative = path.relative_to(root).as_posix() if path.is_absolute() else path.as_posix()
        full_path = path if path.is_absolute() else root / path

        try:
            text = full_path.read_text(encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ParsingError(f"Failed to read {relative}: {e}", file_path=relative) from e

        frontmatter, body = parse_frontmatter(text)
        return Document(file_path=relative, content=body, frontmatter=frontmatter)

    def load_directory(self, root: str | Path) -> LoadResult:
        """
        Load every markdown file under a directory.

        A file that fails to load is recorded as skipped and loading continues.

        Args:
            root: Documentation root directory

        Returns:
            LoadResult: Documents plus one outcome per visited file
        """
        root_path = Path(root).resolve()
        result = LoadResult()

        if not root_path.is_dir():
            logger.warning(
                f"{__name__}:load_directory - Directory not found",
                extra={"docs_dir": str(root_path)},
            )
            return result

        for path in self._find_markdown_files(root_path):
            relative = path.relative_to(root_path).as_posix()
            try:
                document = self.load_file(path, root_path)
            except ParsingError as e:
                logger.warning(
                    f"{__name__}:load_directory - Skipping file",
                    extra={"file_path": relative, "error": e.message},
                )
                result.outcomes.append(
                    LoadOutcome(file_path=relative, status="skipped", reason=e.message)
                )
                continue

            result.documents.append(document)
            result.outcomes.append(LoadOutcome(file_path=relative, status="loaded"))

        logger.info(
            f"{__name__}:load_directory - Loaded documents",
            extra={
                "docs_dir": str(root_path),
                "loaded": len(result.documents),
                "skipped": len(result.skipped),
            },
        )
        return result

    def _find_markdown_files(self, directory: Path) -> list[Path]:
        files: list[Path] = []
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                if self._recursive:
                    files.extend(self._find_markdown_files(entry))
            elif entry.is_file() and self._should_include(entry.name):
                files.append(entry)
        return files

    def _should_include(self, file_name: str) -> bool:
        if not file_name.endswith(".md"):
            return False
        if self._include is not None:
            return bool(self._include.search(file_name))
        return True
