"""
File hierarchy parser.

Derives cross-file parent/child relationships from the layout of the
documentation tree: `forms.md` (or `forms/index.md`) is the parent of
`forms/binding.md`.

Dependencies: pathlib, pydantic
System role: Input of the relationship task in hierarchical ingestion mode
"""

from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, Field

INDEX_FILE_NAMES = ("index.md", "index-flow.md", "index-hilla.md")


class FileHierarchy(BaseModel):
    """Position of one markdown file in the documentation tree."""

    file_path: str
    parent_path: str | None = None
    children: list[str] = Field(default_factory=list)
    level: int = Field(default=0, description="Directory depth, 0 for root files")


def build_file_hierarchy(paths: Iterable[str]) -> dict[str, FileHierarchy]:
    """
    Build hierarchy entries for an in-memory list of relative paths.

    Args:
        paths: Relative markdown paths using forward slashes

    Returns:
        dict: Relative path -> FileHierarchy
    """
    all_paths = sorted({p.replace("\\", "/") for p in paths})
    known = set(all_paths)

    structure: dict[str, FileHierarchy] = {}
    for path in all_paths:
        segments = path.split("/")
        structure[path] = FileHierarchy(
            file_path=path,
            parent_path=_find_parent(path, known),
            children=_find_children(path, all_paths),
            level=len(segments) - 1,
        )
    return structure


def parse_file_hierarchy(root: str | Path) -> dict[str, FileHierarchy]:
    """
    Scan a directory and build hierarchy entries for every markdown file in it.

    Args:
        root: Documentation root directory

    Returns:
        dict: Relative path -> FileHierarchy (empty when the directory is missing)
    """
    root_path = Path(root)
    if not root_path.is_dir():
        return {}

    paths = [
        p.relative_to(root_path).as_posix()
        for p in root_path.rglob("*.md")
        if p.is_file()
    ]
    return build_file_hierarchy(paths)


def _find_parent(path: str, known: set[str]) -> str | None:
    segments = path.split("/")
    if len(segments) == 1:
        return None

    # An index file never takes a sibling index file as parent
    if segments[-1] not in INDEX_FILE_NAMES:
        parent_dir = "/".join(segments[:-1])
        for index_name in INDEX_FILE_NAMES:
            candidate = f"{parent_dir}/{index_name}"
            if candidate in known:
                return candidate

    grandparent_dir = "/".join(segments[:-2])
    dir_name = segments[-2]
    named = f"{grandparent_dir}/{dir_name}.md" if grandparent_dir else f"{dir_name}.md"
    if named in known:
        return named

    return None


def _find_children(path: str, all_paths: list[str]) -> list[str]:
    stem = path[: -len(".md")] if path.endswith(".md") else path
    return [
        other
        for other in all_paths
        if "/" in other and other.rsplit("/", 1)[0] == stem
    ]


def get_parent_file_path(file_path: str, structure: dict[str, FileHierarchy]) -> str | None:
    """Return the parent file of `file_path`, if any."""
    entry = structure.get(file_path)
    return entry.parent_path if entry else None


def get_child_file_paths(file_path: str, structure: dict[str, FileHierarchy]) -> list[str]:
    """Return the files directly inside the directory named after `file_path`."""
    entry = structure.get(file_path)
    return list(entry.children) if entry else []


def has_parent(file_path: str, structure: dict[str, FileHierarchy]) -> bool:
    return get_parent_file_path(file_path, structure) is not None
