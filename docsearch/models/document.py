"""
Document domain model for the ingestion pipeline.

A loaded markdown file: frontmatter fields plus the body text.

Dependencies: pydantic
System role: Input of the chunker
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Framework = Literal["flow", "hilla", "common"]
FRAMEWORKS: tuple[str, ...] = ("flow", "hilla", "common")

FrontmatterValue = str | int | float | bool


class Document(BaseModel):
    """Markdown document loaded from the documentation tree."""

    model_config = ConfigDict(frozen=True)

    file_path: str = Field(description="Path relative to the docs root, forward slashes")
    content: str = Field(description="Document body with frontmatter removed")
    frontmatter: dict[str, FrontmatterValue] = Field(default_factory=dict)

    @property
    def framework(self) -> str:
        value = self.frontmatter.get("framework")
        if isinstance(value, str) and value in FRAMEWORKS:
            return value
        return "common"

    @property
    def source_url(self) -> str:
        value = self.frontmatter.get("source_url")
        return str(value) if value is not None else ""

    @property
    def title(self) -> str | None:
        value = self.frontmatter.get("title")
        return str(value) if value is not None else None
