"""
Search configuration settings.

Query-time defaults for the hybrid search service and the location of the
markdown tree served by the document endpoint.

Dependencies: pydantic, pydantic_settings
System role: Query-time configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docsearch.configs.base import BaseSettings


class SearchSettings(BaseSettings):
    """Hybrid search defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SEARCH_",
        case_sensitive=False,
        extra="ignore",
    )

    default_max_results: int = Field(default=5, ge=1, le=20)
    default_max_tokens: int = Field(default=1500, ge=100, le=5000)
    candidate_multiplier: int = Field(
        default=3,
        ge=1,
        description="Over-fetch factor per provider so the reranker has material to reorder",
    )
    max_candidates: int = Field(
        default=100,
        ge=1,
        description="Upper bound on candidates requested from each provider",
    )


class DocumentSettings(BaseSettings):
    """Markdown tree served by the full-document endpoint."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DOCUMENTS_",
        case_sensitive=False,
        extra="ignore",
    )

    base_path: str = Field(
        default="./data/markdown",
        description="Directory containing the converted markdown documentation",
    )
