"""
Ingestion pipeline configuration.

Chunking, embedding batch and index upsert settings for the offline
documentation ingestion run. Values are validated once at startup so a bad
configuration fails before any provider is called.

Dependencies: pydantic, pydantic_settings
System role: Ingestion pipeline configuration
"""

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from docsearch.configs.base import BaseSettings

UpdateStrategy = Literal["smart", "rebuild", "upsert"]


class IngestionSettings(BaseSettings):
    """Settings for the documentation ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INGEST_",
        case_sensitive=False,
        extra="ignore",
    )

    docs_dir: str = Field(
        default="./data/markdown",
        description="Root directory of the markdown documentation tree",
    )

    # Chunking settings
    chunk_size: int = Field(
        default=1000,
        gt=0,
        description="Maximum chunk size in characters",
    )
    chunk_overlap: int = Field(
        default=200,
        ge=0,
        description="Overlap between consecutive sub-chunks of an oversized section",
    )
    deterministic_ids: bool = Field(
        default=True,
        description="Derive chunk IDs from file path and position (required for smart update)",
    )
    hierarchical: bool = Field(
        default=True,
        description="Link chunks into a parent/child tree by heading level and directory",
    )

    # Embedding batch settings
    embedding_batch_size: int = Field(
        default=50,
        ge=1,
        le=100,
        description="Chunks per embedding request",
    )
    embedding_max_tokens: int = Field(
        default=8000,
        gt=0,
        description="Token budget per embedding input (provider hard limit is 8192)",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Total attempts per batch before the run fails",
    )
    retry_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Base retry delay in seconds (delay = base * attempt)",
    )

    # Index settings
    upsert_batch_size: int = Field(
        default=100,
        ge=1,
        le=500,
        description="Records per vector store upsert/delete request",
    )
    strategy: UpdateStrategy = Field(
        default="smart",
        description="Index update strategy: smart, rebuild (clear + upsert) or upsert",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "IngestionSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        return self
