"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI and the CLI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from docsearch.configs.base import BaseSettings
from docsearch.configs.embeddings import EmbeddingSettings
from docsearch.configs.ingestion import IngestionSettings
from docsearch.configs.rerank import RerankSettings
from docsearch.configs.search import DocumentSettings, SearchSettings
from docsearch.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    rerank: RerankSettings = Field(default_factory=RerankSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    documents: DocumentSettings = Field(default_factory=DocumentSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are read once; invalid values raise a pydantic
    ValidationError here, at startup.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
