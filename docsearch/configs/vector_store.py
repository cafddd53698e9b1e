"""
Vector store configuration settings.

Manages Amazon S3 Vectors configuration for the documentation index.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for ingestion and retrieval
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docsearch.configs.base import BaseSettings


class VectorStoreSettings(BaseSettings):
    """S3 Vectors index configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    vectors_bucket: str = Field(
        default="docs-search-vectors",
        description="S3 Vectors bucket name",
    )
    index_name: str = Field(default="docs", description="S3 Vectors index name")
    aws_region: str = Field(default="us-east-1", description="AWS region for S3 Vectors")

