"""
Embedding provider configuration.

Dependencies: pydantic, pydantic_settings
System role: Embedding model configuration shared by ingestion and search
"""

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import SettingsConfigDict

from docsearch.configs.base import BaseSettings

SUPPORTED_DIMENSIONS = (1536, 3072)


class EmbeddingSettings(BaseSettings):
    """OpenAI embedding model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    model: str = Field(
        default="text-embedding-3-small",
        description="OpenAI embedding model name",
    )
    dimensions: int = Field(
        default=1536,
        description="Embedding vector dimension (1536 or 3072)",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="OpenAI API key (falls back to OPENAI_API_KEY when unset)",
    )
    tokenizer_encoding: str = Field(
        default="cl100k_base",
        description="tiktoken encoding used to count and truncate embedding inputs",
    )

    @field_validator("dimensions")
    @classmethod
    def _check_dimensions(cls, value: int) -> int:
        if value not in SUPPORTED_DIMENSIONS:
            raise ValueError(
                f"dimensions must be one of {SUPPORTED_DIMENSIONS}, got {value}"
            )
        return value
