"""
Base configuration settings.

Every settings class reads `.env` and the process environment
case-insensitively and ignores keys it does not own, so one `.env` file can
hold the ingestion, search and provider settings side by side.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Shared settings: environment name, log level and service name."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Deployment environment (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Root logging level used by the CLI and API server",
    )
    service_name: str = Field(
        default="docsearch",
        description="Name reported by the health endpoint",
    )
