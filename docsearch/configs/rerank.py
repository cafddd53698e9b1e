"""
Reranker configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Bedrock reranking model configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docsearch.configs.base import BaseSettings


class RerankSettings(BaseSettings):
    """Amazon Bedrock rerank configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RERANK_",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    enabled: bool = Field(default=True, description="Use the reranker at query time")
    model_id: str = Field(
        default="amazon.rerank-v1:0",
        description="Bedrock rerank foundation model ID",
    )
    aws_region: str = Field(
        default="us-west-2",
        description="AWS region where the rerank model is available",
    )

    @property
    def model_arn(self) -> str:
        """
        Construct the foundation model ARN expected by the rerank API.

        Returns:
            str: Bedrock foundation model ARN
        """
        return f"arn:aws:bedrock:{self.aws_region}::foundation-model/{self.model_id}"
