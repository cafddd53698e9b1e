"""
Amazon Bedrock reranker.

Reorders candidate passages by relevance to a query using a Bedrock rerank
model through the `bedrock-agent-runtime` rerank API.

Dependencies: boto3, botocore
System role: Reranking stage of hybrid search
"""

import asyncio
import logging
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from docsearch.core.exceptions import RerankError
from docsearch.models.retrieval import RerankHit

logger = logging.getLogger(__name__)


class Reranker(Protocol):
    """Reorders documents by relevance to a query."""

    async def rerank(self, query: str, documents: list[str], top_n: int) -> list[RerankHit]: ...


class BedrockReranker:
    """Reranker backed by a Bedrock rerank foundation model."""

    def __init__(
        self,
        model_arn: str,
        region: str = "us-west-2",
        client: Any | None = None,
    ) -> None:
        """
        Initialize Bedrock reranker.

        Args:
            model_arn: Foundation model ARN of the rerank model
            region: AWS region hosting the model
            client: Preconfigured `bedrock-agent-runtime` client (created when None)
        """
        if not model_arn:
            raise ValueError("model_arn cannot be empty")

        self._model_arn = model_arn
        self._client = client or boto3.client("bedrock-agent-runtime", region_name=region)

    async def rerank(self, query: str, documents: list[str], top_n: int) -> list[RerankHit]:
        """
        Rank documents against a query.

        Args:
            query: Original user query
            documents: Candidate passages
            top_n: Number of hits to return

        Returns:
            list[RerankHit]: Indices into `documents`, best first

        Raises:
            RerankError: When the rerank call fails
        """
        if not documents:
            return []

        request = {
            "queries": [{"type": "TEXT", "textQuery": {"text": query}}],
            "sources": [
                {
                    "type": "INLINE",
                    "inlineDocumentSource": {
                        "type": "TEXT",
                        "textDocument": {"text": text},
                    },
                }
                for text in documents
            ],
            "rerankingConfiguration": {
                "type": "BEDROCK_RERANKING_MODEL",
                "bedrockRerankingConfiguration": {
                    "numberOfResults": max(1, min(top_n, len(documents))),
                    "modelConfiguration": {"modelArn": self._model_arn},
                },
            },
        }

        try:
            response = await asyncio.to_thread(self._client.rerank, **request)
        except (ClientError, BotoCoreError) as e:
            logger.warning(
                f"{__name__}:rerank - Rerank request failed",
                extra={"error": str(e), "documents": len(documents)},
            )
            raise RerankError(f"Rerank failed: {e}", details={"documents": len(documents)}) from e

        hits = [
            RerankHit(index=item["index"], score=float(item["relevanceScore"]))
            for item in response.get("results", [])
        ]
        logger.debug(f"{__name__}:rerank - Reranked {len(documents)} documents into {len(hits)} hits")
        return hits
