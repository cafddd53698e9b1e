"""Reranker boundary."""

from docsearch.boundary.rerank.bedrock_reranker import BedrockReranker, Reranker

__all__ = ["BedrockReranker", "Reranker"]
