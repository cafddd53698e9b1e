"""
OpenAI embeddings factory and token truncation.

Builds the langchain OpenAIEmbeddings client with a fixed output dimension
and provides exact token-count truncation with tiktoken, so every input fits
the provider's per-input token limit.

Dependencies: langchain_openai, tiktoken
System role: Embedding provider boundary shared by ingestion and search
"""

import logging
from functools import lru_cache
from typing import Protocol

import tiktoken
from langchain_openai import OpenAIEmbeddings

from docsearch.configs.embeddings import EmbeddingSettings

logger = logging.getLogger(__name__)


class Tokenizer(Protocol):
    """Subset of tiktoken.Encoding used for truncation."""

    def encode(self, text: str) -> list[int]: ...

    def decode(self, tokens: list[int]) -> str: ...


@lru_cache(maxsize=4)
def get_tokenizer(encoding_name: str = "cl100k_base") -> tiktoken.Encoding:
    """
    Load a tiktoken encoding once per process.

    Args:
        encoding_name: tiktoken encoding name

    Returns:
        tiktoken.Encoding: Cached encoding
    """
    logger.info(
        f"{__name__}:get_tokenizer - Loading tiktoken encoding",
        extra={"encoding": encoding_name},
    )
    return tiktoken.get_encoding(encoding_name)


def truncate_to_token_limit(text: str, max_tokens: int, tokenizer: Tokenizer) -> str:
    """
    Truncate text to at most `max_tokens` tokens.

    Args:
        text: Input text
        max_tokens: Token budget
        tokenizer: Encoder/decoder pair

    Returns:
        str: Unchanged text when within budget, else the decoded token prefix
    """
    tokens = tokenizer.encode(text)
    if len(tokens) <= max_tokens:
        return text

    logger.debug(
        f"{__name__}:truncate_to_token_limit - Truncating text",
        extra={"tokens": len(tokens), "max_tokens": max_tokens},
    )
    return tokenizer.decode(tokens[:max_tokens])


def create_embeddings(settings: EmbeddingSettings) -> OpenAIEmbeddings:
    """
    Create the OpenAI embeddings client.

    Args:
        settings: Embedding configuration

    Returns:
        OpenAIEmbeddings: Client producing vectors of `settings.dimensions` length
    """
    kwargs = {}
    if settings.api_key is not None:
        kwargs["api_key"] = settings.api_key

    logger.info(
        f"{__name__}:create_embeddings - Creating OpenAIEmbeddings with "
        f"model={settings.model}, dimensions={settings.dimensions}"
    )
    return OpenAIEmbeddings(
        model=settings.model,
        dimensions=settings.dimensions,
        **kwargs,
    )
