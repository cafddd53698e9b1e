"""Embedding provider boundary."""

from docsearch.boundary.embeddings.embeddings_wrapper import (
    Tokenizer,
    create_embeddings,
    get_tokenizer,
    truncate_to_token_limit,
)

__all__ = ["Tokenizer", "create_embeddings", "get_tokenizer", "truncate_to_token_limit"]
