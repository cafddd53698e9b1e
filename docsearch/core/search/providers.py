"""
Candidate search providers.

Semantic retrieval by dense vector similarity and keyword retrieval that
re-scores dense candidates by query-term frequency. Both read from the same
vector index.

Dependencies: langchain_core, docsearch.boundary.vdb
System role: First-pass candidate retrieval for hybrid search
"""

import logging
import math
from typing import Any

from langchain_core.embeddings import Embeddings

from docsearch.boundary.vdb.vector_schemas import VectorStore
from docsearch.core.search.ranking import extract_terms, to_retrieval_result
from docsearch.models.retrieval import RetrievalResult, SearchCandidate

logger = logging.getLogger(__name__)


class SemanticSearchProvider:
    """Dense vector similarity search."""

    def __init__(self, embeddings: Embeddings, store: VectorStore) -> None:
        self._embeddings = embeddings
        self._store = store

    async def search(
        self,
        query: str,
        k: int,
        filter: dict[str, Any] | None = None,
    ) -> list[SearchCandidate]:
        """
        Return the `k` nearest chunks to the query.

        Args:
            query: Query text
            k: Number of candidates
            filter: Vector store metadata filter

        Returns:
            list[SearchCandidate]: Closest first
        """
        vector = await self._embeddings.aembed_query(query)
        matches = await self._store.query(vector, top_k=k, filter=filter, include_metadata=True)

        return [
            SearchCandidate(
                id=str(match.metadata.get("chunk_id") or match.id),
                content=str(match.metadata.get("content", "")),
                metadata=match.metadata,
                score=match.score,
                source="semantic",
            )
            for match in matches
        ]

    async def get_chunk(self, chunk_id: str) -> RetrievalResult | None:
        """
        Fetch a single chunk by ID.

        Args:
            chunk_id: Chunk identifier

        Returns:
            RetrievalResult | None: None when the ID is not indexed
        """
        records = await self._store.fetch([chunk_id])
        metadata = records.get(chunk_id)
        if metadata is None:
            return None
        return to_retrieval_result(chunk_id, str(metadata.get("content", "")), metadata, 1.0)


class KeywordSearchProvider:
    """
    Keyword relevance over dense candidates.

    Fetches `2k` dense candidates for the joined query terms and scores each
    by how often the terms occur in its content, weighting earlier query
    terms more heavily.
    """

    def __init__(self, embeddings: Embeddings, store: VectorStore) -> None:
        self._embeddings = embeddings
        self._store = store

    @staticmethod
    def score(content: str, terms: list[str]) -> float:
        """Sum of term frequencies, each divided by ln(2 + term position)."""
        text = content.lower()
        return sum(
            text.count(term) / math.log(2 + position)
            for position, term in enumerate(terms)
        )

    async def search(
        self,
        query: str,
        k: int,
        filter: dict[str, Any] | None = None,
        terms: list[str] | None = None,
    ) -> list[SearchCandidate]:
        """
        Return up to `k` candidates containing the query terms.

        Args:
            query: Query text (cleaned)
            k: Number of candidates
            filter: Vector store metadata filter
            terms: Precomputed query terms; extracted from `query` when omitted

        Returns:
            list[SearchCandidate]: Highest keyword score first; empty when the
                query has no terms longer than 2 characters
        """
        if terms is None:
            terms = extract_terms(query)
        if not terms:
            return []

        vector = await self._embeddings.aembed_query(" ".join(terms))
        matches = await self._store.query(vector, top_k=k * 2, filter=filter, include_metadata=True)

        candidates: list[SearchCandidate] = []
        for match in matches:
            content = match.metadata.get("content")
            if not content:
                continue

            keyword_score = self.score(str(content), terms)
            if keyword_score > 0:
                candidates.append(
                    SearchCandidate(
                        id=str(match.metadata.get("chunk_id") or match.id),
                        content=str(content),
                        metadata=match.metadata,
                        score=keyword_score,
                        source="keyword",
                    )
                )

        candidates.sort(key=lambda c: c.score, reverse=True)
        return candidates[:k]
