"""
Hybrid search service.

Runs semantic and keyword retrieval concurrently, merges the candidates,
reranks them against the original query and trims the list to a token
budget. Falls back to semantic-only search when the hybrid path fails.

Dependencies: asyncio, docsearch.core.search, docsearch.boundary.rerank
System role: Query-time retrieval orchestration
"""

import asyncio
import logging

from docsearch.boundary.rerank.bedrock_reranker import Reranker
from docsearch.core.exceptions import SearchError
from docsearch.core.search.providers import KeywordSearchProvider, SemanticSearchProvider
from docsearch.core.search.ranking import (
    ProcessedQuery,
    apply_token_limits,
    build_framework_filter,
    candidate_to_result,
    fallback_order,
    merge_candidates,
    preprocess_query,
    to_retrieval_result,
)
from docsearch.models.retrieval import MergedCandidate, RetrievalResult

logger = logging.getLogger(__name__)


class HybridSearchService:
    """Semantic + keyword retrieval with reranking and a token budget."""

    def __init__(
        self,
        semantic_provider: SemanticSearchProvider,
        keyword_provider: KeywordSearchProvider,
        reranker: Reranker | None = None,
        candidate_multiplier: int = 3,
        max_candidates: int = 100,
    ) -> None:
        """
        Initialize hybrid search service.

        Args:
            semantic_provider: Dense similarity provider
            keyword_provider: Keyword relevance provider
            reranker: Reranker; None disables reranking
            candidate_multiplier: Candidates requested per provider per result
            max_candidates: Upper bound on candidates per provider
        """
        self._semantic = semantic_provider
        self._keyword = keyword_provider
        self._reranker = reranker
        self._candidate_multiplier = candidate_multiplier
        self._max_candidates = max_candidates

    async def search(
        self,
        query: str,
        max_results: int = 5,
        max_tokens: int = 1500,
        framework: str | None = None,
    ) -> list[RetrievalResult]:
        """
        Search the documentation index.

        Args:
            query: Natural-language query
            max_results: Maximum number of results
            max_tokens: Approximate token budget for the returned content
            framework: Restrict to one framework (common is always included)

        Returns:
            list[RetrievalResult]: Most relevant first; empty for a blank query

        Raises:
            SearchError: When both hybrid and semantic-only retrieval fail
        """
        if not query.strip():
            return []

        processed = preprocess_query(query)
        try:
            return await self._hybrid_search(processed, max_results, max_tokens, framework)
        except Exception as e:
            logger.warning(
                f"{__name__}:search - Hybrid search failed, falling back to semantic search",
                extra={"error": str(e), "error_type": type(e).__name__},
            )

        try:
            candidates = await self._semantic.search(
                query, max_results, build_framework_filter(framework)
            )
        except Exception as e:
            logger.error(
                f"{__name__}:search - Semantic fallback failed",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            raise SearchError(query, e) from e

        return [
            to_retrieval_result(c.id, c.content, c.metadata, c.score) for c in candidates
        ]

    async def get_chunk(self, chunk_id: str) -> RetrievalResult | None:
        """
        Fetch a chunk by ID.

        Args:
            chunk_id: Chunk identifier

        Returns:
            RetrievalResult | None: None when not indexed
        """
        return await self._semantic.get_chunk(chunk_id)

    async def _hybrid_search(
        self,
        processed: ProcessedQuery,
        max_results: int,
        max_tokens: int,
        framework: str | None,
    ) -> list[RetrievalResult]:
        candidate_count = min(max_results * self._candidate_multiplier, self._max_candidates)
        filter = build_framework_filter(framework)

        # A failing provider cancels the other before the semantic fallback runs
        try:
            async with asyncio.TaskGroup() as group:
                semantic_task = group.create_task(
                    self._semantic.search(processed.cleaned, candidate_count, filter)
                )
                keyword_task = group.create_task(
                    self._keyword.search(
                        processed.cleaned, candidate_count, filter, terms=processed.terms
                    )
                )
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from eg

        semantic, keyword = semantic_task.result(), keyword_task.result()
        merged = merge_candidates(semantic, keyword)

        logger.info(
            f"{__name__}:_hybrid_search - Retrieved candidates",
            extra={
                "semantic": len(semantic),
                "keyword": len(keyword),
                "merged": len(merged),
                "framework": framework,
            },
        )

        if len(merged) > 1:
            ranked = await self._rerank(processed.original, merged, max_results)
        else:
            ranked = [candidate_to_result(c) for c in merged]

        return apply_token_limits(ranked, max_tokens)[:max_results]

    async def _rerank(
        self,
        query: str,
        candidates: list[MergedCandidate],
        top_n: int,
    ) -> list[RetrievalResult]:
        pool = [c for c in candidates if c.content]
        if self._reranker is None or not pool:
            return self._fallback(candidates, top_n)

        try:
            hits = await self._reranker.rerank(query, [c.content for c in pool], top_n)
        except Exception as e:
            logger.warning(
                f"{__name__}:_rerank - Reranking failed, using merge order",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return self._fallback(candidates, top_n)

        results = [
            candidate_to_result(pool[hit.index], hit.score)
            for hit in hits
            if 0 <= hit.index < len(pool)
        ]
        if not results:
            return self._fallback(candidates, top_n)
        return results[:top_n]

    @staticmethod
    def _fallback(candidates: list[MergedCandidate], top_n: int) -> list[RetrievalResult]:
        return [candidate_to_result(c) for c in fallback_order(candidates)[:top_n]]
