"""
Search service facade.

Validates caller parameters, fills defaults from settings and delegates to
the hybrid search service.

Dependencies: docsearch.core.search, docsearch.configs
System role: Search orchestration for the HTTP API and CLI
"""

import logging
import time

from docsearch.configs.search import SearchSettings
from docsearch.core.exceptions import ValidationError
from docsearch.core.search.hybrid_search import HybridSearchService
from docsearch.models.document import FRAMEWORKS
from docsearch.models.retrieval import RetrievalResult

logger = logging.getLogger(__name__)

MAX_RESULTS_RANGE = (1, 20)
MAX_TOKENS_RANGE = (100, 5000)


class SearchService:
    """Parameter validation and defaults around hybrid search."""

    def __init__(self, hybrid_search: HybridSearchService, settings: SearchSettings) -> None:
        """
        Initialize search service.

        Args:
            hybrid_search: Hybrid search implementation
            settings: Query-time defaults
        """
        self._hybrid_search = hybrid_search
        self._settings = settings

    async def search(
        self,
        query: str,
        max_results: int | None = None,
        max_tokens: int | None = None,
        framework: str | None = None,
    ) -> list[RetrievalResult]:
        """
        Search documentation chunks.

        Args:
            query: Natural-language query
            max_results: 1..20, settings default when None
            max_tokens: 100..5000, settings default when None
            framework: flow, hilla or common; None searches everything

        Returns:
            list[RetrievalResult]: Ranked results

        Raises:
            ValidationError: When a parameter is out of range
            SearchError: When retrieval fails entirely
        """
        max_results = self._settings.default_max_results if max_results is None else max_results
        max_tokens = self._settings.default_max_tokens if max_tokens is None else max_tokens

        if not MAX_RESULTS_RANGE[0] <= max_results <= MAX_RESULTS_RANGE[1]:
            raise ValidationError(
                f"max_results must be between {MAX_RESULTS_RANGE[0]} and {MAX_RESULTS_RANGE[1]}",
                field="max_results",
            )
        if not MAX_TOKENS_RANGE[0] <= max_tokens <= MAX_TOKENS_RANGE[1]:
            raise ValidationError(
                f"max_tokens must be between {MAX_TOKENS_RANGE[0]} and {MAX_TOKENS_RANGE[1]}",
                field="max_tokens",
            )
        if framework is not None and framework not in FRAMEWORKS:
            raise ValidationError(
                f"framework must be one of {', '.join(FRAMEWORKS)}", field="framework"
            )

        start_time = time.perf_counter()
        results = await self._hybrid_search.search(
            query,
            max_results=max_results,
            max_tokens=max_tokens,
            framework=framework,
        )
        logger.info(
            f"{__name__}:search - Search complete",
            extra={
                "query_preview": query[:50],
                "results": len(results),
                "framework": framework,
                "elapsed_ms": round((time.perf_counter() - start_time) * 1000, 1),
            },
        )
        return results

    async def get_chunk(self, chunk_id: str) -> RetrievalResult | None:
        """
        Fetch one chunk by ID.

        Raises:
            ValidationError: When chunk_id is blank
        """
        if not chunk_id.strip():
            raise ValidationError("chunk_id cannot be empty", field="chunk_id")
        return await self._hybrid_search.get_chunk(chunk_id)
