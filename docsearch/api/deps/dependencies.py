"""
Dependency injection container.

Provider clients are created once per process and shared by concurrent
requests; FastAPI dependencies hand out services built on them.

Dependencies: docsearch.configs, docsearch.application, docsearch.boundary
System role: DI container for service injection
"""

from docsearch.application.services import DocumentService, SearchService
from docsearch.configs import Settings, get_settings


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._embeddings = None
        self._vector_store = None
        self._reranker = None
        self._search_service = None
        self._document_service = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def embeddings(self):
        """Get cached embeddings client."""
        if self._embeddings is None:
            from docsearch.boundary.embeddings.embeddings_wrapper import create_embeddings

            self._embeddings = create_embeddings(self.settings.embedding)
        return self._embeddings

    @property
    def vector_store(self):
        """Get cached vector store."""
        if self._vector_store is None:
            from docsearch.boundary.vdb.vector_store_factory import get_vector_store

            self._vector_store = get_vector_store(self.settings.vector_store)
        return self._vector_store

    @property
    def reranker(self):
        """Get cached reranker, None when reranking is disabled."""
        if self._reranker is None and self.settings.rerank.enabled:
            from docsearch.boundary.rerank.bedrock_reranker import BedrockReranker

            rerank = self.settings.rerank
            self._reranker = BedrockReranker(model_arn=rerank.model_arn, region=rerank.aws_region)
        return self._reranker

    @property
    def search_service(self) -> SearchService:
        """Get cached search service."""
        if self._search_service is None:
            from docsearch.core.search import (
                HybridSearchService,
                KeywordSearchProvider,
                SemanticSearchProvider,
            )

            search = self.settings.search
            hybrid = HybridSearchService(
                semantic_provider=SemanticSearchProvider(self.embeddings, self.vector_store),
                keyword_provider=KeywordSearchProvider(self.embeddings, self.vector_store),
                reranker=self.reranker,
                candidate_multiplier=search.candidate_multiplier,
                max_candidates=search.max_candidates,
            )
            self._search_service = SearchService(hybrid, search)
        return self._search_service

    @property
    def document_service(self) -> DocumentService:
        """Get cached document service."""
        if self._document_service is None:
            self._document_service = DocumentService(self.settings.documents.base_path)
        return self._document_service

    def clear(self) -> None:
        """Clear all cached instances."""
        self._embeddings = None
        self._vector_store = None
        self._reranker = None
        self._search_service = None
        self._document_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_search_service() -> SearchService:
    """
    Get search service instance.

    Returns:
        SearchService: Shared search service
    """
    return get_service_cache().search_service


def get_document_service() -> DocumentService:
    """
    Get document service instance.

    Returns:
        DocumentService: Shared document service
    """
    return get_service_cache().document_service
