"""
Hybrid search.

Exports: HybridSearchService, SemanticSearchProvider, KeywordSearchProvider
"""

from docsearch.core.search.hybrid_search import HybridSearchService
from docsearch.core.search.providers import KeywordSearchProvider, SemanticSearchProvider

__all__ = ["HybridSearchService", "SemanticSearchProvider", "KeywordSearchProvider"]
