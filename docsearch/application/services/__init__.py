"""Service orchestrators."""

from .document_service import DocumentService
from .search_service import SearchService

__all__ = ["DocumentService", "SearchService"]
