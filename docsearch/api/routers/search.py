"""
Search API endpoint.

Routes: POST /search

Dependencies: docsearch.application.services.search_service, docsearch.models
System role: Hybrid search HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from docsearch.api.deps import get_search_service
from docsearch.application.services import SearchService
from docsearch.models.common import ErrorResponse
from docsearch.models.retrieval import SearchRequest, SearchResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


@router.post(
    "",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def search(
    request: SearchRequest,
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """
    Search documentation chunks with hybrid retrieval and reranking.

    Args:
        request: Query, result limit, token budget and optional framework
        search_service: Injected search service

    Returns:
        SearchResponse: Ranked results
    """
    results = await search_service.search(
        request.query,
        max_results=request.max_results,
        max_tokens=request.max_tokens,
        framework=request.framework,
    )
    return SearchResponse(results=results, total=len(results))
