"""
Chunk API endpoint.

Routes: GET /chunks/{chunk_id}

Dependencies: docsearch.application.services.search_service
System role: Chunk lookup HTTP API
"""

from fastapi import APIRouter, Depends, HTTPException, status

from docsearch.api.deps import get_search_service
from docsearch.application.services import SearchService
from docsearch.models.common import ErrorResponse
from docsearch.models.retrieval import RetrievalResult

router = APIRouter(prefix="/chunks", tags=["chunks"])


@router.get(
    "/{chunk_id}",
    response_model=RetrievalResult,
    responses={404: {"model": ErrorResponse}},
)
async def get_chunk(
    chunk_id: str,
    search_service: SearchService = Depends(get_search_service),
) -> RetrievalResult:
    """Fetch a single indexed chunk by ID."""
    result = await search_service.get_chunk(chunk_id)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Chunk not found: {chunk_id}",
        )
    return result
