"""
Document API endpoint.

Routes: GET /documents/{file_path}

Dependencies: docsearch.application.services.document_service
System role: Full-document HTTP API
"""

from fastapi import APIRouter, Depends, HTTPException, status

from docsearch.api.deps import get_document_service
from docsearch.application.services import DocumentService
from docsearch.models.common import ErrorResponse
from docsearch.models.retrieval import DocumentResult

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get(
    "/{file_path:path}",
    response_model=DocumentResult,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_document(
    file_path: str,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResult:
    """
    Return a complete markdown document.

    Path traversal attempts surface as 400 through the ValidationError handler.
    """
    document = await document_service.get_document(file_path)
    if document is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Document not found: {file_path}",
        )
    return document
