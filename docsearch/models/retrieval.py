"""
Retrieval result models.

Dependencies: pydantic
System role: Query-time result structures returned by the search service
"""

from typing import Literal

from pydantic import BaseModel, Field

from docsearch.models.document import Framework

CandidateSource = Literal["semantic", "keyword"]


class ResultMetadata(BaseModel):
    """Display metadata attached to a search result."""

    title: str = ""
    heading: str = ""


class RetrievalResult(BaseModel):
    """Single chunk returned to a search caller."""

    chunk_id: str
    parent_id: str | None = None
    framework: str = "common"
    content: str
    source_url: str = ""
    file_path: str = ""
    metadata: ResultMetadata = Field(default_factory=ResultMetadata)
    relevance_score: float = 0.0


class SearchCandidate(BaseModel):
    """Provider hit before merging and reranking."""

    id: str
    content: str
    metadata: dict = Field(default_factory=dict)
    score: float
    source: CandidateSource


class MergedCandidate(BaseModel):
    """Candidate after merging semantic and keyword hits by id."""

    id: str
    content: str
    metadata: dict = Field(default_factory=dict)
    sources: list[CandidateSource] = Field(default_factory=list)
    semantic_score: float = 0.0
    keyword_score: float = 0.0


class RerankHit(BaseModel):
    """Reranker output: index into the submitted documents and its score."""

    index: int
    score: float


class SearchRequest(BaseModel):
    """Request body for the search endpoint."""

    query: str = Field(..., min_length=1, description="Natural-language question")
    max_results: int = Field(default=5, ge=1, le=20)
    max_tokens: int = Field(default=1500, ge=100, le=5000)
    framework: Framework | None = Field(
        default=None,
        description="Restrict to one framework; common docs are always included",
    )


class SearchResponse(BaseModel):
    """Response body for the search endpoint."""

    results: list[RetrievalResult]
    total: int


class DocumentResult(BaseModel):
    """Full markdown document returned by the document endpoint."""

    file_path: str
    content: str
    metadata: dict[str, str] = Field(default_factory=dict)
