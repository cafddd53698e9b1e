"""
Query preprocessing, candidate merging and token budgeting.

Pure functions used by the hybrid search service between provider retrieval
and the final result list.

Dependencies: re, pydantic models
System role: Ranking helpers for hybrid search
"""

import re
from dataclasses import dataclass, field
from typing import Any

from docsearch.models.retrieval import (
    MergedCandidate,
    ResultMetadata,
    RetrievalResult,
    SearchCandidate,
)

TOKENS_PER_CHAR = 0.25
MAX_QUERY_TERMS = 10
MIN_TERM_LENGTH = 3

_PUNCTUATION_PATTERN = re.compile(r"[^\w\s-]")
_WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass
class ProcessedQuery:
    """Query text in original and normalized form plus its significant terms."""

    original: str
    cleaned: str
    terms: list[str] = field(default_factory=list)


def preprocess_query(query: str) -> ProcessedQuery:
    """
    Normalize a query for retrieval.

    Lower-cases, replaces punctuation other than hyphens with spaces and
    collapses whitespace. When cleaning leaves nothing, the original query
    is used as the cleaned form.

    Args:
        query: Raw user query

    Returns:
        ProcessedQuery: Original, cleaned text and up to 10 terms longer than 2 chars
    """
    cleaned = _WHITESPACE_PATTERN.sub(" ", query.lower().strip())
    cleaned = _PUNCTUATION_PATTERN.sub(" ", cleaned)
    cleaned = _WHITESPACE_PATTERN.sub(" ", cleaned).strip()

    return ProcessedQuery(original=query, cleaned=cleaned or query, terms=extract_terms(cleaned))


def extract_terms(text: str) -> list[str]:
    """Return the first ten terms longer than two characters of a cleaned query."""
    return [t for t in text.lower().split() if len(t) >= MIN_TERM_LENGTH][:MAX_QUERY_TERMS]


def build_framework_filter(framework: str | None) -> dict[str, Any] | None:
    """
    Build the metadata filter for a framework scope.

    Chunks tagged `common` are always in scope.

    Args:
        framework: Requested framework, or None for all

    Returns:
        dict | None: Vector store filter expression
    """
    if framework is None:
        return None
    return {"$or": [{"framework": framework}, {"framework": "common"}]}


def merge_candidates(
    semantic: list[SearchCandidate],
    keyword: list[SearchCandidate],
) -> list[MergedCandidate]:
    """
    Merge provider hits by ID.

    Semantic hits come first in their own order, followed by keyword-only
    hits. A hit found by both providers keeps its semantic content and
    records both scores.

    Args:
        semantic: Semantic provider candidates
        keyword: Keyword provider candidates

    Returns:
        list[MergedCandidate]: Deduplicated candidates
    """
    merged: dict[str, MergedCandidate] = {}

    for hit in semantic:
        if hit.id in merged:
            continue
        merged[hit.id] = MergedCandidate(
            id=hit.id,
            content=hit.content,
            metadata=hit.metadata,
            sources=["semantic"],
            semantic_score=hit.score,
        )

    for hit in keyword:
        existing = merged.get(hit.id)
        if existing is None:
            merged[hit.id] = MergedCandidate(
                id=hit.id,
                content=hit.content,
                metadata=hit.metadata,
                sources=["keyword"],
                keyword_score=hit.score,
            )
        elif "keyword" not in existing.sources:
            existing.sources.append("keyword")
            existing.keyword_score = hit.score

    return list(merged.values())


def fallback_order(candidates: list[MergedCandidate]) -> list[MergedCandidate]:
    """
    Order candidates without a reranker.

    Candidates found by both providers come first, then by the sum of
    semantic and keyword scores, highest first.
    """
    return sorted(
        candidates,
        key=lambda c: (len(c.sources) < 2, -(c.semantic_score + c.keyword_score)),
    )


def _normalize_framework(value: Any) -> str:
    framework = str(value or "common")
    return framework if framework in ("flow", "hilla") else "common"


def to_retrieval_result(
    chunk_id: str,
    content: str,
    metadata: dict[str, Any],
    score: float,
) -> RetrievalResult:
    """
    Build a result from a store record.

    Args:
        chunk_id: Record key
        content: Chunk text
        metadata: Record metadata
        score: Relevance score for this query

    Returns:
        RetrievalResult: Caller-facing result
    """
    return RetrievalResult(
        chunk_id=chunk_id,
        parent_id=metadata.get("parent_id") or None,
        framework=_normalize_framework(metadata.get("framework")),
        content=content,
        source_url=str(metadata.get("source_url") or ""),
        file_path=str(metadata.get("file_path") or ""),
        metadata=ResultMetadata(
            title=str(metadata.get("title") or "Untitled"),
            heading=str(metadata.get("heading") or ""),
        ),
        relevance_score=float(score or 0.0),
    )


def candidate_to_result(candidate: MergedCandidate, score: float | None = None) -> RetrievalResult:
    """Convert a merged candidate; without a score the summed provider scores are used."""
    if score is None:
        score = candidate.semantic_score + candidate.keyword_score
    return to_retrieval_result(candidate.id, candidate.content, candidate.metadata, score)


def estimate_tokens(text: str) -> float:
    return len(text) * TOKENS_PER_CHAR


def apply_token_limits(results: list[RetrievalResult], max_tokens: int) -> list[RetrievalResult]:
    """
    Keep leading results while their estimated token total fits the budget.

    The first result is always kept, even when it alone exceeds the budget.

    Args:
        results: Ordered results
        max_tokens: Token budget

    Returns:
        list[RetrievalResult]: Prefix of `results`
    """
    total = 0.0
    limited: list[RetrievalResult] = []

    for result in results:
        cost = estimate_tokens(result.content)
        if limited and total + cost > max_tokens:
            break
        limited.append(result)
        total += cost

    return limited
