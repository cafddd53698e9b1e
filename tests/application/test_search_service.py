"""Tests for the search service facade."""

import pytest
from conftest import FakeEmbeddings, FakeVectorStore

from docsearch.application.services import SearchService
from docsearch.configs.search import SearchSettings
from docsearch.core.exceptions import ValidationError
from docsearch.core.search import HybridSearchService, KeywordSearchProvider, SemanticSearchProvider


@pytest.fixture
def store() -> FakeVectorStore:
    store = FakeVectorStore()
    for i in range(8):
        store.seed(f"chunk-{i}", f"grid topic number {i}")
    return store


@pytest.fixture
def service(store: FakeVectorStore) -> SearchService:
    embeddings = FakeEmbeddings()
    hybrid = HybridSearchService(
        SemanticSearchProvider(embeddings, store),
        KeywordSearchProvider(embeddings, store),
    )
    return SearchService(hybrid, SearchSettings(default_max_results=3))


class TestSearchService:
    """Test defaults and validation."""

    @pytest.mark.asyncio
    async def test_applies_default_max_results(self, service: SearchService) -> None:
        """Should use the configured default when max_results is omitted."""
        results = await service.search("grid topic")
        assert len(results) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("kwargs", "field"),
        [
            ({"max_results": 0}, "max_results"),
            ({"max_results": 21}, "max_results"),
            ({"max_tokens": 99}, "max_tokens"),
            ({"max_tokens": 5001}, "max_tokens"),
            ({"framework": "angular"}, "framework"),
        ],
    )
    async def test_rejects_out_of_range(self, service: SearchService, kwargs: dict, field: str) -> None:
        """Should raise ValidationError naming the field."""
        with pytest.raises(ValidationError) as exc_info:
            await service.search("grid", **kwargs)
        assert exc_info.value.details["field"] == field

    @pytest.mark.asyncio
    async def test_get_chunk(self, service: SearchService) -> None:
        """Should return a chunk or None."""
        assert (await service.get_chunk("chunk-1")).content == "grid topic number 1"
        assert await service.get_chunk("missing") is None

    @pytest.mark.asyncio
    async def test_blank_chunk_id(self, service: SearchService) -> None:
        """Should reject a blank chunk ID."""
        with pytest.raises(ValidationError):
            await service.get_chunk("  ")
