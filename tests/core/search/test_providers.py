"""Tests for the semantic and keyword search providers."""

import pytest
from conftest import FakeEmbeddings, FakeVectorStore

from docsearch.core.search.providers import KeywordSearchProvider, SemanticSearchProvider


@pytest.fixture
def seeded_store() -> FakeVectorStore:
    store = FakeVectorStore()
    store.seed("grid-0", "Grid columns and rows for the grid component", framework="hilla")
    store.seed("binder-0", "Binder binds form fields", framework="flow")
    store.seed("empty-0", "")
    store.seed("intro-0", "Welcome to the documentation")
    return store


class TestSemanticSearchProvider:
    """Test dense retrieval."""

    @pytest.mark.asyncio
    async def test_returns_candidates_with_content(self, seeded_store: FakeVectorStore) -> None:
        """Should return store matches as semantic candidates."""
        embeddings = FakeEmbeddings()
        provider = SemanticSearchProvider(embeddings, seeded_store)

        candidates = await provider.search("grid columns", k=2)

        assert [c.id for c in candidates] == ["grid-0", "binder-0"]
        assert all(c.source == "semantic" for c in candidates)
        assert candidates[0].content.startswith("Grid columns")
        assert embeddings.query_calls == ["grid columns"]
        assert seeded_store.query_calls[0]["top_k"] == 2

    @pytest.mark.asyncio
    async def test_passes_filter(self, seeded_store: FakeVectorStore) -> None:
        """Should forward the metadata filter to the store."""
        provider = SemanticSearchProvider(FakeEmbeddings(), seeded_store)
        filter = {"$or": [{"framework": "flow"}, {"framework": "common"}]}

        candidates = await provider.search("binder", k=10, filter=filter)

        assert {c.id for c in candidates} == {"binder-0", "empty-0", "intro-0"}

    @pytest.mark.asyncio
    async def test_get_chunk(self, seeded_store: FakeVectorStore) -> None:
        """Should fetch a chunk by ID or return None."""
        provider = SemanticSearchProvider(FakeEmbeddings(), seeded_store)

        found = await provider.get_chunk("binder-0")
        missing = await provider.get_chunk("nope")

        assert found is not None
        assert found.content == "Binder binds form fields"
        assert found.framework == "flow"
        assert found.relevance_score == 1.0
        assert missing is None


class TestKeywordSearchProvider:
    """Test keyword re-scoring."""

    def test_score_weights_term_position(self) -> None:
        """Should divide each term count by ln(2 + position)."""
        score = KeywordSearchProvider.score("grid grid column", ["grid", "column"])
        expected = 2 / 0.6931471805599453 + 1 / 1.0986122886681098
        assert score == pytest.approx(expected)

    @pytest.mark.asyncio
    async def test_keeps_matching_candidates_sorted(self, seeded_store: FakeVectorStore) -> None:
        """Should drop empty and non-matching content and sort by keyword score."""
        embeddings = FakeEmbeddings()
        provider = KeywordSearchProvider(embeddings, seeded_store)

        candidates = await provider.search("binder grid", k=5)

        assert [c.id for c in candidates] == ["grid-0", "binder-0"]
        assert candidates[0].score > candidates[1].score
        assert all(c.source == "keyword" for c in candidates)
        assert seeded_store.query_calls[0]["top_k"] == 10
        assert embeddings.query_calls == ["binder grid"]

    @pytest.mark.asyncio
    async def test_caps_at_k(self, seeded_store: FakeVectorStore) -> None:
        """Should return at most k candidates."""
        provider = KeywordSearchProvider(FakeEmbeddings(), seeded_store)
        candidates = await provider.search("grid binder the", k=1)
        assert len(candidates) == 1

    @pytest.mark.asyncio
    async def test_no_terms(self, seeded_store: FakeVectorStore) -> None:
        """Should skip the store when no term is longer than two characters."""
        provider = KeywordSearchProvider(FakeEmbeddings(), seeded_store)

        assert await provider.search("a to", k=5) == []
        assert seeded_store.query_calls == []

    @pytest.mark.asyncio
    async def test_caps_extracted_terms_at_ten(self, seeded_store: FakeVectorStore) -> None:
        """Should embed at most ten terms when extracting them from the query."""
        embeddings = FakeEmbeddings()
        provider = KeywordSearchProvider(embeddings, seeded_store)
        words = ["grid"] + [f"extra{i}" for i in range(11)]

        await provider.search(" ".join(words), k=5)

        assert embeddings.query_calls == [" ".join(words[:10])]

    @pytest.mark.asyncio
    async def test_uses_precomputed_terms(self, seeded_store: FakeVectorStore) -> None:
        """Should score with the given terms instead of re-reading the query."""
        embeddings = FakeEmbeddings()
        provider = KeywordSearchProvider(embeddings, seeded_store)

        candidates = await provider.search("ignored words here", k=5, terms=["binder"])

        assert [c.id for c in candidates] == ["binder-0"]
        assert embeddings.query_calls == ["binder"]
