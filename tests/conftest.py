"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory fakes for the embedding provider, vector store,
reranker and tokenizer, plus markdown tree and settings fixtures.
Dependencies: pytest, langchain_core
System role: Test infrastructure and fixture management
"""

from pathlib import Path
from typing import Any

import pytest
from langchain_core.embeddings import Embeddings

from docsearch.boundary.vdb.vector_schemas import VectorMatch
from docsearch.configs import Settings
from docsearch.configs.embeddings import EmbeddingSettings
from docsearch.configs.ingestion import IngestionSettings
from docsearch.configs.rerank import RerankSettings
from docsearch.configs.search import DocumentSettings, SearchSettings
from docsearch.configs.vector_store import VectorStoreSettings
from docsearch.core.exceptions import ListingNotSupportedError
from docsearch.models.chunk import IndexRecord, IndexStats
from docsearch.models.retrieval import RerankHit


class FakeEmbeddings(Embeddings):
    """Deterministic embeddings; `failures` are raised by successive document calls."""

    def __init__(self, dimensions: int = 1536, failures: list[Exception] | None = None) -> None:
        self.dimensions = dimensions
        self.failures = list(failures or [])
        self.document_calls: list[list[str]] = []
        self.query_calls: list[str] = []

    def _vector(self, text: str) -> list[float]:
        seed = float(sum(ord(c) for c in text) % 97 + 1)
        return [seed / 100.0] * self.dimensions

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls.append(list(texts))
        if self.failures:
            raise self.failures.pop(0)
        return [self._vector(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        return self._vector(text)

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        return self.embed_documents(texts)

    async def aembed_query(self, text: str) -> list[float]:
        return self.embed_query(text)


class WrongDimensionEmbeddings(FakeEmbeddings):
    """Always returns vectors of `returned` length."""

    def __init__(self, dimensions: int = 1536, returned: int = 1000) -> None:
        super().__init__(dimensions)
        self.returned = returned

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls.append(list(texts))
        return [[0.1] * self.returned for _ in texts]


class CharTokenizer:
    """One token per character."""

    def encode(self, text: str) -> list[int]:
        return [ord(c) for c in text]

    def decode(self, tokens: list[int]) -> str:
        return "".join(chr(t) for t in tokens)


def _matches_filter(metadata: dict[str, Any], filter: dict[str, Any] | None) -> bool:
    if not filter:
        return True
    for key, value in filter.items():
        if key == "$or":
            if not any(_matches_filter(metadata, clause) for clause in value):
                return False
        elif key == "$and":
            if not all(_matches_filter(metadata, clause) for clause in value):
                return False
        elif metadata.get(key) != value:
            return False
    return True


class FakeVectorStore:
    """In-memory VectorStore. Query scores follow insertion order."""

    def __init__(self, supports_listing: bool = True) -> None:
        self.records: dict[str, IndexRecord] = {}
        self.supports_listing = supports_listing
        self.upsert_calls: list[list[str]] = []
        self.delete_calls: list[list[str]] = []
        self.query_calls: list[dict[str, Any]] = []
        self.upsert_failures: list[Exception] = []
        self.query_error: Exception | None = None

    def seed(self, chunk_id: str, content: str = "", **metadata: Any) -> None:
        meta = {"chunk_id": chunk_id, "content": content, "framework": "common", **metadata}
        self.records[chunk_id] = IndexRecord(id=chunk_id, vector=[0.0], metadata=meta)

    async def upsert(self, records: list[IndexRecord]) -> None:
        self.upsert_calls.append([r.id for r in records])
        if self.upsert_failures:
            raise self.upsert_failures.pop(0)
        for record in records:
            self.records[record.id] = record

    async def delete_many(self, ids: list[str]) -> None:
        self.delete_calls.append(list(ids))
        for chunk_id in ids:
            self.records.pop(chunk_id, None)

    async def delete_all(self) -> None:
        self.records.clear()

    async def query(
        self,
        vector: list[float],
        top_k: int,
        filter: dict[str, Any] | None = None,
        include_metadata: bool = True,
    ) -> list[VectorMatch]:
        self.query_calls.append({"top_k": top_k, "filter": filter})
        if self.query_error is not None:
            raise self.query_error
        hits = [r for r in self.records.values() if _matches_filter(r.metadata, filter)]
        return [
            VectorMatch(id=r.id, score=1.0 - i * 0.01, metadata=dict(r.metadata))
            for i, r in enumerate(hits[:top_k])
        ]

    async def fetch(self, ids: list[str]) -> dict[str, dict[str, Any]]:
        return {i: dict(self.records[i].metadata) for i in ids if i in self.records}

    async def list_all_ids(self) -> list[str]:
        if not self.supports_listing:
            raise ListingNotSupportedError()
        return list(self.records)

    async def describe_stats(self) -> IndexStats:
        return IndexStats(index_name="fake", dimension=1536, total_vector_count=len(self.records))


class FakeReranker:
    """Ranks documents by how many query words they contain."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, list[str], int]] = []

    async def rerank(self, query: str, documents: list[str], top_n: int) -> list[RerankHit]:
        self.calls.append((query, list(documents), top_n))
        if self.error is not None:
            raise self.error
        words = query.lower().split()
        scored = [
            RerankHit(index=i, score=float(sum(w in doc.lower() for w in words)))
            for i, doc in enumerate(documents)
        ]
        scored.sort(key=lambda hit: (-hit.score, hit.index))
        return scored[:top_n]


class RecordingSleep:
    """Async sleep for tenacity that records requested delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_embeddings() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture
def tokenizer() -> CharTokenizer:
    return CharTokenizer()


def write_markdown(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def docs_tree(tmp_path: Path) -> Path:
    """
    Create a small documentation tree.

    Returns:
        Path: Root directory containing forms.md, forms/binding.md,
            components/index.md and components/grid.md
    """
    root = tmp_path / "markdown"
    write_markdown(
        root,
        "forms.md",
        "---\ntitle: Forms\nframework: flow\nsource_url: https://docs.example.com/forms\n---\n"
        "# Forms\n\nIntro to forms.\n\n## Binding\n\nBinding data fields to beans.\n\n## Validation\n\nValidators.\n",
    )
    write_markdown(
        root,
        "forms/binding.md",
        "---\ntitle: Binding\nframework: flow\n---\n# Binding Data\n\nUse the Binder class.\n",
    )
    write_markdown(
        root,
        "components/index.md",
        "---\ntitle: Components\n---\n# Components\n\nAll components.\n",
    )
    write_markdown(
        root,
        "components/grid.md",
        "---\ntitle: Grid\nframework: hilla\n---\n# Grid\n\nGrid columns and rows.\n",
    )
    return root


@pytest.fixture
def settings(docs_tree: Path) -> Settings:
    """Settings with zero retry delay pointing at the docs tree."""
    return Settings(
        ingestion=IngestionSettings(docs_dir=str(docs_tree), retry_delay=0.0),
        embedding=EmbeddingSettings(),
        vector_store=VectorStoreSettings(),
        rerank=RerankSettings(),
        search=SearchSettings(),
        documents=DocumentSettings(base_path=str(docs_tree)),
    )
