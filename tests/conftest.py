"""
Pytest configuration and shared fixtures.

Provides common fixtures for:
    - Configuration with test values
    - Deterministic embedding provider and recording vector store doubles
    - Sequential id generator
    - Temporary directories for indexes
"""

import asyncio
import itertools
from pathlib import Path
from unittest.mock import patch

import pytest

from contextengine.core.types import (
    Chunk,
    ContextEngineConfig,
    EmbeddingInput,
    RetrievedChunk,
    VectorQuery,
)


# =============================================================================
# Test Doubles
# =============================================================================

class StubEmbeddingProvider:
    """Embeds text as [token count, character count, 1.0] and records calls."""

    def __init__(self, name: str = "stub-embedder", fail_on: str | None = None) -> None:
        self.name = name
        self.fail_on = fail_on
        self.calls: list[EmbeddingInput] = []

    async def embed(self, request: EmbeddingInput) -> list[float]:
        self.calls.append(request)
        await asyncio.sleep(0)
        if self.fail_on is not None and self.fail_on in request.text:
            raise RuntimeError(f"embedding failed for: {request.text}")
        return [float(len(request.text.split())), float(len(request.text)), 1.0]


class RecordingVectorStore:
    """Records upserts and queries; returns canned query results."""

    def __init__(self, results: list[RetrievedChunk] | None = None) -> None:
        self.results = results or []
        self.upserts: list[list[Chunk]] = []
        self.queries: list[VectorQuery] = []

    async def upsert(self, chunks: list[Chunk]) -> None:
        self.upserts.append(list(chunks))

    async def query(self, request: VectorQuery) -> list[RetrievedChunk]:
        self.queries.append(request)
        return list(self.results)


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def mock_settings():
    """Provide test settings without requiring .env file."""
    with patch.dict(
        "os.environ",
        {
            "HF_API_KEY": "test-api-key",
            "EMBEDDING_MODEL": "sentence-transformers/all-MiniLM-L6-v2",
            "CHUNK_SIZE": "120",
            "CHUNK_OVERLAP": "20",
            "RETRIEVAL_TOP_K": "5",
        },
    ):
        from contextengine.config import Settings
        yield Settings()


@pytest.fixture
def id_generator():
    """Deterministic id generator producing id-0, id-1, ..."""
    counter = itertools.count()
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def stub_embedding_provider_cls():
    """Expose the stub class for tests that need a configured instance."""
    return StubEmbeddingProvider


@pytest.fixture
def embedding_provider():
    return StubEmbeddingProvider()


@pytest.fixture
def vector_store():
    return RecordingVectorStore()


@pytest.fixture
def engine_config(embedding_provider, vector_store, id_generator):
    """Engine configuration wired to the test doubles."""
    return ContextEngineConfig(
        embedding=embedding_provider,
        store=vector_store,
        id_generator=id_generator,
    )


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def sample_document():
    """Provide a short multi-paragraph document."""
    return (
        "The ingestion pipeline splits documents into overlapping windows.\n\n"
        "Each window is embedded independently and stored with its metadata.\n\n"
        "Queries are embedded the same way and matched by vector distance."
    )


@pytest.fixture
def retrieved_chunks():
    """Three pre-ranked chunks as a vector store would return them."""
    return [
        RetrievedChunk(
            id=f"chunk-{i}",
            document_id="doc-1",
            source_id="handbook",
            index=i,
            content=f"content {i}",
            token_count=2,
            metadata={"org_id": "acme"},
            document_content="full handbook body",
            document_url="https://example.com/handbook",
            score=0.1 * (i + 1),
        )
        for i in range(3)
    ]


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def tmp_index_dir(tmp_path: Path) -> Path:
    """Provide temporary directory for the FAISS index."""
    index_dir = tmp_path / "index"
    index_dir.mkdir()
    return index_dir
