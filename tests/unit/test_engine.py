"""Unit tests for the ContextEngine facade."""

import asyncio

import pytest

from contextengine.core.engine import ContextEngine, create_context_engine
from contextengine.core.exceptions import ConfigurationError
from contextengine.core.types import ContextEngineConfig, IngestInput, RetrieveInput


@pytest.mark.unit
class TestContextEngine:
    def test_resolves_once_at_construction(self, engine_config):
        engine = ContextEngine(engine_config)

        assert engine.config.defaults.chunk_size == 200
        assert engine.config.store is engine_config.store

    def test_config_is_read_only(self, engine_config):
        engine = ContextEngine(engine_config)

        with pytest.raises(AttributeError):
            engine.config = None

    def test_missing_capability_fails_at_construction(self, vector_store):
        with pytest.raises(ConfigurationError):
            ContextEngine(ContextEngineConfig(embedding=None, store=vector_store))

    def test_create_context_engine(self, engine_config):
        assert isinstance(create_context_engine(engine_config), ContextEngine)

    @pytest.mark.asyncio
    async def test_ingest_delegates(self, engine_config, vector_store):
        engine = ContextEngine(engine_config)

        result = await engine.ingest(IngestInput(source_id="s", content="hello world"))

        assert result.chunk_count == 1
        assert vector_store.upserts[0][0].document_id == result.document_id

    @pytest.mark.asyncio
    async def test_retrieve_delegates(self, engine_config, vector_store, retrieved_chunks):
        vector_store.results = retrieved_chunks
        engine = ContextEngine(engine_config)

        result = await engine.retrieve(RetrieveInput(query="hello", top_k=3))

        assert [c.id for c in result.chunks] == ["chunk-0", "chunk-1", "chunk-2"]
        assert vector_store.queries[0].top_k == 3

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_config(self, engine_config, vector_store):
        """Test that concurrent ingests each mint their own document id."""
        engine = ContextEngine(engine_config)

        results = await asyncio.gather(
            engine.ingest(IngestInput(source_id="same", content="first document")),
            engine.ingest(IngestInput(source_id="same", content="second document")),
            engine.retrieve(RetrieveInput(query="document")),
        )

        assert results[0].document_id != results[1].document_id
        assert len(vector_store.upserts) == 2
