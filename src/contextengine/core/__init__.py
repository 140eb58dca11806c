"""
Core orchestration for the context engine.

Components:
    - chunking: Sliding-window chunker and option resolution
    - resolver: Merge user configuration with default strategies
    - ingest: Chunk -> embed -> persist pipeline
    - retrieve: Embed query -> vector search -> shape results
    - engine: Facade exposing ingest and retrieve
"""

from contextengine.core.chunking import (
    DEFAULT_CHUNKING_OPTIONS,
    default_chunker,
    resolve_chunking_options,
)
from contextengine.core.engine import ContextEngine, create_context_engine
from contextengine.core.exceptions import (
    ConfigurationError,
    ContextEngineError,
    EmbeddingError,
    StorageError,
)
from contextengine.core.ingest import ingest
from contextengine.core.resolver import default_id_generator, define_config, resolve_config
from contextengine.core.retrieve import DEFAULT_TOP_K, retrieve
from contextengine.core.types import (
    Chunk,
    ChunkingOptions,
    ChunkingOverrides,
    ChunkText,
    ContextEngineConfig,
    EmbeddingInput,
    EmbeddingProvider,
    IngestDurations,
    IngestInput,
    IngestResult,
    ResolvedConfig,
    RetrievalScope,
    RetrieveDurations,
    RetrievedChunk,
    RetrieveInput,
    RetrieveResult,
    VectorQuery,
    VectorStore,
)

__all__ = [
    "DEFAULT_CHUNKING_OPTIONS",
    "DEFAULT_TOP_K",
    "Chunk",
    "ChunkText",
    "ChunkingOptions",
    "ChunkingOverrides",
    "ConfigurationError",
    "ContextEngine",
    "ContextEngineConfig",
    "ContextEngineError",
    "EmbeddingError",
    "EmbeddingInput",
    "EmbeddingProvider",
    "IngestDurations",
    "IngestInput",
    "IngestResult",
    "ResolvedConfig",
    "RetrievalScope",
    "RetrieveDurations",
    "RetrieveInput",
    "RetrieveResult",
    "RetrievedChunk",
    "StorageError",
    "VectorQuery",
    "VectorStore",
    "create_context_engine",
    "default_chunker",
    "default_id_generator",
    "define_config",
    "ingest",
    "resolve_chunking_options",
    "resolve_config",
    "retrieve",
]
