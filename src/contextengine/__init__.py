"""
Context Engine: a pluggable retrieval pipeline.

Turns raw text into embedded, searchable chunks and returns the most
relevant chunks for a query. Embedding computation and vector persistence
are delegated to collaborators satisfying two small protocols.

Key Components:
    - core: chunking, config resolution, ingest/retrieve pipelines, engine facade
    - embedding: HuggingFace Inference API embedding provider
    - store: in-process FAISS vector store
    - resources: settings-wired cached engine
    - cli: Typer command-line interface

Example:
    >>> from contextengine import ContextEngine, ContextEngineConfig, IngestInput
    >>> engine = ContextEngine(ContextEngineConfig(embedding=provider, store=store))
    >>> result = await engine.ingest(IngestInput(source_id="handbook", content=text))
    >>> print(result.document_id, result.chunk_count)
"""

__version__ = "0.1.0"

from contextengine.core import (
    Chunk,
    ChunkingOptions,
    ChunkText,
    ConfigurationError,
    ContextEngine,
    ContextEngineConfig,
    ContextEngineError,
    EmbeddingError,
    EmbeddingInput,
    EmbeddingProvider,
    IngestInput,
    IngestResult,
    RetrievalScope,
    RetrievedChunk,
    RetrieveInput,
    RetrieveResult,
    StorageError,
    VectorQuery,
    VectorStore,
    create_context_engine,
    default_chunker,
    define_config,
)

__all__ = [
    "__version__",
    "Chunk",
    "ChunkText",
    "ChunkingOptions",
    "ConfigurationError",
    "ContextEngine",
    "ContextEngineConfig",
    "ContextEngineError",
    "EmbeddingError",
    "EmbeddingInput",
    "EmbeddingProvider",
    "IngestInput",
    "IngestResult",
    "RetrievalScope",
    "RetrieveInput",
    "RetrieveResult",
    "RetrievedChunk",
    "StorageError",
    "VectorQuery",
    "VectorStore",
    "create_context_engine",
    "default_chunker",
    "define_config",
]
