"""
Configuration resolution.

Binds the required capabilities and fills in default strategies. Defaults
are plain values injected here, so tests can swap in deterministic doubles.
"""

import uuid
from typing import Optional

from contextengine.core.chunking import default_chunker, resolve_chunking_options
from contextengine.core.exceptions import ConfigurationError
from contextengine.core.types import (
    Chunker,
    ChunkingOverrides,
    ContextEngineConfig,
    EmbeddingProvider,
    IdGenerator,
    ResolvedConfig,
    VectorStore,
)


def default_id_generator() -> str:
    """Return a random 128-bit identifier in dashed hex form."""
    return str(uuid.uuid4())


def define_config(
    embedding: EmbeddingProvider,
    store: VectorStore,
    defaults: Optional[ChunkingOverrides] = None,
    chunker: Optional[Chunker] = None,
    id_generator: Optional[IdGenerator] = None,
) -> ContextEngineConfig:
    """Build a ContextEngineConfig from keyword arguments."""
    return ContextEngineConfig(
        embedding=embedding,
        store=store,
        defaults=defaults,
        chunker=chunker,
        id_generator=id_generator,
    )


def resolve_config(config: ContextEngineConfig) -> ResolvedConfig:
    """
    Resolve user configuration into the engine's immutable state.

    Args:
        config: User-supplied configuration

    Returns:
        ResolvedConfig with chunking defaults merged and strategies bound

    Raises:
        ConfigurationError: If the embedding provider or vector store is
            missing or does not satisfy its protocol, or if the chunking
            defaults are invalid
    """
    if config.embedding is None:
        raise ConfigurationError("An embedding provider is required")
    if not isinstance(config.embedding, EmbeddingProvider):
        raise ConfigurationError(
            f"Embedding provider {config.embedding!r} must define `name` and `embed`"
        )
    if config.store is None:
        raise ConfigurationError("A vector store is required")
    if not isinstance(config.store, VectorStore):
        raise ConfigurationError(
            f"Vector store {config.store!r} must define `upsert` and `query`"
        )

    return ResolvedConfig(
        embedding=config.embedding,
        store=config.store,
        defaults=resolve_chunking_options(config.defaults),
        chunker=config.chunker or default_chunker,
        id_generator=config.id_generator or default_id_generator,
    )
