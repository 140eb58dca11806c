"""
Singleton resource management for the settings-wired engine.

Provides cached instances of the embedding provider, vector store and
engine built from application settings. Uses the @lru_cache pattern (same
as config.py settings singleton) so each resource is created once and
reused across calls.

Usage:
    engine = get_engine()  # First call builds, subsequent calls instant
    store = get_vector_store()  # Same store the engine writes to

    # In tests (reset cache)
    clear_resource_cache()
"""

import logging
from functools import lru_cache

from contextengine.config import settings
from contextengine.core.engine import ContextEngine
from contextengine.core.types import ContextEngineConfig
from contextengine.embedding.huggingface import HuggingFaceEmbeddingProvider
from contextengine.store.faiss_store import FAISSVectorStore

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_embedding_provider() -> HuggingFaceEmbeddingProvider:
    """Get or create the global HuggingFace embedding provider."""
    provider = HuggingFaceEmbeddingProvider(
        model=settings.embedding_model,
        api_key=settings.hf_api_key_value,
        timeout=settings.embedding_timeout,
        max_retries=settings.embedding_max_retries,
    )
    logger.info(f"Initialized embedding provider {provider.name}")
    return provider


@lru_cache(maxsize=1)
def get_vector_store() -> FAISSVectorStore:
    """
    Get or create the global FAISS vector store.

    Loads existing chunks from settings.index_path when present, otherwise
    starts empty.
    """
    if settings.index_path.with_suffix(".json").exists():
        logger.info(f"Loading vector store from {settings.index_path}")
        return FAISSVectorStore.from_disk(settings.index_path)

    logger.info("No saved vector store found, starting empty")
    return FAISSVectorStore(dimension=settings.embedding_dimension)


@lru_cache(maxsize=1)
def get_engine() -> ContextEngine:
    """Get or create the global engine wired to the cached resources."""
    return ContextEngine(
        ContextEngineConfig(
            embedding=get_embedding_provider(),
            store=get_vector_store(),
            defaults={
                "chunk_size": settings.chunk_size,
                "chunk_overlap": settings.chunk_overlap,
            },
        )
    )


def save_vector_store() -> None:
    """Persist the global vector store to settings.index_path."""
    get_vector_store().save(settings.index_path)


def clear_resource_cache() -> None:
    """
    Clear all cached resources.

    Used in tests to reset state between test cases.
    """
    get_engine.cache_clear()
    get_vector_store.cache_clear()
    get_embedding_provider.cache_clear()
    logger.debug("Resource cache cleared")
