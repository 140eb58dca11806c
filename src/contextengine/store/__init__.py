"""Vector stores satisfying the VectorStore protocol."""

from contextengine.store.faiss_store import FAISSVectorStore

__all__ = ["FAISSVectorStore"]
