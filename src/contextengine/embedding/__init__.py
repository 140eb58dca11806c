"""Embedding providers satisfying the EmbeddingProvider protocol."""

from contextengine.embedding.huggingface import HuggingFaceEmbeddingProvider

__all__ = ["HuggingFaceEmbeddingProvider"]
