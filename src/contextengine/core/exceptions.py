"""
Error taxonomy for the context engine.

Configuration errors are raised by the engine itself. Embedding and storage
errors are raised by collaborators and propagate through ingest/retrieve
unchanged; the engine performs no retries and no partial commits.
"""


class ContextEngineError(Exception):
    """Base class for all context engine errors."""


class ConfigurationError(ContextEngineError, ValueError):
    """Missing capability or invalid option detected before any I/O."""


class EmbeddingError(ContextEngineError, RuntimeError):
    """Embedding provider failed or timed out."""


class StorageError(ContextEngineError, RuntimeError):
    """Vector store failed to persist or query chunks."""
