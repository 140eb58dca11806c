"""Engine facade binding one resolved configuration to ingest and retrieve."""

from contextengine.core.ingest import ingest
from contextengine.core.resolver import resolve_config
from contextengine.core.retrieve import retrieve
from contextengine.core.types import (
    ContextEngineConfig,
    IngestInput,
    IngestResult,
    ResolvedConfig,
    RetrieveInput,
    RetrieveResult,
)


class ContextEngine:
    """
    Retrieval engine over a pluggable embedding provider and vector store.

    The configuration is resolved once at construction and shared, read-only,
    by every call. Concurrent ingest and retrieve calls are safe.

    Example:
        >>> engine = ContextEngine(ContextEngineConfig(embedding=provider, store=store))
        >>> result = await engine.ingest(IngestInput(source_id="doc1", content=text))
        >>> hits = await engine.retrieve(RetrieveInput(query="pricing", top_k=5))
    """

    def __init__(self, config: ContextEngineConfig) -> None:
        self._config = resolve_config(config)

    @property
    def config(self) -> ResolvedConfig:
        return self._config

    async def ingest(self, request: IngestInput) -> IngestResult:
        return await ingest(self._config, request)

    async def retrieve(self, request: RetrieveInput) -> RetrieveResult:
        return await retrieve(self._config, request)


def create_context_engine(config: ContextEngineConfig) -> ContextEngine:
    return ContextEngine(config)
