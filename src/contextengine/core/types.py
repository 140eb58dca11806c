"""
Shared value types and capability protocols for the context engine.

The engine depends on exactly two collaborators:
    - EmbeddingProvider: maps text to a numeric vector
    - VectorStore: persists embedded chunks and answers nearest-neighbour queries

Any object satisfying these protocols can be plugged in; no inheritance
is required.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, TypedDict, runtime_checkable

MetadataValue = str | int | float | bool | None
Metadata = dict[str, MetadataValue | list[MetadataValue]]


# =============================================================================
# Chunking
# =============================================================================

@dataclass(frozen=True)
class ChunkingOptions:
    """Window policy used by a chunker."""

    chunk_size: int
    """Maximum number of whitespace tokens per chunk."""

    chunk_overlap: int
    """Number of tokens shared between consecutive chunks."""


class ChunkingOverrides(TypedDict, total=False):
    """Partial chunking options, merged field by field over a base."""

    chunk_size: int
    chunk_overlap: int


@dataclass(frozen=True)
class ChunkText:
    """A window of document text produced by a chunker."""

    index: int
    """0-based position of the chunk within its document."""

    content: str
    """Window tokens rejoined with single spaces."""

    token_count: int
    """Number of whitespace tokens in the window."""


Chunker = Callable[[str, ChunkingOptions], list[ChunkText]]
IdGenerator = Callable[[], str]


# =============================================================================
# Chunks
# =============================================================================

@dataclass
class Chunk:
    """An embeddable unit of a document, ready to hand to a vector store."""

    id: str
    document_id: str
    source_id: str
    index: int
    content: str
    token_count: int
    metadata: Metadata = field(default_factory=dict)
    embedding: Optional[list[float]] = None
    document_content: Optional[str] = None
    """Full body of the ingested document, shared by all its chunks."""

    document_url: Optional[str] = None
    """Caller-supplied location of the document body, if any."""


@dataclass
class RetrievedChunk(Chunk):
    """A stored chunk returned by a similarity query."""

    score: float = 0.0
    """Distance to the query vector; lower means closer."""


@dataclass(frozen=True)
class RetrievalScope:
    """Filter narrowing a query to a subset of stored chunks."""

    source_id: Optional[str] = None
    org_id: Optional[str] = None
    project_id: Optional[str] = None


# =============================================================================
# Capability protocols
# =============================================================================

@dataclass(frozen=True)
class EmbeddingInput:
    """Everything an embedding provider may use to embed one text."""

    text: str
    metadata: Metadata
    position: int
    source_id: str
    document_id: str


@dataclass(frozen=True)
class VectorQuery:
    """Nearest-neighbour request passed to a vector store."""

    embedding: list[float]
    top_k: int
    scope: Optional[RetrievalScope] = None


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding capabilities.

    Implementations raise EmbeddingError (or any exception) on provider
    failure or timeout; the engine propagates it unchanged.
    """

    @property
    def name(self) -> str:
        """Return identifier for the model used."""
        ...

    async def embed(self, request: EmbeddingInput) -> list[float]:
        """Embed a single text."""
        ...


@runtime_checkable
class VectorStore(Protocol):
    """Protocol for storage capabilities.

    `query` returns chunks ranked most-similar-first (ascending score).
    """

    async def upsert(self, chunks: list[Chunk]) -> None:
        """Insert or overwrite chunks by id."""
        ...

    async def query(self, request: VectorQuery) -> list[RetrievedChunk]:
        """Return the closest stored chunks to the request embedding."""
        ...


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class ContextEngineConfig:
    """User-supplied engine configuration."""

    embedding: EmbeddingProvider
    store: VectorStore
    defaults: Optional[ChunkingOverrides] = None
    chunker: Optional[Chunker] = None
    id_generator: Optional[IdGenerator] = None


@dataclass(frozen=True)
class ResolvedConfig:
    """Immutable configuration bound to an engine for its lifetime."""

    embedding: EmbeddingProvider
    store: VectorStore
    defaults: ChunkingOptions
    chunker: Chunker
    id_generator: IdGenerator


# =============================================================================
# Requests and results
# =============================================================================

@dataclass
class IngestInput:
    """A single document to ingest."""

    source_id: str
    content: str
    metadata: Optional[Metadata] = None
    chunking: Optional[ChunkingOverrides] = None
    content_url: Optional[str] = None


@dataclass(frozen=True)
class IngestDurations:
    """Wall-clock duration of each ingest phase, in milliseconds."""

    total_ms: float
    chunking_ms: float
    embedding_ms: float
    storage_ms: float


@dataclass(frozen=True)
class IngestResult:
    document_id: str
    chunk_count: int
    embedding_model: str
    durations: IngestDurations


@dataclass
class RetrieveInput:
    """A similarity query."""

    query: str
    top_k: Optional[int] = None
    scope: Optional[RetrievalScope] = None
    include_document: bool = False


@dataclass(frozen=True)
class RetrieveDurations:
    """Wall-clock duration of each retrieve phase, in milliseconds."""

    total_ms: float
    embedding_ms: float
    retrieval_ms: float


@dataclass(frozen=True)
class RetrieveResult:
    chunks: list[RetrievedChunk]
    embedding_model: str
    durations: RetrieveDurations
