"""
Retrieve pipeline: embed query -> vector search -> shape results.

Ranking and limiting belong to the vector store; results are returned in
the order the store produced them.
"""

import dataclasses
import logging
import time

from contextengine.core.exceptions import ConfigurationError
from contextengine.core.types import (
    EmbeddingInput,
    ResolvedConfig,
    RetrieveDurations,
    RetrievedChunk,
    RetrieveInput,
    RetrieveResult,
    VectorQuery,
)

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 8
QUERY_SENTINEL = "query"


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _strip_document(chunk: RetrievedChunk) -> RetrievedChunk:
    """Drop the document body fields from a retrieved chunk."""
    return dataclasses.replace(chunk, document_content=None, document_url=None)


async def retrieve(config: ResolvedConfig, request: RetrieveInput) -> RetrieveResult:
    """
    Return the stored chunks closest to a query.

    Args:
        config: Resolved engine configuration
        request: Query text, optional top_k, scope and include_document flag

    Returns:
        RetrieveResult with chunks in store order and phase timings

    Raises:
        ConfigurationError: If top_k is not a positive integer
        Exception: Any embedding or storage failure, propagated unchanged
    """
    top_k = request.top_k if request.top_k is not None else DEFAULT_TOP_K
    if top_k <= 0:
        raise ConfigurationError(f"top_k must be positive, got {top_k}")

    total_start = time.perf_counter()

    embedding_start = time.perf_counter()
    query_embedding = await config.embedding.embed(
        EmbeddingInput(
            text=request.query,
            metadata={},
            position=0,
            source_id=QUERY_SENTINEL,
            document_id=QUERY_SENTINEL,
        )
    )
    embedding_ms = _elapsed_ms(embedding_start)

    retrieval_start = time.perf_counter()
    chunks = await config.store.query(
        VectorQuery(embedding=query_embedding, top_k=top_k, scope=request.scope)
    )
    if not request.include_document:
        chunks = [_strip_document(chunk) for chunk in chunks]
    retrieval_ms = _elapsed_ms(retrieval_start)

    total_ms = _elapsed_ms(total_start)
    logger.info(f"Retrieved {len(chunks)} chunks (top_k={top_k}, {total_ms:.1f}ms)")

    return RetrieveResult(
        chunks=chunks,
        embedding_model=config.embedding.name,
        durations=RetrieveDurations(
            total_ms=total_ms,
            embedding_ms=embedding_ms,
            retrieval_ms=retrieval_ms,
        ),
    )
