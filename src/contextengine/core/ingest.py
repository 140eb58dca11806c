"""
Ingest pipeline: chunk -> embed -> persist.

All chunks of a document are embedded concurrently. The store is only
called once every embedding has succeeded, so a failed ingest never
leaves a partially embedded document behind.
"""

import asyncio
import logging
import time

from contextengine.core.chunking import resolve_chunking_options
from contextengine.core.types import (
    Chunk,
    EmbeddingInput,
    IngestDurations,
    IngestInput,
    IngestResult,
    Metadata,
    ResolvedConfig,
)

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


async def _embed_all(config: ResolvedConfig, chunks: list[Chunk]) -> list[list[float]]:
    """
    Embed every chunk concurrently, failing fast on the first error.

    Pending embed calls are cancelled as soon as one fails and the original
    exception is re-raised unchanged.
    """
    tasks = [
        asyncio.ensure_future(
            config.embedding.embed(
                EmbeddingInput(
                    text=chunk.content,
                    metadata=chunk.metadata,
                    position=chunk.index,
                    source_id=chunk.source_id,
                    document_id=chunk.document_id,
                )
            )
        )
        for chunk in chunks
    ]

    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


async def ingest(config: ResolvedConfig, request: IngestInput) -> IngestResult:
    """
    Chunk, embed and store a single document.

    Args:
        config: Resolved engine configuration
        request: Document content, source label and optional overrides

    Returns:
        IngestResult with the new document id, chunk count and phase timings

    Raises:
        ConfigurationError: If the per-call chunking overrides are invalid
        Exception: Any embedding or storage failure, propagated unchanged
    """
    total_start = time.perf_counter()
    chunking_start = total_start

    options = resolve_chunking_options(request.chunking, base=config.defaults)
    metadata: Metadata = request.metadata if request.metadata is not None else {}
    document_id = config.id_generator()

    chunks = [
        Chunk(
            id=config.id_generator(),
            document_id=document_id,
            source_id=request.source_id,
            index=chunk_text.index,
            content=chunk_text.content,
            token_count=chunk_text.token_count,
            metadata=metadata,
            document_content=request.content,
            document_url=request.content_url,
        )
        for chunk_text in config.chunker(request.content, options)
    ]

    chunking_ms = _elapsed_ms(chunking_start)
    logger.debug(f"Chunked document {document_id} into {len(chunks)} chunks ({chunking_ms:.1f}ms)")

    embedding_start = time.perf_counter()
    embeddings = await _embed_all(config, chunks)
    for chunk, embedding in zip(chunks, embeddings):
        chunk.embedding = embedding
    embedding_ms = _elapsed_ms(embedding_start)
    logger.debug(f"Embedded {len(chunks)} chunks with {config.embedding.name} ({embedding_ms:.1f}ms)")

    storage_start = time.perf_counter()
    await config.store.upsert(chunks)
    storage_ms = _elapsed_ms(storage_start)

    total_ms = _elapsed_ms(total_start)
    logger.info(
        f"Ingested document {document_id} from source '{request.source_id}' "
        f"({len(chunks)} chunks, {total_ms:.1f}ms)"
    )

    return IngestResult(
        document_id=document_id,
        chunk_count=len(chunks),
        embedding_model=config.embedding.name,
        durations=IngestDurations(
            total_ms=total_ms,
            chunking_ms=chunking_ms,
            embedding_ms=embedding_ms,
            storage_ms=storage_ms,
        ),
    )
