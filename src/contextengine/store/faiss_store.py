"""
In-process vector store backed by FAISS.

Keeps chunk records keyed by id and an IndexFlatIP over their unit-normalised
embeddings. Document bodies are held once per document id and joined back
onto results at query time. Scores follow the distance convention used by pgvector adapters:
`1 - cosine similarity`, ascending, so the closest chunk comes first.
"""

import dataclasses
import json
import logging
from pathlib import Path
from typing import Optional

import faiss
import numpy as np
from numpy.typing import NDArray

from contextengine.core.exceptions import StorageError
from contextengine.core.types import Chunk, RetrievalScope, RetrievedChunk, VectorQuery

logger = logging.getLogger(__name__)


class FAISSVectorStore:
    """
    FAISS-based vector store satisfying the VectorStore protocol.

    Upserts overwrite by chunk id (last writer wins). The dimension is fixed
    by the constructor or, if omitted, by the first upserted embedding.

    Example:
        >>> store = FAISSVectorStore()
        >>> await store.upsert(chunks)
        >>> hits = await store.query(VectorQuery(embedding=vector, top_k=5))
        >>> store.save("data/index/context.index")
    """

    def __init__(self, dimension: Optional[int] = None) -> None:
        self.dimension = dimension
        self._records: dict[str, Chunk] = {}
        self._documents: dict[str, tuple[Optional[str], Optional[str]]] = {}
        self._ids: list[str] = []
        self._index: Optional[faiss.IndexFlatIP] = None

    @property
    def size(self) -> int:
        """Number of chunks in the store."""
        return len(self._records)

    async def upsert(self, chunks: list[Chunk]) -> None:
        """
        Insert or overwrite chunks by id.

        Raises:
            StorageError: If a chunk has no embedding or the wrong dimension
        """
        if not chunks:
            return

        dimension = self.dimension
        for chunk in chunks:
            if chunk.embedding is None:
                raise StorageError(f"Chunk {chunk.id} has no embedding")
            dimension = dimension or len(chunk.embedding)
            if len(chunk.embedding) != dimension:
                raise StorageError(
                    f"Chunk {chunk.id} has dimension {len(chunk.embedding)}, "
                    f"store expects {dimension}"
                )

        self.dimension = dimension
        for chunk in chunks:
            self._add_record(chunk)

        self._rebuild()
        logger.debug(f"Upserted {len(chunks)} chunks ({self.size} total)")

    async def query(self, request: VectorQuery) -> list[RetrievedChunk]:
        """
        Return up to `top_k` chunks in scope, closest first.

        Raises:
            StorageError: If the query vector has the wrong dimension
        """
        if self._index is None or self.size == 0:
            return []

        query = np.asarray(request.embedding, dtype=np.float32).reshape(1, -1)
        if query.shape[1] != self.dimension:
            raise StorageError(
                f"Query has dimension {query.shape[1]}, store expects {self.dimension}"
            )
        query = np.ascontiguousarray(self._normalize_embeddings(query))

        # Scoped queries rank everything, then filter
        k = self.size if self._is_scoped(request.scope) else min(request.top_k, self.size)
        similarities, positions = self._index.search(query, k)

        results: list[RetrievedChunk] = []
        for similarity, position in zip(similarities[0], positions[0]):
            if position < 0:
                continue
            chunk = self._records[self._ids[position]]
            if not self._in_scope(chunk, request.scope):
                continue
            fields = {f.name: getattr(chunk, f.name) for f in dataclasses.fields(Chunk)}
            content, url = self._documents.get(chunk.document_id, (None, None))
            fields.update(document_content=content, document_url=url)
            results.append(RetrievedChunk(**fields, score=1.0 - float(similarity)))
            if len(results) == request.top_k:
                break

        return results

    def save(self, path: str | Path) -> None:
        """
        Save the index (.index) and records (.json) to disk.

        Each referenced document body is written once, under "documents".
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        records = [dataclasses.asdict(self._records[chunk_id]) for chunk_id in self._ids]
        referenced = {record["document_id"] for record in records}
        documents = {
            document_id: {"content": content, "url": url}
            for document_id, (content, url) in self._documents.items()
            if document_id in referenced
        }
        if self._index is not None:
            faiss.write_index(self._index, str(path.with_suffix(".index")))

        with path.with_suffix(".json").open("w", encoding="utf-8") as f:
            json.dump(
                {"dimension": self.dimension, "documents": documents, "chunks": records},
                f,
                ensure_ascii=False,
            )

        logger.info(f"Saved {self.size} chunks to {path.with_suffix('.json')}")

    def load(self, path: str | Path) -> None:
        """
        Load chunk records from disk and rebuild the index.

        Raises:
            FileNotFoundError: If the chunk record file doesn't exist
            StorageError: If the record file is malformed
        """
        metadata_file = Path(path).with_suffix(".json")
        if not metadata_file.exists():
            raise FileNotFoundError(f"Chunk record file not found: {metadata_file}")

        with metadata_file.open(encoding="utf-8") as f:
            data = json.load(f)

        try:
            chunks = [Chunk(**record) for record in data["chunks"]]
            documents = {
                document_id: (document["content"], document["url"])
                for document_id, document in data.get("documents", {}).items()
            }
        except (KeyError, TypeError, AttributeError) as e:
            raise StorageError(f"Malformed chunk record file: {metadata_file}") from e

        self.dimension = data.get("dimension")
        self._records = {}
        self._documents = documents
        for chunk in chunks:
            self._add_record(chunk)

        index_file = Path(path).with_suffix(".index")
        index = faiss.read_index(str(index_file)) if index_file.exists() else None
        if index is not None and index.ntotal == len(chunks):
            self._ids = list(self._records)
            self._index = index
        else:
            self._rebuild()
        logger.info(f"Loaded {self.size} chunks from {metadata_file}")

    @classmethod
    def from_disk(cls, path: str | Path) -> "FAISSVectorStore":
        store = cls()
        store.load(path)
        return store

    def _add_record(self, chunk: Chunk) -> None:
        """Store a chunk without its document body, keeping the body per document."""
        if chunk.document_content is not None or chunk.document_url is not None:
            self._documents[chunk.document_id] = (chunk.document_content, chunk.document_url)
        self._records[chunk.id] = dataclasses.replace(
            chunk, document_content=None, document_url=None
        )

    def _rebuild(self) -> None:
        self._ids = list(self._records)
        if not self._ids or self.dimension is None:
            self._index = None
            return

        embeddings = np.array(
            [self._records[chunk_id].embedding for chunk_id in self._ids],
            dtype=np.float32,
        )
        self._index = faiss.IndexFlatIP(self.dimension)
        self._index.add(np.ascontiguousarray(self._normalize_embeddings(embeddings)))

    @staticmethod
    def _is_scoped(scope: Optional[RetrievalScope]) -> bool:
        return scope is not None and any(
            value is not None for value in (scope.source_id, scope.org_id, scope.project_id)
        )

    @staticmethod
    def _in_scope(chunk: Chunk, scope: Optional[RetrievalScope]) -> bool:
        if scope is None:
            return True
        if scope.source_id is not None and chunk.source_id != scope.source_id:
            return False
        if scope.org_id is not None and chunk.metadata.get("org_id") != scope.org_id:
            return False
        if scope.project_id is not None and chunk.metadata.get("project_id") != scope.project_id:
            return False
        return True

    def _normalize_embeddings(self, embeddings: NDArray[np.float32]) -> NDArray[np.float32]:
        """Normalize embeddings to unit length for cosine similarity."""
        norms = np.linalg.norm(embeddings, axis=1, keepdims=True)
        # Avoid division by zero
        norms = np.where(norms == 0, 1, norms)
        return (embeddings / norms).astype(np.float32)
