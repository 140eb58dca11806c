"""
Embedding provider backed by the HuggingFace Inference API.

Uses sentence-transformers models through the feature-extraction pipeline.
Rate-limit retries live here, not in the engine.
"""

import asyncio
import logging
from typing import Optional

import httpx
import numpy as np
from numpy.typing import NDArray

from contextengine.config import settings
from contextengine.core.exceptions import EmbeddingError
from contextengine.core.types import EmbeddingInput

logger = logging.getLogger(__name__)


class HuggingFaceEmbeddingProvider:
    """
    Embed text through the HuggingFace feature-extraction endpoint.

    Satisfies the EmbeddingProvider protocol. Every request is bounded by
    `timeout`; HTTP 429 responses are retried with exponential backoff.

    Example:
        >>> provider = HuggingFaceEmbeddingProvider(api_key="hf_...")
        >>> vector = await provider.embed(EmbeddingInput(text="What is 5G NR?", ...))
        >>> len(vector)
        384
    """

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_delay: float = 1.0,
        batch_size: int = 32,
    ) -> None:
        """
        Initialize the provider.

        Args:
            model: HuggingFace model ID (default from settings)
            api_key: HuggingFace API key (default from settings)
            timeout: Per-request timeout in seconds (default from settings)
            max_retries: Attempts per request when rate limited (default from settings)
            retry_delay: Initial backoff delay in seconds, doubled per retry
            batch_size: Number of texts per API call in embed_texts
        """
        self.model = model or settings.embedding_model
        self.api_key = api_key or settings.hf_api_key_value
        self.timeout = timeout or settings.embedding_timeout
        self.max_retries = max_retries or settings.embedding_max_retries
        self.retry_delay = retry_delay
        self.batch_size = batch_size
        self.dimensions = settings.embedding_dimension
        self.base_url = settings.embedding_base_url.rstrip("/")

    @property
    def name(self) -> str:
        return f"huggingface:{self.model}"

    async def embed(self, request: EmbeddingInput) -> list[float]:
        """
        Embed a single chunk or query text.

        Raises:
            EmbeddingError: On HTTP error, timeout or malformed response
        """
        embeddings = await self._embed_batch([request.text])
        return embeddings[0].tolist()

    async def embed_texts(self, texts: list[str]) -> NDArray[np.float32]:
        """
        Embed a list of texts, batching requests concurrently.

        Returns:
            Array of shape (len(texts), dimensions)
        """
        if not texts:
            return np.empty((0, self.dimensions), dtype=np.float32)

        batches = [
            texts[i : i + self.batch_size]
            for i in range(0, len(texts), self.batch_size)
        ]
        batch_results = await asyncio.gather(*(self._embed_batch(batch) for batch in batches))
        return np.vstack(batch_results)

    async def _embed_batch(self, texts: list[str]) -> NDArray[np.float32]:
        url = f"{self.base_url}/{self.model}"
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        payload = {"inputs": texts}

        retry_delay = self.retry_delay

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                for attempt in range(self.max_retries):
                    response = await client.post(url, json=payload, headers=headers)

                    # Handle rate limiting with exponential backoff
                    if response.status_code == 429 and attempt < self.max_retries - 1:
                        logger.warning(
                            f"Embedding endpoint rate limited, retrying in {retry_delay:.1f}s "
                            f"(attempt {attempt + 1}/{self.max_retries})"
                        )
                        await asyncio.sleep(retry_delay)
                        retry_delay *= 2
                        continue

                    response.raise_for_status()
                    return self._parse_embeddings(response.json(), expected=len(texts))
        except httpx.TimeoutException as e:
            raise EmbeddingError(f"Embedding request timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise EmbeddingError(
                f"Embedding request failed with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise EmbeddingError(f"Embedding request failed: {e}") from e

        raise EmbeddingError("Embedding request exhausted retries")

    def _parse_embeddings(self, payload: object, expected: int) -> NDArray[np.float32]:
        try:
            embeddings = np.array(payload, dtype=np.float32)
        except (TypeError, ValueError) as e:
            raise EmbeddingError("Embedding response is not a numeric matrix") from e

        if embeddings.ndim != 2 or embeddings.shape[0] != expected:
            raise EmbeddingError(
                f"Expected {expected} embeddings, got array of shape {embeddings.shape}"
            )

        return self._normalize_embeddings(embeddings)

    def _normalize_embeddings(self, embeddings: NDArray[np.float32]) -> NDArray[np.float32]:
        """Normalize embeddings to unit length for cosine similarity."""
        norms = np.linalg.norm(embeddings, axis=1, keepdims=True)
        # Avoid division by zero
        norms = np.where(norms == 0, 1, norms)
        return (embeddings / norms).astype(np.float32)
