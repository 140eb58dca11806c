"""Unit tests for embedding.huggingface module."""

import asyncio
import json

import httpx
import numpy as np
import pytest
from pytest_httpx import HTTPXMock

from contextengine.core.exceptions import EmbeddingError
from contextengine.core.types import EmbeddingInput, EmbeddingProvider
from contextengine.embedding.huggingface import HuggingFaceEmbeddingProvider

MODEL_URL = (
    "https://api-inference.huggingface.co/pipeline/feature-extraction/"
    "sentence-transformers/all-MiniLM-L6-v2"
)


def _request(text: str = "test text") -> EmbeddingInput:
    return EmbeddingInput(text=text, metadata={}, position=0, source_id="s", document_id="d")


@pytest.mark.unit
class TestHuggingFaceEmbeddingProvider:
    """Tests for HuggingFaceEmbeddingProvider class."""

    def test_init_with_defaults(self):
        """Test initialization with default settings."""
        provider = HuggingFaceEmbeddingProvider()

        assert provider.model == "sentence-transformers/all-MiniLM-L6-v2"
        assert provider.dimensions == 384
        assert provider.timeout > 0
        assert provider.max_retries >= 1

    def test_init_with_custom_values(self):
        """Test initialization with custom values."""
        provider = HuggingFaceEmbeddingProvider(
            model="custom-model",
            api_key="custom-key",
            timeout=2.5,
            max_retries=5,
        )

        assert provider.model == "custom-model"
        assert provider.api_key == "custom-key"
        assert provider.timeout == 2.5
        assert provider.max_retries == 5

    def test_name_and_protocol(self):
        provider = HuggingFaceEmbeddingProvider(model="custom-model")

        assert provider.name == "huggingface:custom-model"
        assert isinstance(provider, EmbeddingProvider)

    @pytest.mark.asyncio
    async def test_embed_returns_normalized_vector(self, httpx_mock: HTTPXMock):
        """Test that a single text is embedded and normalized."""
        httpx_mock.add_response(url=MODEL_URL, json=[[3.0, 4.0] + [0.0] * 382])

        provider = HuggingFaceEmbeddingProvider(api_key="test-key")
        vector = await provider.embed(_request())

        assert isinstance(vector, list)
        assert len(vector) == 384
        assert np.isclose(np.linalg.norm(vector), 1.0, atol=1e-5)
        assert vector[0] == pytest.approx(0.6)

    @pytest.mark.asyncio
    async def test_embed_sends_text_and_auth(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=MODEL_URL, json=[[0.1] * 384])

        provider = HuggingFaceEmbeddingProvider(api_key="test-key")
        await provider.embed(_request("What is 5G NR?"))

        request = httpx_mock.get_requests()[0]
        assert request.headers["Authorization"] == "Bearer test-key"
        assert json.loads(request.content) == {"inputs": ["What is 5G NR?"]}

    @pytest.mark.asyncio
    async def test_embed_retry_on_429(self, httpx_mock: HTTPXMock):
        """Test retry logic on rate limit (429 error)."""
        httpx_mock.add_response(status_code=429, json={"error": "Rate limit exceeded"})
        httpx_mock.add_response(json=[[0.1] * 384])

        provider = HuggingFaceEmbeddingProvider(api_key="test-key", retry_delay=0.0)
        vector = await provider.embed(_request())

        assert len(httpx_mock.get_requests()) == 2
        assert len(vector) == 384

    @pytest.mark.asyncio
    async def test_embed_gives_up_after_max_retries(self, httpx_mock: HTTPXMock):
        for _ in range(2):
            httpx_mock.add_response(status_code=429, json={"error": "Rate limit exceeded"})

        provider = HuggingFaceEmbeddingProvider(api_key="test-key", max_retries=2, retry_delay=0.0)

        with pytest.raises(EmbeddingError, match="status 429"):
            await provider.embed(_request())

    @pytest.mark.asyncio
    async def test_embed_server_error(self, httpx_mock: HTTPXMock):
        """Test that non-429 errors are raised without retry."""
        httpx_mock.add_response(status_code=500, json={"error": "boom"})

        provider = HuggingFaceEmbeddingProvider(api_key="test-key")

        with pytest.raises(EmbeddingError, match="status 500") as exc_info:
            await provider.embed(_request())

        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)
        assert len(httpx_mock.get_requests()) == 1

    @pytest.mark.asyncio
    async def test_embed_timeout(self, httpx_mock: HTTPXMock):
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"))

        provider = HuggingFaceEmbeddingProvider(api_key="test-key", timeout=0.5)

        with pytest.raises(EmbeddingError, match="timed out after 0.5s"):
            await provider.embed(_request())

    @pytest.mark.asyncio
    async def test_embed_malformed_response(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(json={"error": "model loading"})

        provider = HuggingFaceEmbeddingProvider(api_key="test-key")

        with pytest.raises(EmbeddingError):
            await provider.embed(_request())

    @pytest.mark.asyncio
    async def test_embed_texts_batching(self, httpx_mock: HTTPXMock):
        """Test that texts are batched correctly."""
        httpx_mock.add_response(
            match_json={"inputs": ["text 1", "text 2"]},
            json=[[0.1] * 384, [0.2] * 384],
        )
        httpx_mock.add_response(match_json={"inputs": ["text 3"]}, json=[[0.3] * 384])

        provider = HuggingFaceEmbeddingProvider(api_key="test-key", batch_size=2)
        result = await provider.embed_texts(["text 1", "text 2", "text 3"])

        assert len(httpx_mock.get_requests()) == 2
        assert result.shape == (3, 384)
        assert result.dtype == np.float32

    @pytest.mark.asyncio
    async def test_embed_texts_empty_list(self):
        provider = HuggingFaceEmbeddingProvider(api_key="test-key")
        result = await provider.embed_texts([])

        assert result.shape == (0, 384)

    @pytest.mark.asyncio
    async def test_concurrent_embeds(self, httpx_mock: HTTPXMock):
        """Test that several embed calls can run at once."""
        for _ in range(3):
            httpx_mock.add_response(json=[[0.5] * 384])

        provider = HuggingFaceEmbeddingProvider(api_key="test-key")
        vectors = await asyncio.gather(*(provider.embed(_request(f"t{i}")) for i in range(3)))

        assert len(vectors) == 3
        assert len(httpx_mock.get_requests()) == 3
