"""
Configuration management using Pydantic Settings.

All configuration is loaded from environment variables with sensible defaults.
Use a .env file for local development. Only the resources layer and the CLI
read these settings; the core engine is configured explicitly.

Environment Variables:
    HF_API_KEY: HuggingFace API key (optional, for the embeddings API)
    EMBEDDING_MODEL: Sentence transformer model for embeddings
    EMBEDDING_TIMEOUT: Timeout in seconds for a single embedding request
    CHUNK_SIZE: Token size for document chunks
    CHUNK_OVERLAP: Overlap between chunks
    RETRIEVAL_TOP_K: Default number of chunks to retrieve
    INDEX_PATH: Path to the FAISS index file
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Embedding Configuration
    # ==========================================================================
    hf_api_key: Optional[SecretStr] = Field(
        default=None,
        description="HuggingFace API key for the feature-extraction endpoint",
    )
    embedding_model: str = Field(
        default="sentence-transformers/all-MiniLM-L6-v2",
        description="Sentence transformer model for document/query embeddings",
    )
    embedding_dimension: int = Field(
        default=384,
        ge=1,
        description="Dimension of embedding vectors (must match model)",
    )
    embedding_base_url: str = Field(
        default="https://api-inference.huggingface.co/pipeline/feature-extraction",
        description="Base URL of the feature-extraction endpoint",
    )
    embedding_timeout: float = Field(
        default=15.0,
        gt=0.0,
        description="Timeout in seconds for a single embedding request",
    )
    embedding_max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per embedding request when rate limited",
    )

    # ==========================================================================
    # Chunking Configuration
    # ==========================================================================
    chunk_size: int = Field(
        default=200,
        ge=1,
        description="Maximum whitespace tokens per chunk",
    )
    chunk_overlap: int = Field(
        default=40,
        ge=0,
        description="Tokens shared between consecutive chunks",
    )

    # ==========================================================================
    # Retrieval Configuration
    # ==========================================================================
    retrieval_top_k: int = Field(
        default=8,
        ge=1,
        le=100,
        description="Number of chunks to retrieve",
    )
    index_path: Path = Field(
        default=Path("data/index/context.index"),
        description="Path to FAISS index file (chunk records sit beside it as .json)",
    )

    # ==========================================================================
    # Observability Configuration
    # ==========================================================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================
    @field_validator("chunk_overlap")
    @classmethod
    def validate_chunk_overlap(cls, v: int, info) -> int:
        """Ensure overlap is less than chunk size."""
        chunk_size = info.data.get("chunk_size", 200)
        if v >= chunk_size:
            raise ValueError(f"chunk_overlap ({v}) must be less than chunk_size ({chunk_size})")
        return v

    @field_validator("index_path")
    @classmethod
    def resolve_path(cls, v: Path) -> Path:
        """Resolve paths to absolute paths."""
        return v.resolve()

    # ==========================================================================
    # Computed Properties
    # ==========================================================================
    @property
    def hf_api_key_value(self) -> Optional[str]:
        """Get the actual API key value (use sparingly)."""
        if self.hf_api_key:
            return self.hf_api_key.get_secret_value()
        return None


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Call `get_settings.cache_clear()` to reload settings.
    """
    return Settings()


# Convenience alias
settings = get_settings()
