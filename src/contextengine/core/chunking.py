"""
Sliding-window document chunking.

Splits text into whitespace-delimited tokens and emits overlapping windows.
Tokens here are words, not model tokens; the count is an approximation.
"""

from dataclasses import replace
from typing import Optional

from contextengine.core.exceptions import ConfigurationError
from contextengine.core.types import ChunkingOptions, ChunkingOverrides, ChunkText

DEFAULT_CHUNK_SIZE = 200
DEFAULT_CHUNK_OVERLAP = 40

DEFAULT_CHUNKING_OPTIONS = ChunkingOptions(
    chunk_size=DEFAULT_CHUNK_SIZE,
    chunk_overlap=DEFAULT_CHUNK_OVERLAP,
)


def default_chunker(content: str, options: ChunkingOptions) -> list[ChunkText]:
    """
    Split content into overlapping windows of whitespace tokens.

    The window advances by `chunk_size - chunk_overlap` tokens, clamped to at
    least 1 so that an overlap >= size still terminates.

    Args:
        content: Document text to chunk
        options: Window size and overlap, in tokens

    Returns:
        Ordered list of ChunkText, empty if content has no tokens
    """
    words = content.split()
    chunks: list[ChunkText] = []

    if not words:
        return chunks

    stride = max(1, options.chunk_size - options.chunk_overlap)

    for index, cursor in enumerate(range(0, len(words), stride)):
        window = words[cursor : cursor + options.chunk_size]
        chunk_content = " ".join(window).strip()

        if not chunk_content:
            break

        chunks.append(
            ChunkText(
                index=index,
                content=chunk_content,
                token_count=len(window),
            )
        )

    return chunks


def resolve_chunking_options(
    overrides: Optional[ChunkingOverrides] = None,
    base: ChunkingOptions = DEFAULT_CHUNKING_OPTIONS,
) -> ChunkingOptions:
    """
    Merge partial overrides over a base set of chunking options.

    Keys that are missing or None keep the base value.

    Raises:
        ConfigurationError: If chunk_size <= 0 or chunk_overlap < 0
    """
    changes = {key: value for key, value in (overrides or {}).items() if value is not None}
    unknown = set(changes) - {"chunk_size", "chunk_overlap"}
    if unknown:
        raise ConfigurationError(f"Unknown chunking options: {sorted(unknown)}")

    options = replace(base, **changes)

    if options.chunk_size <= 0:
        raise ConfigurationError(f"chunk_size must be positive, got {options.chunk_size}")
    if options.chunk_overlap < 0:
        raise ConfigurationError(
            f"chunk_overlap must be non-negative, got {options.chunk_overlap}"
        )

    return options
