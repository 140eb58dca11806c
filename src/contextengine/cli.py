"""
Command-line interface for the context engine.

Commands:
    chunk     - Preview how a file would be chunked (offline)
    ingest    - Chunk, embed and store a file in the local index
    retrieve  - Query the local index
    version   - Show version information
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="context-engine",
    help="Chunk, embed and retrieve text with a pluggable retrieval engine",
    add_completion=False,
)
console = Console()


@app.callback()
def main() -> None:
    """Configure logging from settings."""
    from contextengine.config import settings

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _read_file(path: Path) -> str:
    if not path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def _parse_metadata(pairs: list[str]) -> dict[str, str]:
    metadata: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            console.print(f"[red]Invalid metadata '{pair}', expected key=value[/red]")
            raise typer.Exit(1)
        metadata[key.strip()] = value.strip()
    return metadata


@app.command()
def chunk(
    path: Path = typer.Argument(..., help="Text file to chunk"),
    chunk_size: Optional[int] = typer.Option(None, help="Tokens per chunk"),
    chunk_overlap: Optional[int] = typer.Option(None, help="Tokens shared between chunks"),
) -> None:
    """Preview how a file would be chunked."""
    from contextengine.config import settings
    from contextengine.core.chunking import default_chunker, resolve_chunking_options
    from contextengine.core.exceptions import ConfigurationError

    text = _read_file(path)
    try:
        options = resolve_chunking_options(
            {
                "chunk_size": chunk_size if chunk_size is not None else settings.chunk_size,
                "chunk_overlap": chunk_overlap if chunk_overlap is not None else settings.chunk_overlap,
            }
        )
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    chunks = default_chunker(text, options)

    table = Table(title=f"{path.name}: {len(chunks)} chunks")
    table.add_column("Index", style="cyan", justify="right")
    table.add_column("Tokens", style="green", justify="right")
    table.add_column("Preview")

    for c in chunks:
        preview = c.content if len(c.content) <= 80 else f"{c.content[:77]}..."
        table.add_row(str(c.index), str(c.token_count), preview)

    console.print(table)


@app.command()
def ingest(
    path: Path = typer.Argument(..., help="Text file to ingest"),
    source_id: str = typer.Option(..., "--source-id", "-s", help="Logical source label"),
    meta: list[str] = typer.Option([], "--meta", "-m", help="Metadata as key=value (repeatable)"),
    content_url: Optional[str] = typer.Option(None, help="Location of the original document"),
    chunk_size: Optional[int] = typer.Option(None, help="Override tokens per chunk"),
    chunk_overlap: Optional[int] = typer.Option(None, help="Override tokens shared between chunks"),
) -> None:
    """Chunk, embed and store a file in the local index."""
    from contextengine.config import settings
    from contextengine.core.exceptions import ContextEngineError
    from contextengine.core.types import IngestInput
    from contextengine.resources import get_engine, save_vector_store

    text = _read_file(path)
    request = IngestInput(
        source_id=source_id,
        content=text,
        metadata=_parse_metadata(meta),
        chunking={"chunk_size": chunk_size, "chunk_overlap": chunk_overlap},
        content_url=content_url,
    )

    try:
        with console.status(f"[bold green]Ingesting {path.name}..."):
            result = asyncio.run(get_engine().ingest(request))
            save_vector_store()
    except ContextEngineError as e:
        console.print(f"[red]Ingest failed: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Ingested {path.name} as document {result.document_id}[/green]")
    console.print(f"  Chunks: {result.chunk_count}")
    console.print(f"  Model: {result.embedding_model}")
    console.print(
        f"  Timings: total {result.durations.total_ms:.0f}ms "
        f"(chunking {result.durations.chunking_ms:.0f}ms, "
        f"embedding {result.durations.embedding_ms:.0f}ms, "
        f"storage {result.durations.storage_ms:.0f}ms)"
    )
    console.print(f"  Index: {settings.index_path}")


@app.command()
def retrieve(
    query: str = typer.Argument(..., help="Query text"),
    top_k: Optional[int] = typer.Option(None, "--top-k", "-k", help="Number of chunks to return"),
    source_id: Optional[str] = typer.Option(None, help="Only search this source"),
    org_id: Optional[str] = typer.Option(None, help="Only search this organisation"),
    project_id: Optional[str] = typer.Option(None, help="Only search this project"),
    include_document: bool = typer.Option(False, help="Return the full document body"),
) -> None:
    """Query the local index."""
    from contextengine.config import settings
    from contextengine.core.exceptions import ContextEngineError
    from contextengine.core.types import RetrievalScope, RetrieveInput
    from contextengine.resources import get_engine

    request = RetrieveInput(
        query=query,
        top_k=top_k if top_k is not None else settings.retrieval_top_k,
        scope=RetrievalScope(source_id=source_id, org_id=org_id, project_id=project_id),
        include_document=include_document,
    )

    try:
        with console.status("[bold green]Retrieving..."):
            result = asyncio.run(get_engine().retrieve(request))
    except ContextEngineError as e:
        console.print(f"[red]Retrieve failed: {e}[/red]")
        raise typer.Exit(1)

    if not result.chunks:
        console.print("[yellow]No matching chunks.[/yellow]")
        return

    table = Table(title=f"Results for: {query}")
    table.add_column("Score", style="cyan")
    table.add_column("Source", style="green")
    table.add_column("Index", justify="right")
    table.add_column("Content")

    for c in result.chunks:
        preview = c.content if len(c.content) <= 80 else f"{c.content[:77]}..."
        table.add_row(f"{c.score:.4f}", c.source_id, str(c.index), preview)

    console.print(table)
    console.print(
        f"[dim]{result.embedding_model} | total {result.durations.total_ms:.0f}ms "
        f"(embedding {result.durations.embedding_ms:.0f}ms, "
        f"retrieval {result.durations.retrieval_ms:.0f}ms)[/dim]"
    )

    if include_document:
        for c in result.chunks:
            if c.document_content:
                head = c.document_content[:100]
                console.print(f"[dim]{c.document_id}: {head}...[/dim]")


@app.command()
def version() -> None:
    """Show version information."""
    from contextengine import __version__

    console.print(f"context-engine v{__version__}")


if __name__ == "__main__":
    app()
