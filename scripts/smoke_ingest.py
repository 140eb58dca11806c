#!/usr/bin/env python3
"""
Smoke test: ingest a small document through the settings-wired engine.

Requires HF_API_KEY (or a reachable EMBEDDING_BASE_URL). Writes to INDEX_PATH.

Usage:
    python scripts/smoke_ingest.py
    python scripts/smoke_ingest.py --source-id demo --org-id demo-org --project-id demo-project
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path to allow running as standalone script
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rich.console import Console

from contextengine.core.types import IngestInput
from contextengine.resources import get_engine, save_vector_store

console = Console()

SAMPLE_DOCUMENT = """
Our engineering team is led by senior developers with deep experience in
distributed systems. The top developers on the platform team maintain the
ingestion pipeline, the vector store and the public API. New hires pair with
a mentor for their first month and ship a small change in their first week.
"""


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Ingest a sample document")
    parser.add_argument("--source-id", default="smoke-test", help="Source label")
    parser.add_argument("--org-id", default="demo-org", help="Organisation metadata")
    parser.add_argument("--project-id", default="demo-project", help="Project metadata")
    return parser.parse_args()


async def run(args) -> None:
    result = await get_engine().ingest(
        IngestInput(
            source_id=args.source_id,
            content=SAMPLE_DOCUMENT,
            metadata={"org_id": args.org_id, "project_id": args.project_id, "tags": ["smoke"]},
        )
    )
    save_vector_store()

    console.print("[green]Ingest completed:[/green]")
    console.print(f"  documentId={result.document_id}")
    console.print(f"  chunks={result.chunk_count} model={result.embedding_model}")
    console.print(f"  total={result.durations.total_ms:.0f}ms")


def main():
    args = parse_args()
    try:
        asyncio.run(run(args))
    except Exception as e:
        console.print(f"[red]Smoke ingest failed: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
