#!/usr/bin/env python3
"""
Smoke test: retrieve from the index written by smoke_ingest.py.

Usage:
    python scripts/smoke_retrieve.py
    python scripts/smoke_retrieve.py --query "who mentors new hires" --top-k 3
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path to allow running as standalone script
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rich.console import Console

from contextengine.core.types import RetrievalScope, RetrieveInput
from contextengine.resources import get_engine

console = Console()


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Retrieve from the local index")
    parser.add_argument("--query", default="top developers", help="Query text")
    parser.add_argument("--top-k", type=int, default=5, help="Number of chunks")
    parser.add_argument("--org-id", default="demo-org", help="Organisation scope")
    parser.add_argument("--project-id", default="demo-project", help="Project scope")
    return parser.parse_args()


async def run(args) -> None:
    result = await get_engine().retrieve(
        RetrieveInput(
            query=args.query,
            top_k=args.top_k,
            scope=RetrievalScope(org_id=args.org_id, project_id=args.project_id),
            include_document=True,
        )
    )

    console.print("[green]Retrieve completed:[/green]")
    for chunk in result.chunks:
        console.print(
            f"score={chunk.score:.4f} doc={chunk.document_id} idx={chunk.index} "
            f'content="{chunk.content[:80]}..."'
        )
        if chunk.document_content:
            console.print(f'  doc-body (head): "{chunk.document_content[:100]}..."')


def main():
    args = parse_args()
    try:
        asyncio.run(run(args))
    except Exception as e:
        console.print(f"[red]Smoke retrieve failed: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
