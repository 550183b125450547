"""
Extract command - run the structured extractor over text from a file or stdin.

Usage:
    python -m src.cli.main extract compatibility response.txt
    cat response.txt | python -m src.cli.main extract evaluation --location
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer

from src.cli.runtime import console, setup
from src.extraction import CHARACTER_EVALUATION, LOCATION_EVALUATION, DocumentKind, StructuredExtractor


def extract_command(
    kind: DocumentKind = typer.Argument(..., help="Document kind to extract"),
    source: Path | None = typer.Argument(
        None, exists=True, dir_okay=False, help="File holding the generated text (stdin if omitted)"
    ),
    location: bool = typer.Option(
        False, "--location", help="Use the location evaluation checks instead of the character ones"
    ),
    show_tier: bool = typer.Option(False, "--tier", help="Report which parsing strategy succeeded"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Parse free-form generated text into a structured record. Never fails on malformed input."""
    setup(verbose)
    raw_text = source.read_text(encoding="utf-8") if source is not None else sys.stdin.read()

    extractor = StructuredExtractor()
    extraction = extractor.extract_with_tier(
        kind,
        raw_text,
        evaluation=LOCATION_EVALUATION if location else CHARACTER_EVALUATION,
    )
    if show_tier:
        console.print(f"[dim]Strategy:[/dim] {extraction.tier}")
    console.print_json(json.dumps(extraction.record.to_json()))
