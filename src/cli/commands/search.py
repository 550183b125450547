"""
Search commands - semantic search, schema setup and index sync.

Usage:
    python -m src.cli.main setup-db
    python -m src.cli.main sync --no-images
    python -m src.cli.main search "portal gun inventor" --limit 3
"""

from __future__ import annotations

import json
from typing import Any

import typer
from rich.table import Table

from src.cli.runtime import console, err_console, run, setup
from src.common.storage import check_pool_health
from src.context import open_context
from src.exceptions import require_text
from src.search import EntityVariant, SearchResponse


def search_command(
    query: str | None = typer.Argument(None, help="Natural-language search text"),
    limit: int | None = typer.Option(None, "--limit", "-l", min=1, help="Maximum number of results"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Search characters and locations by meaning."""
    setup(verbose)
    response = run(_search_async(query, limit))
    if as_json:
        console.print_json(json.dumps(response.to_dict()))
        return
    _print_response(response)


async def _search_async(query: str | None, limit: int | None) -> SearchResponse:
    text = require_text(query, "query")
    async with open_context(database=True) as ctx:
        return await ctx.search.search(text, limit)


def _print_response(response: SearchResponse) -> None:
    if response.enhanced_query:
        console.print(f"[dim]Enhanced query:[/dim] {response.enhanced_query}")
    if not response.results:
        console.print("[yellow]No results.[/yellow] Has the index been synced?")
        return

    table = Table(title=f"Results for '{response.query}'")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Name", style="bold")
    table.add_column("Details")
    table.add_column("Distance", justify="right")
    for i, result in enumerate(response.results, start=1):
        entity = result.entity
        if entity.variant == EntityVariant.CHARACTER:
            details = f"{entity.status} {entity.species}, at {entity.location_name}"
        else:
            details = f"{entity.type} in {entity.dimension}"
        table.add_row(str(i), entity.variant.value, entity.name, details, f"{result.distance:.4f}")
    console.print(table)


def setup_db_command(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Create the pgvector extension, entity table and indexes."""
    setup(verbose)
    health = run(_setup_db_async())
    if not health["healthy"]:
        err_console.print("[red]Schema created but the health check failed.[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Datastore schema ready[/green] (pgvector {health['pgvector']})")
    console.print(
        f"[dim]Pool: {health['used']} used, {health['free']} free, max {health['max_size']}[/dim]"
    )


async def _setup_db_async() -> dict[str, Any]:
    async with open_context(database=True) as ctx:
        await ctx.index.ensure_schema()
        return await check_pool_health(ctx.pool)


def sync_command(
    characters: bool = typer.Option(True, "--characters/--no-characters", help="Sync characters"),
    locations: bool = typer.Option(True, "--locations/--no-locations", help="Sync locations"),
    images: bool | None = typer.Option(
        None,
        "--images/--no-images",
        help="Describe character images before embedding (default from LENS_SYNC_ANALYZE_IMAGES)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Copy the knowledge graph into the vector index."""
    setup(verbose)
    report, counts = run(_sync_async(characters, locations, images))

    table = Table(title="Sync report")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Characters stored", str(report.characters_stored))
    table.add_row("Locations stored", str(report.locations_stored))
    table.add_row("Stored without embedding", str(report.missing_embeddings))
    table.add_row("Failed", str(report.failed))
    for variant, numbers in counts.items():
        table.add_row(f"Indexed {variant}s", f"{numbers['embedded']}/{numbers['total']}")
    console.print(table)

    for failure in report.failures[:10]:
        console.print(f"[red]-[/red] {failure}")
    if report.failed:
        raise typer.Exit(1)


async def _sync_async(characters: bool, locations: bool, images: bool | None):
    async with open_context(database=True) as ctx:
        await ctx.index.ensure_schema()
        report = await ctx.sync(analyze_images=images).run(characters=characters, locations=locations)
        counts = await ctx.index.counts()
        return report, counts
