"""
Content commands - descriptions, insights, compatibility and evaluation.

Usage:
    python -m src.cli.main describe character 1
    python -m src.cli.main insights 2
    python -m src.cli.main compatibility 1 2 3
    python -m src.cli.main evaluate location 3 --description "The Citadel..."
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

import typer
from rich.panel import Panel
from rich.table import Table

from src.cli.runtime import console, run, setup
from src.content import DescriptionResult
from src.context import open_context
from src.exceptions import MissingRequiredInput, require_id
from src.extraction import CompatibilityRecord, EvaluationRecord, InsightList


class Subject(str, Enum):
    CHARACTER = "character"
    LOCATION = "location"


def describe_command(
    subject: Subject = typer.Argument(..., help="What to describe"),
    entity_id: str | None = typer.Argument(None, help="Character or location id"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Generate a description of a character or location."""
    setup(verbose)
    result = run(_describe_async(subject, entity_id))
    title = subject.value.capitalize() if result.generated else f"{subject.value.capitalize()} (fallback)"
    console.print(Panel(result.description, title=title))


async def _describe_async(subject: Subject, entity_id: str | None) -> DescriptionResult:
    identifier = require_id(entity_id, f"{subject.value}_id")
    async with open_context() as ctx:
        if subject == Subject.CHARACTER:
            return await ctx.descriptions.describe_character(identifier)
        return await ctx.descriptions.describe_location(identifier)


def insights_command(
    character_id: str | None = typer.Argument(None, help="Character id"),
    as_json: bool = typer.Option(False, "--json", help="Print the insights as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Generate five insights about a character."""
    setup(verbose)
    result = run(_insights_async(character_id))
    if as_json:
        console.print_json(json.dumps(result.to_json()))
        return
    for i, insight in enumerate(result.insights, start=1):
        console.print(f"[bold]{i}.[/bold] {insight}")


async def _insights_async(character_id: str | None) -> InsightList:
    identifier = require_id(character_id, "character_id")
    async with open_context() as ctx:
        return await ctx.insights.generate(identifier)


def compatibility_command(
    character1_id: str | None = typer.Argument(None, help="First character id"),
    character2_id: str | None = typer.Argument(None, help="Second character id"),
    location_id: str | None = typer.Argument(None, help="Location id"),
    as_json: bool = typer.Option(False, "--json", help="Print the analysis as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Analyze how two characters would get along at a location."""
    setup(verbose)
    record = run(_compatibility_async(character1_id, character2_id, location_id))
    if as_json:
        console.print_json(json.dumps(record.to_json()))
        return
    for title, items in (
        ("Team work", record.team_work),
        ("Conflicts", record.conflicts),
        ("Breaks first", record.breaks_first),
    ):
        body = "\n".join(f"- {item}" for item in items) or "[dim]None[/dim]"
        console.print(Panel(body, title=title))


async def _compatibility_async(
    character1_id: str | None,
    character2_id: str | None,
    location_id: str | None,
) -> CompatibilityRecord:
    first = require_id(character1_id, "character1_id")
    second = require_id(character2_id, "character2_id")
    location = require_id(location_id, "location_id")
    async with open_context() as ctx:
        return await ctx.compatibility.analyze(first, second, location)


def evaluate_command(
    subject: Subject = typer.Argument(..., help="What the description is about"),
    entity_id: str | None = typer.Argument(None, help="Character or location id"),
    description: str | None = typer.Option(None, "--description", "-d", help="Description text to evaluate"),
    description_file: Path | None = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="Read the description from a file"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the evaluation as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    Evaluate a description against the record it describes.

    Without --description or --file a fresh description is generated first.
    """
    setup(verbose)
    if description_file is not None:
        description = description_file.read_text(encoding="utf-8")
    text, record = run(_evaluate_async(subject, entity_id, description))

    if as_json:
        console.print_json(json.dumps({"description": text, "evaluation": record.to_json()}))
        return

    console.print(Panel(text, title="Description"))
    table = Table(title=f"Evaluation (score {record.auto_score:g}/10)")
    table.add_column("Check")
    table.add_column("Result", justify="center")
    for name, value in {**record.checks, **record.quality_checks}.items():
        table.add_row(name, "[green]yes[/green]" if value else "[red]no[/red]")
    console.print(table)
    console.print(record.explanation)


async def _evaluate_async(
    subject: Subject,
    entity_id: str | None,
    description: str | None,
) -> tuple[str, EvaluationRecord]:
    identifier = require_id(entity_id, f"{subject.value}_id")
    if description is not None and not description.strip():
        raise MissingRequiredInput("description", "description must be a non-empty string")

    async with open_context() as ctx:
        if description is None:
            if subject == Subject.CHARACTER:
                generated = await ctx.descriptions.describe_character(identifier)
            else:
                generated = await ctx.descriptions.describe_location(identifier)
            description = generated.description

        if subject == Subject.CHARACTER:
            record = await ctx.evaluation.evaluate_character(identifier, description)
        else:
            record = await ctx.evaluation.evaluate_location(identifier, description)
        return description, record
