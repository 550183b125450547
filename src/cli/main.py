"""
Multiverse Lens CLI

Entry point for the search, extraction and content commands.

Usage:
    python -m src.cli.main search "scientist with a portal gun"
    python -m src.cli.main --help
"""

import typer

from src.cli.commands.content import compatibility_command, describe_command, evaluate_command, insights_command
from src.cli.commands.extract import extract_command
from src.cli.commands.search import search_command, setup_db_command, sync_command

app = typer.Typer(
    name="lens",
    help="Multiverse Lens - semantic search and generated content over the Rick and Morty universe",
    no_args_is_help=True,
)

# Register commands
app.command(name="search", help="Semantic search over characters and locations")(search_command)
app.command(name="extract", help="Parse generated text into a structured record")(extract_command)
app.command(name="describe", help="Describe a character or location")(describe_command)
app.command(name="insights", help="Generate insights about a character")(insights_command)
app.command(name="compatibility", help="Analyze two characters at a location")(compatibility_command)
app.command(name="evaluate", help="Evaluate a description")(evaluate_command)
app.command(name="setup-db", help="Create the vector datastore schema")(setup_db_command)
app.command(name="sync", help="Sync the knowledge graph into the vector index")(sync_command)


@app.command()
def version() -> None:
    """Show version information."""
    from src import __version__

    typer.echo(f"multiverse-lens version {__version__}")


if __name__ == "__main__":
    app()
