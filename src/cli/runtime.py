"""
CLI Runtime

Shared setup for commands: logging, telemetry and the mapping from project
errors to process exit codes.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer
from rich.console import Console

from src.common.logging import configure_sanitized_logging
from src.common.telemetry import init_telemetry, shutdown_telemetry
from src.exceptions import LensError, MissingRequiredInput

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

EXIT_FAILURE = 1
EXIT_USAGE = 2

T = TypeVar("T")


def setup(verbose: bool = False) -> None:
    """Configure logging and telemetry for a command invocation."""
    configure_sanitized_logging(level=logging.DEBUG if verbose else logging.WARNING)
    init_telemetry(service_name="multiverse-lens-cli")


def run(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run a command coroutine, translating project errors into exit codes.

    MissingRequiredInput exits with 2; every other LensError exits with 1.
    """
    try:
        return asyncio.run(coro)
    except MissingRequiredInput as e:
        err_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(EXIT_USAGE) from e
    except LensError as e:
        logger.debug(f"Command failed: {e!r}")
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_FAILURE) from e
    finally:
        shutdown_telemetry()
