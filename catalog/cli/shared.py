"""Shared CLI helpers: console, logger, settings loading."""

import typer
from rich.console import Console

from catalog.config import Settings, load_settings
from catalog.errors import ConfigurationError
from catalog.utils.logger import get_logger

console = Console()
logger = get_logger("catalog.cli")


def settings_or_exit(command: str) -> Settings:
    """Load settings from the environment; print the problem and exit 1 when incomplete."""
    try:
        return load_settings()
    except ConfigurationError as e:
        console.print(f"[red]Config error: {e}[/red]")
        logger.error("cli.config_error", command=command, error=str(e))
        raise typer.Exit(1) from e
