"""CLI commands: serve, init-db, validate-config, check-primaries."""

from typing import Optional

import typer
from typer import Typer

from catalog.cli import check_primaries, init_db, serve, validate_config as validate_config_module
from catalog.utils.logger import configure_logging

app = Typer(help="Inventory item catalog")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Overrides LOG_LEVEL (e.g. DEBUG)"),
) -> None:
    if log_level:
        configure_logging(log_level, force=True)


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(serve.serve)
    app.command(name="init-db")(init_db.init_db)
    app.command(name="validate-config")(validate_config_module.validate_config)
    app.command(name="check-primaries")(check_primaries.check_primaries)


register_commands()
