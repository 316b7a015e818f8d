"""Serve mode: run the HTTP API with uvicorn."""

import sys
from typing import Optional

import typer
import uvicorn

from catalog.api.server import create_app
from catalog.db import Database

from .shared import console, logger, settings_or_exit


def serve(
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (defaults to API_PORT or 8000)"),
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Bind host"),
    create_tables: bool = typer.Option(True, "--create-tables/--no-create-tables", help="Create missing tables first"),
) -> None:
    """Start the catalog API."""
    settings = settings_or_exit("serve")
    port = port or settings.api_port
    log = logger.bind(command="serve", port=port)

    database = Database(settings.database_url)
    if create_tables:
        database.create_all()
        log.info("serve.tables_ready")
    if not settings.prefill_enabled:
        console.print("[yellow]OPENAI_API_KEY not set; /prefill will answer 500.[/yellow]")
        log.warning("serve.prefill_disabled")

    app = create_app(settings=settings, database=database)
    console.print(f"[green]Starting catalog API on http://{host}:{port}[/green]")
    console.print("[dim]Endpoints: /api/items..., GET /health[/dim]")
    try:
        uvicorn.run(app, host=host, port=port, log_level="info", timeout_graceful_shutdown=15)
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
    finally:
        database.dispose()
