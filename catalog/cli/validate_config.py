"""Validate environment configuration and print a summary table."""

from rich.table import Table

from catalog.db import Database
from catalog.errors import CatalogError
from catalog.storage import build_issuer

from .shared import console, logger, settings_or_exit


def _mask(value: str | None) -> str:
    if not value:
        return "(unset)"
    return value[:4] + "..." if len(value) > 8 else "***"


def validate_config() -> None:
    """Load settings, build the storage issuer, ping the database, print a summary."""
    log = logger.bind(command="validate-config")
    log.info("validate_config.start")
    settings = settings_or_exit("validate-config")

    errors = []
    account = "(invalid)"
    try:
        account = build_issuer(settings).account_name
    except CatalogError as e:
        errors.append(f"Storage: {e}")

    database_url = "(invalid)"
    try:
        database = Database(settings.database_url)
    except CatalogError as e:
        errors.append(f"Database: {e}")
    else:
        database_url = database.engine.url.render_as_string(hide_password=True)
        try:
            if not database.check_connection():
                errors.append("Database: connection failed")
        finally:
            database.dispose()

    table = Table(title="Catalog config")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("DATABASE_URL", database_url)
    table.add_row("STORAGE_ACCOUNT", account)
    table.add_row("IMAGE_CONTAINER_NAME", settings.container_name)
    table.add_row("UPLOAD_EXPIRY_MINUTES", str(settings.upload_expiry_minutes))
    table.add_row("OPENAI_API_KEY", _mask(settings.openai_api_key))
    table.add_row("PREFILL_MODEL", settings.prefill_model)
    table.add_row("EMBEDDING_MODEL", settings.embedding_model)
    console.print(table)

    if errors:
        for msg in errors:
            console.print(f"[red]{msg}[/red]")
        log.error("validate_config.validation_failed", errors=errors)
        raise SystemExit(1)
    console.print("[green]Config valid.[/green]")
    log.info("validate_config.ok", account=account)
