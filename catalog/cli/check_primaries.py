"""Report items that hold more than one primary image."""

from rich.table import Table

from catalog.db import Database
from catalog.db.repositories import ImageGallery

from .shared import console, logger, settings_or_exit


def check_primaries() -> None:
    """List live items with several primary images; exit 1 when any are found."""
    settings = settings_or_exit("check-primaries")
    database = Database(settings.database_url)
    try:
        offenders = ImageGallery(database).find_multiple_primaries()
    finally:
        database.dispose()

    if not offenders:
        console.print("[green]Every item has at most one primary image.[/green]")
        logger.info("check_primaries.ok")
        return

    table = Table(title="Items with multiple primary images")
    table.add_column("Item ID", style="cyan", justify="right")
    table.add_column("Primary images", justify="right")
    for row in offenders:
        table.add_row(str(row.item_id), str(row.primary_count))
    console.print(table)
    console.print("[yellow]Fix with POST /api/items/{itemId}/images/{imageId}/set-primary.[/yellow]")
    logger.warning("check_primaries.found", items=len(offenders))
    raise SystemExit(1)
