"""Create missing catalog tables in DATABASE_URL."""

from catalog.db import Database

from .shared import console, logger, settings_or_exit


def init_db() -> None:
    """Create inventory_items, item_images and item_embeddings if they do not exist."""
    settings = settings_or_exit("init-db")
    database = Database(settings.database_url)
    try:
        database.create_all()
    finally:
        database.dispose()
    console.print("[green]Tables ready.[/green]")
    logger.info("init_db.ok")
