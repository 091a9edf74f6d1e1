"""Initialize database command."""

import click

from ..config import get_settings
from ..db import init_db, seed_catalog
from .base import async_command, echo_status, open_database


@click.command()
@async_command
async def init():
    """Initialize the liftbook database.

    Creates the data directory, the schema and the built-in exercise,
    equipment and muscle catalogs. Safe to run again.
    """
    settings = get_settings()
    echo_status("info", f"Using database {settings.db_path}")

    db = open_database()
    await init_db(db)
    echo_status("ok", "Schema ready")

    count = await seed_catalog(db)
    echo_status("ok", f"Exercise catalog populated ({count} new exercises)")

    click.echo()
    click.echo("Next steps:")
    click.echo("  liftbook catalog load <catalog.json>   # optional, larger catalog")
    click.echo("  liftbook serve                          # start the API")
