"""Catalog commands."""

from pathlib import Path

import click

from ..data.catalog_loader import load_catalog_json
from ..db import seed_catalog
from .base import async_command, echo_status, require_database


@click.group()
@click.pass_context
def catalog(ctx):
    """Manage the exercise catalog."""
    ctx.obj = require_database(ctx)


@catalog.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
@async_command
async def load(ctx, path: Path):
    """Load muscles, equipment and exercises from a JSON file.

    Entries already in the catalog are left as they are.
    """
    try:
        entries = load_catalog_json(path)
    except ValueError as e:
        echo_status("error", str(e))
        ctx.exit(1)

    count = await seed_catalog(ctx.obj, entries)
    echo_status("ok", f"Loaded {count} new exercises from {path.name}")
