"""Shared CLI helpers."""

import asyncio
from functools import wraps

import click

from ..config import get_settings
from ..db.engine import Database
from ..errors import LiftbookError

_STATUS = {
    "ok": ("[OK] ", "green"),
    "error": ("[ERROR] ", "red"),
    "info": ("[INFO] ", "blue"),
}


def echo_status(kind: str, message: str) -> None:
    """Print a message with a colored ``[OK]``/``[ERROR]``/``[INFO]`` tag."""
    tag, color = _STATUS[kind]
    click.echo(click.style(tag, fg=color) + message)


def async_command(f):
    """Run an async click command.

    A ``LiftbookError`` escaping the command is printed and exits with status 1.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return asyncio.run(f(*args, **kwargs))
        except LiftbookError as e:
            echo_status("error", str(e))
            click.get_current_context().exit(1)

    return wrapper


def open_database() -> Database:
    """Build the database handle from settings."""
    return Database.from_settings(get_settings())


def require_database(ctx: click.Context) -> Database:
    """Return the database for a command group, exiting if it was never initialized."""
    db = open_database()
    if not db.exists:
        click.echo(
            click.style("Error: ", fg="red")
            + "Database not initialized. Run 'liftbook init' first."
        )
        ctx.exit(1)
    return db


def format_table(headers: list[str], rows: list[list], padding: int = 2) -> str:
    """Lay out rows under their headers in left-aligned columns."""
    if not rows:
        return ""

    table = [list(headers)] + [[str(cell) for cell in row] for row in rows]
    widths = [max(len(cell) for cell in column) for column in zip(*table)]
    gap = " " * padding

    def line(cells: list[str]) -> str:
        return gap.join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    lines = [line(table[0]), line(["-" * width for width in widths])]
    lines.extend(line(row) for row in table[1:])
    return "\n".join(lines)
