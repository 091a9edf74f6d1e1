"""API server command."""

import click

from ..config import get_settings
from .base import require_database


@click.command()
@click.option("--host", default=None, help="Host to bind to (default: LIFTBOOK_HOST)")
@click.option("--port", "-p", default=None, type=int, help="Port to bind to (default: LIFTBOOK_PORT)")
@click.option("--reload", is_flag=True, help="Restart on code changes")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None, reload: bool):
    """Start the liftbook API.

    Examples:

        liftbook serve

        liftbook serve --host 0.0.0.0 --port 3000

        liftbook serve --reload
    """
    require_database(ctx)

    import uvicorn

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    click.echo(click.style(f"liftbook API on http://{host}:{port}", fg="green"))
    click.echo(f"  OpenAPI docs: http://{host}:{port}/docs")

    # uvicorn needs an import string to reload; the factory builds the app in the worker
    uvicorn.run("liftbook.web:create_app", host=host, port=port, reload=reload, factory=True)
