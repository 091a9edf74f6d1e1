"""CLI entry point for liftbook."""

import click

from . import __version__
from .commands import catalog, init, programs, progress, serve
from .config import get_settings
from .log import setup_logger


@click.group()
@click.version_option(version=__version__, prog_name="liftbook")
def main():
    """liftbook: training programs, workouts, exercises and sets.

    Example usage:

        # Create the database and built-in catalog
        liftbook init

        # Run the API
        liftbook serve

        # Inspect programs
        liftbook programs list
        liftbook programs show 1

        # Progress for a user
        liftbook progress summary 1
    """
    settings = get_settings()
    setup_logger(level=settings.log_level, log_file=settings.log_file)


# Register commands
main.add_command(init)
main.add_command(serve)
main.add_command(programs)
main.add_command(catalog)
main.add_command(progress)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
