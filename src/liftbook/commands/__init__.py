"""CLI commands for liftbook."""

from .catalog import catalog
from .init import init
from .programs import programs
from .progress import progress
from .serve import serve

__all__ = [
    "catalog",
    "init",
    "programs",
    "progress",
    "serve",
]
