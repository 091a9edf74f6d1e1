"""Logging setup: loguru to stderr, plus an optional rotating file."""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> <level>{level: <7}</level> "
    "<cyan>{name}</cyan> {message}"
)
# Bound context (program_id, user_id, ...) lands in {extra}
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} {level: <7} {name}:{line} {message} {extra}"


def setup_logger(level: str = "INFO", log_file: str | Path | None = None) -> None:
    """Replace loguru's default handler with liftbook's sinks.

    Called once per process, by ``create_app`` or the CLI group.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level=level,
            format=FILE_FORMAT,
            rotation="10 MB",
            retention="7 days",
            compression="zip",
        )
