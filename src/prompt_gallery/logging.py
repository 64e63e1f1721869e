"""Logging setup for the prompt-gallery CLI.

Everything logs through loguru's shared ``logger``; this module only decides
where records go. The console gets either colored lines or JSON lines, and a
log file can be added for long batch runs over many archives.

Example:
    from prompt_gallery.logging import setup_logging

    setup_logging(level="DEBUG", log_file="gallery.log")

"""

import sys
from pathlib import Path
from typing import Any

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Files keep the full date and the function name; no color markup
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"

FILE_ROTATION = "10 MB"
FILE_RETENTION = "7 days"


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: str | Path | None = None,
) -> Any:
    """Replace loguru's default handler with the gallery's handlers.

    Args:
        level: Minimum level for every handler (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: Write JSON lines to stderr, and to the log file if one is set.
        log_file: Also append to this file, rotated at 10 MB and gzipped when closed.

    Returns:
        The loguru logger.

    """
    logger.remove()

    if json_output:
        logger.add(sys.stderr, level=level, format="{message}", serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            level=level,
            format="{message}" if json_output else FILE_FORMAT,
            serialize=json_output,
            rotation=FILE_ROTATION,
            retention=FILE_RETENTION,
            compression="gz",
            encoding="utf-8",
        )
        logger.debug("Logging to {}", path)

    return logger
