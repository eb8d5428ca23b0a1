"""Logging setup for tradejournal.

Log records are rendered through rich so they share the CLI's console.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def setup_logging(level: str = "WARNING", console: Console | None = None) -> None:
    """Install a rich handler on the package logger.

    Args:
        level: Logging level name.
        console: Console to log to; defaults to stderr.
    """
    logger = logging.getLogger("tradejournal")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
