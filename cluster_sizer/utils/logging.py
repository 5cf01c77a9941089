"""Logging configuration and setup utilities.

Modules log through ``logging.getLogger(__name__)``; the CLI and the MCP server
call :func:`setup_logging` once to route records through rich.
"""
import logging
from typing import Optional
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "cluster_sizer"


def setup_logging(
    level: Union[int, str] = logging.WARNING, console: Optional[Console] = None
) -> logging.Logger:
    """Attaches a RichHandler to the package logger, replacing any earlier one."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
