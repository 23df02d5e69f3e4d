"""Package-wide logging configuration.

Installs a NullHandler on the package logger so importing the library never
emits "no handler" warnings, and exposes a helper the CLI uses to route
records through Rich.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER_NAME = "license_resolver"

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def configure_logging(
    level: Union[int, str] = logging.WARNING,
    console: Optional[Console] = None,
) -> logging.Logger:
    """Attach a single RichHandler to the package logger.

    Calling this more than once replaces the previously installed handler
    instead of stacking another one.

    Args:
        level: Logging level or level name.
        console: Console to render records on. Defaults to stderr.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console if console is not None else Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    return logger
