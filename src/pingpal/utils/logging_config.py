"""Application-wide logging configuration using rich handlers."""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(
    level: int | str = logging.WARNING,
    log_file: str | None = None,
    *,
    console: Console | None = None,
) -> None:
    """Configure standard logging with RichHandler and optional file output.

    Parameters
    ----------
    level:
        Minimum logging severity, as a number or a level name.
    log_file:
        Optional path to a log file. If provided, a ``RotatingFileHandler``
        writes plain text logs alongside the console output. If ``None``,
        the environment variable ``PINGPAL_LOG_FILE`` is consulted.
    console:
        Console the rich handler writes to. Defaults to stderr.
    """
    if log_file is None:
        log_file = os.getenv("PINGPAL_LOG_FILE")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console or Console(stderr=True),
            rich_tracebacks=True,
            markup=False,
        )
    ]

    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=5_000_000, backupCount=5)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        format="%(message)s",
        force=True,
    )


__all__ = ["setup_logging"]
