"""Shared utilities."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbosity: int = 0, *, console: Console | None = None) -> None:
    """Route the standard logging module through a rich handler on stderr.

    Args:
        verbosity: ``-1`` for warnings only, ``0`` for info, ``1`` or more
            for debug.
        console: Optional console to log to (defaults to stderr).
    """
    if verbosity < 0:
        level = logging.WARNING
    elif verbosity == 0:
        level = logging.INFO
    else:
        level = logging.DEBUG

    root_logger = logging.getLogger()
    # Re-running main() in one process must not stack handlers.
    for handler in list(root_logger.handlers):
        if isinstance(handler, RichHandler):
            root_logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
