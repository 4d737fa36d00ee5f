"""Logging setup for the command-line host.

Library modules only create ``logging.getLogger(__name__)`` loggers; this
module is the single place where handlers and levels are attached.  Rich
renders the records when it is installed, a plain stderr stream handler
otherwise.
"""

from __future__ import annotations

import logging

LOGGER_NAME: str = "tubegrab"

_LEVELS: dict[int, int] = {
    0: logging.WARNING,
    1: logging.INFO,
}


def level_for_verbosity(verbosity: int) -> int:
    """Map a ``-v`` count to a logging level (2 or more means DEBUG)."""
    return _LEVELS.get(max(0, verbosity), logging.DEBUG)


def configure_logging(verbosity: int = 0) -> logging.Logger:
    """Attach one handler to the ``tubegrab`` logger and set its level.

    Calling it again replaces the previous handler instead of stacking a
    second one.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    logger.addHandler(_build_handler())
    logger.setLevel(level_for_verbosity(verbosity))
    logger.propagate = False
    return logger


def _build_handler() -> logging.Handler:
    try:
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        return handler

    from tubegrab.cli.console import get_rich_console

    handler = RichHandler(
        console=get_rich_console(),
        rich_tracebacks=True,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    return handler
