"""Console output for the tubegrab CLI.

Rich is imported only when something is printed, so ``--help``,
``--version`` and ``doctor`` keep working without it.  All output goes
to stderr; stdout stays free for the help and version text.
"""

from __future__ import annotations

import sys
from typing import Any

from tubegrab.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console() -> Any:
    """Return a new Rich console writing to stderr.

    Raises :class:`EnvironmentError` when Rich is not installed.
    """
    return _load_rich_console_class()(stderr=True)


class _ConsoleProxy:
    """``console.print`` for status lines, markup included.

    Without Rich the objects are printed as-is to stderr, markup tags
    and all.
    """

    def print(self, *objects: object) -> None:
        try:
            rich_console = get_rich_console()
        except EnvironmentError:
            print(*objects, file=sys.stderr)
        else:
            rich_console.print(*objects)


console = _ConsoleProxy()
