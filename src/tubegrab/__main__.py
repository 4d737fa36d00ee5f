"""Allow ``python -m tubegrab`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m tubegrab`` behaves identically to the ``tubegrab``
console script.
"""

from __future__ import annotations

from tubegrab.cli.app import cli

if __name__ == "__main__":
    cli()
