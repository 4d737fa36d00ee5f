"""``tubegrab doctor``: can this machine run a download?

Each check returns a ``(component, value, status)`` row.  A ``FAIL``
row makes the command exit non-zero; ``WARN`` rows (missing ffmpeg, an
unwritable output directory) only limit what can be downloaded.  Rows
are rendered as a Rich table, or as plain text on stderr when Rich is
not installed.
"""

from __future__ import annotations

import os
import platform
import sys
from collections.abc import Callable
from pathlib import Path

from tubegrab.cli import exit_codes
from tubegrab.cli.console import console
from tubegrab.config import Settings
from tubegrab.infra.ffmpeg_detector import FfmpegStatus, detect_ffmpeg
from tubegrab.version import __version__

Check = tuple[str, str, str]

_OK = "[green]OK[/green]"
_OS_NAMES: dict[str, str] = {"Darwin": "macOS"}


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

def _tubegrab_version_check() -> Check:
    return "tubegrab", __version__, _OK


def _python_version_check() -> Check:
    supported = sys.version_info[:2] >= (3, 10)
    return (
        "Python",
        platform.python_version(),
        _OK if supported else "[red]FAIL (>=3.10 required)[/red]",
    )


def _ytdlp_version_check() -> Check:
    """yt-dlp is required for every download, so its absence is a failure."""
    try:
        from yt_dlp.version import __version__ as ytdlp_version
    except ImportError:
        ytdlp_version = None

    if ytdlp_version is not None:
        return "yt-dlp", ytdlp_version, _OK
    try:
        import yt_dlp  # noqa: F401
    except ImportError:
        return "yt-dlp", "NOT INSTALLED", "[red]FAIL[/red]"
    return "yt-dlp", "unknown", _OK


def _ffmpeg_check(status_obj: FfmpegStatus) -> Check:
    """Only ``audio`` and ``merge`` jobs need ffmpeg, hence WARN when missing."""
    if not status_obj.found:
        return "ffmpeg", status_obj.version_hint, "[yellow]WARN[/yellow]"
    return "ffmpeg", str(status_obj.path) if status_obj.path else "found", _OK


def _output_dir_check(directory: Path) -> Check:
    target = directory.expanduser()
    # A missing directory is created on first export; its nearest
    # existing ancestor must be writable.
    existing = target
    while not existing.exists() and existing != existing.parent:
        existing = existing.parent
    writable = os.access(existing, os.W_OK)
    return "Output dir", str(target), _OK if writable else "[yellow]WARN (not writable)[/yellow]"


def _os_check() -> Check:
    system = platform.system()
    value = f"{_OS_NAMES.get(system, system)} {platform.release()} ({platform.machine()})"
    return "OS", value, _OK


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _status_plain(status: str) -> str:
    """Strip Rich markup down to the status keyword."""
    for keyword in ("FAIL", "WARN", "OK"):
        if keyword in status:
            return keyword
    return status


def _print_plain_doctor_table(checks: list[Check]) -> None:
    rule = "-" * 56
    lines = [
        "",
        "tubegrab doctor",
        "=" * 56,
        f"{'Component':<12} {'Value':<32} {'Status':<8}",
        rule,
        *(f"{label:<12} {value:<32} {_status_plain(status):<8}" for label, value, status in checks),
        "",
    ]
    print("\n".join(lines), file=sys.stderr)


def _print_rich_doctor_table(table_class: type, checks: list[Check]) -> None:
    table = table_class(
        title="tubegrab doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for row in checks:
        table.add_row(*row)

    console.print()
    console.print(table)
    console.print()


def _writer(rich_available: bool) -> Callable[[str, str], None]:
    """Return ``write(markup, plain)`` for the available renderer."""
    if rich_available:
        return lambda markup, _plain: console.print(markup)
    return lambda _markup, plain: print(plain, file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: Settings | None = None) -> int:
    """Run every check and print the report.

    *settings* supplies the ffmpeg executable and output directory to
    check (defaults when ``None``).  Returns :data:`exit_codes.SUCCESS`
    unless a check failed.
    """
    settings = settings or Settings()
    ffmpeg_status = detect_ffmpeg(settings.ffmpeg_path)

    checks = [
        _tubegrab_version_check(),
        _python_version_check(),
        _ytdlp_version_check(),
        _ffmpeg_check(ffmpeg_status),
        _output_dir_check(settings.output_dir),
        _os_check(),
    ]

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        Table = None  # noqa: N806

    if Table is not None:
        _print_rich_doctor_table(Table, checks)
    else:
        _print_plain_doctor_table(checks)
    write = _writer(Table is not None)

    if not ffmpeg_status.found and ffmpeg_status.install_commands:
        write(
            "[yellow]ffmpeg is not installed.[/yellow] MP3 and merged downloads need it.",
            "ffmpeg is not installed. MP3 and merged downloads need it.",
        )
        write("Install using one of the following commands:\n", "Install using one of the following commands:\n")
        for cmd in ffmpeg_status.install_commands:
            write(f"  [bold]{cmd}[/bold]", f"  {cmd}")
        write("", "")

    if any(_status_plain(status) == "FAIL" for _, _, status in checks):
        write("[bold red]Some checks failed.[/bold red]", "Some checks failed.")
        return exit_codes.GENERAL_ERROR

    write("[bold green]All checks passed.[/bold green]", "All checks passed.")
    return exit_codes.SUCCESS
