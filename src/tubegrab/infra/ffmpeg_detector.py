"""Locating the ffmpeg executable used for MP3 encoding and track merging.

A configured executable (``TUBEGRAB_FFMPEG``) is the only candidate when
set; otherwise ``ffmpeg`` is looked up on PATH.  Lookup goes through
:func:`shutil.which` alone, so probing never spawns a process and never
installs anything.
"""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

from tubegrab.exceptions import FfmpegNotFoundError

_DEFAULT_COMMAND: str = "ffmpeg"

_INSTALL_COMMANDS: dict[str, tuple[str, ...]] = {
    "windows": ("winget install Gyan.FFmpeg", "choco install ffmpeg"),
    "linux": ("sudo apt install ffmpeg", "sudo dnf install ffmpeg", "sudo pacman -S ffmpeg"),
    "darwin": ("brew install ffmpeg",),
}
_DOWNLOAD_PAGE_HINT: str = "Please install ffmpeg from https://ffmpeg.org/download.html"


@dataclass(frozen=True, slots=True)
class FfmpegStatus:
    """Outcome of one lookup.

    ``version_hint`` is the short text shown by ``tubegrab doctor``;
    ``install_commands`` is empty whenever ffmpeg was found.
    """

    found: bool
    path: Path | None
    version_hint: str
    install_commands: tuple[str, ...]


def detect_ffmpeg(configured: str | Path | None = None) -> FfmpegStatus:
    """Look up ffmpeg without raising; the caller decides how to react."""
    candidate = str(configured) if configured else _DEFAULT_COMMAND
    located = shutil.which(candidate)
    if located is None:
        return FfmpegStatus(
            found=False,
            path=None,
            version_hint=f"{candidate} not found" if configured else "not found",
            install_commands=_platform_install_commands(),
        )

    path = Path(located).resolve()
    return FfmpegStatus(found=True, path=path, version_hint=f"found at {path}", install_commands=())


def require_ffmpeg(configured: str | Path | None = None) -> Path:
    """Return the ffmpeg path, raising :class:`FfmpegNotFoundError` when absent."""
    status = detect_ffmpeg(configured)
    if status.found and status.path is not None:
        return status.path
    raise FfmpegNotFoundError(
        "ffmpeg is not installed or not on PATH.",
        hint=_missing_hint(configured, status.install_commands),
    )


def _missing_hint(configured: str | Path | None, commands: tuple[str, ...]) -> str | None:
    lines: list[str] = []
    if configured:
        lines.append(f"Check the configured ffmpeg path: {configured}")
    if commands:
        lines.append("Install ffmpeg using one of:")
        lines.extend(f"  {command}" for command in commands)
    return "\n".join(lines) or None


def _platform_install_commands() -> tuple[str, ...]:
    """Install commands for the running OS, or the download page elsewhere."""
    return _INSTALL_COMMANDS.get(platform.system().lower(), (_DOWNLOAD_PAGE_HINT,))
