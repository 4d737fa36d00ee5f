"""Runtime settings read from the environment.

Values come from ``TUBEGRAB_*`` environment variables, optionally
provided through a ``.env`` file in the working directory.  CLI flags
override them.

* ``TUBEGRAB_OUTPUT_DIR`` — where finished files are saved
  (default ``~/Downloads/tubegrab``).
* ``TUBEGRAB_SCRATCH_DIR`` — temporary files (default: a private temp
  directory).
* ``TUBEGRAB_TRANSCODE_TIMEOUT`` — seconds per ffmpeg run (default
  ``3600``; ``0``, ``none`` or ``off`` disable the limit).
* ``TUBEGRAB_CHUNK_SIZE`` — bytes per network read (default ``262144``).
* ``TUBEGRAB_LOG_LINES`` — job log lines kept in memory (default ``200``).
* ``TUBEGRAB_FFMPEG`` — ffmpeg executable (default: looked up on PATH).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from tubegrab.exceptions import ConfigurationError

ENV_PREFIX: str = "TUBEGRAB_"

DEFAULT_OUTPUT_DIR: Path = Path("~/Downloads/tubegrab")
DEFAULT_TRANSCODE_TIMEOUT: float = 3600.0
DEFAULT_CHUNK_SIZE: int = 256 * 1024
DEFAULT_LOG_LINES: int = 200


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable application settings."""

    output_dir: Path = DEFAULT_OUTPUT_DIR
    scratch_dir: Path | None = None
    transcode_timeout: float | None = DEFAULT_TRANSCODE_TIMEOUT
    chunk_size: int = DEFAULT_CHUNK_SIZE
    log_lines: int = DEFAULT_LOG_LINES
    ffmpeg_path: str | None = None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from *environ* (default: the process environment).

    When reading the process environment, a ``.env`` file is loaded
    first; variables already set take precedence over it.

    Raises
    ------
    ConfigurationError
        If a numeric variable cannot be parsed.
    """
    if environ is None:
        from dotenv import find_dotenv, load_dotenv

        load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ

    def get(name: str) -> str | None:
        value = environ.get(ENV_PREFIX + name)
        if value is None or not value.strip():
            return None
        return value.strip()

    output_dir = get("OUTPUT_DIR")
    scratch_dir = get("SCRATCH_DIR")
    return Settings(
        output_dir=Path(output_dir) if output_dir else DEFAULT_OUTPUT_DIR,
        scratch_dir=Path(scratch_dir).expanduser() if scratch_dir else None,
        transcode_timeout=parse_timeout(get("TRANSCODE_TIMEOUT")),
        chunk_size=_parse_positive_int("CHUNK_SIZE", get("CHUNK_SIZE"), DEFAULT_CHUNK_SIZE),
        log_lines=_parse_positive_int("LOG_LINES", get("LOG_LINES"), DEFAULT_LOG_LINES),
        ffmpeg_path=get("FFMPEG"),
    )


def parse_timeout(raw: str | None) -> float | None:
    """Parse a timeout in seconds; ``0``, ``none`` or ``off`` disable it."""
    if raw is None:
        return DEFAULT_TRANSCODE_TIMEOUT
    if raw.lower() in ("none", "off"):
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid transcode timeout: {raw!r}",
            hint="Use a number of seconds, or 0 to disable the limit.",
        ) from exc
    if value < 0:
        raise ConfigurationError(f"Transcode timeout must not be negative: {raw!r}")
    return value or None


def _parse_positive_int(name: str, raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid {ENV_PREFIX}{name}: {raw!r}") from exc
    if value < 1:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be positive, got {value}.")
    return value
