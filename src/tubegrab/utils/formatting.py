"""Human-readable rendering of sizes, durations and bitrates."""

from __future__ import annotations

from datetime import timedelta

_KB: int = 1024
_MB: int = _KB * 1024


def format_bytes(size: int) -> str:
    """Render *size* as ``"1.50 MB"``, ``"12.0 KB"`` or ``"512 B"``."""
    if size >= _MB:
        return f"{size / _MB:.2f} MB"
    if size >= _KB:
        return f"{size / _KB:.1f} KB"
    return f"{size} B"


def format_duration(duration: timedelta | None) -> str:
    """Render *duration* as ``H:MM:SS`` or ``M:SS``; ``"unknown"`` for ``None``."""
    if duration is None:
        return "unknown"
    total = int(duration.total_seconds())
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def format_bitrate(bits_per_second: int) -> str:
    """Render a bitrate in whole kbps."""
    return f"{round(bits_per_second / 1000)} kbps"
