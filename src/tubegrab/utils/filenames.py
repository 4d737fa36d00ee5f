"""Filesystem-safe filename stems derived from video titles."""

from __future__ import annotations

import re

MAX_BASE_NAME_LENGTH: int = 120
FALLBACK_BASE_NAME: str = "video"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f]")
_RESERVED_CHARS = re.compile(r'[<>:"/\\|?*]+')


def sanitize_file_name(title: str) -> str:
    """Make a filesystem-safe base name from *title*.

    Control characters are dropped, each run of reserved characters
    (``<>:"/\\|?*``) becomes a single ``_``, and the result is trimmed
    and cut to :data:`MAX_BASE_NAME_LENGTH` characters.  Returns
    :data:`FALLBACK_BASE_NAME` when nothing usable remains.
    """
    without_control = _CONTROL_CHARS.sub("", title)
    sanitized = _RESERVED_CHARS.sub("_", without_control).strip()
    if not sanitized:
        return FALLBACK_BASE_NAME
    # The cut may expose trailing whitespace.
    return sanitized[:MAX_BASE_NAME_LENGTH].rstrip() or FALLBACK_BASE_NAME
