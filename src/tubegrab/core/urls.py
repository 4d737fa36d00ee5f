"""Lenient video URL normalisation.

Users paste share links, Shorts links, mobile links or just the video
id.  :func:`normalize_video_url` maps every recognised YouTube shape to
the canonical watch URL and passes any other ``http(s)`` URL through
untouched, leaving site support to the extractor.
"""

from __future__ import annotations

import re
from urllib.parse import SplitResult, parse_qs, urlsplit

from tubegrab.exceptions import InvalidURLError

WATCH_URL_TEMPLATE: str = "https://www.youtube.com/watch?v={video_id}"

_VIDEO_ID = re.compile(r"^[A-Za-z0-9_-]{11}$")
_YOUTUBE_HOSTS: frozenset[str] = frozenset(
    {
        "youtube.com",
        "www.youtube.com",
        "m.youtube.com",
        "music.youtube.com",
        "youtube-nocookie.com",
        "www.youtube-nocookie.com",
    }
)
_SHORT_HOSTS: frozenset[str] = frozenset({"youtu.be", "www.youtu.be"})
_PATH_PREFIXES: tuple[str, ...] = ("shorts", "embed", "live", "v")
_FULL_LINK_HINT: str = "Paste a full video link, e.g. https://youtu.be/<id>"


def normalize_video_url(raw: str) -> str:
    """Return a URL the extractor can resolve.

    Raises
    ------
    InvalidURLError
        If *raw* is empty, or neither a video id nor an ``http(s)`` URL.
    """
    stripped = raw.strip()
    if not stripped:
        raise InvalidURLError("URL must not be empty.")

    if _VIDEO_ID.match(stripped):
        return WATCH_URL_TEMPLATE.format(video_id=stripped)

    candidate = stripped
    if "://" not in candidate:
        candidate = f"https://{candidate}"

    try:
        parts, host = _split(candidate)
    except ValueError as exc:
        raise InvalidURLError(
            f"Invalid URL: {stripped}",
            hint=_FULL_LINK_HINT,
        ) from exc
    if parts.scheme not in ("http", "https") or not host or "." not in host:
        raise InvalidURLError(
            f"Invalid URL: {stripped}",
            hint=_FULL_LINK_HINT,
        )

    video_id = extract_youtube_id(candidate)
    if video_id is not None:
        return WATCH_URL_TEMPLATE.format(video_id=video_id)

    if host in _YOUTUBE_HOSTS or host in _SHORT_HOSTS:
        raise InvalidURLError(
            f"No video id found in URL: {stripped}",
            hint="Playlists and channel pages are not supported.",
        )
    return candidate


def extract_youtube_id(url: str) -> str | None:
    """Return the 11-character video id in a YouTube *url*, or ``None``.

    A *url* that cannot be parsed (e.g. a broken IPv6 host) has no id.
    """
    try:
        parts, host = _split(url)
    except ValueError:
        return None
    segments = [segment for segment in parts.path.split("/") if segment]

    if host in _SHORT_HOSTS:
        return _valid_id(segments[0]) if segments else None

    if host not in _YOUTUBE_HOSTS:
        return None

    if segments and segments[0] == "watch":
        values = parse_qs(parts.query).get("v", [])
        return _valid_id(values[0]) if values else None

    if len(segments) >= 2 and segments[0] in _PATH_PREFIXES:
        return _valid_id(segments[1])

    return None


def _split(url: str) -> tuple[SplitResult, str]:
    """Split *url* and return it with its lower-cased host.

    ``urlsplit`` and ``hostname`` raise ``ValueError`` for malformed
    IPv6 hosts and bracketed names.
    """
    parts = urlsplit(url)
    return parts, (parts.hostname or "").lower()


def _valid_id(value: str) -> str | None:
    return value if _VIDEO_ID.match(value) else None
