"""Metadata extraction through the yt-dlp Python API.

:class:`YtDlpMetadataProvider` returns yt-dlp's raw info dict for one
video; :class:`~tubegrab.core.manifest_service.ManifestService` turns it
into domain models.  yt-dlp failures leave this module only as
:class:`~tubegrab.exceptions.TubegrabError` subclasses.
"""

from __future__ import annotations

import logging
from typing import Any

from tubegrab.exceptions import (
    EnvironmentError,
    ResolutionError,
    VideoUnavailableError,
    append_ytdlp_upgrade_suggestion,
)

logger = logging.getLogger(__name__)

# Lower-cased fragments of yt-dlp messages about the video itself being
# gone or restricted, as opposed to extractor or network trouble.
_UNAVAILABLE_SIGNALS: tuple[str, ...] = (
    "unavailable",
    "private video",
    "removed",
    "not available",
    "account terminated",
    "no longer available",
    "sign in to confirm your age",
)


def _import_ytdlp() -> Any:
    try:
        import yt_dlp
        import yt_dlp.utils
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "yt-dlp is not installed. Install with: pip install yt-dlp",
        ) from exc
    return yt_dlp


class YtDlpMetadataProvider:
    """:class:`~tubegrab.core.protocols.MetadataProvider` backed by yt-dlp.

    Extraction never downloads media and never expands a ``list=``
    parameter into a playlist.
    """

    @staticmethod
    def _build_opts() -> dict[str, Any]:
        return {
            "quiet": True,
            "no_warnings": True,
            "no_color": True,
            "skip_download": True,
            "noplaylist": True,
        }

    def fetch_info(self, url: str) -> dict[str, Any]:
        """Return a shallow copy of yt-dlp's info dict for *url*.

        Raises :class:`VideoUnavailableError` for private, removed or
        restricted videos and :class:`ResolutionError` otherwise.
        """
        yt_dlp = _import_ytdlp()
        logger.debug("Extracting metadata for %s", url)

        try:
            with yt_dlp.YoutubeDL(self._build_opts()) as ydl:
                info: Any = ydl.extract_info(url, download=False)
        except yt_dlp.utils.DownloadError as exc:
            raise _map_download_error(exc) from exc
        except Exception as exc:
            raise ResolutionError(f"Unexpected yt-dlp error: {exc}") from exc

        return dict(_checked_info(info))


def _checked_info(info: Any) -> dict[str, Any]:
    if info is None:
        raise ResolutionError(
            "yt-dlp returned no metadata for the given URL.",
            hint="The URL may not point to a valid video.",
        )
    if not isinstance(info, dict):
        raise ResolutionError("yt-dlp returned an unexpected data structure.")
    if info.get("_type") == "playlist":
        raise ResolutionError(
            "The URL points to a playlist, not a single video.",
            hint="Paste the link of one video from the playlist.",
        )
    return info


def _map_download_error(exc: Exception) -> ResolutionError:
    message = str(exc)
    lowered = message.lower()
    if any(signal in lowered for signal in _UNAVAILABLE_SIGNALS):
        return VideoUnavailableError(
            message,
            hint="The video may be private, removed, or geo-restricted.",
        )
    return ResolutionError(
        message,
        hint=append_ytdlp_upgrade_suggestion("Check the URL and your network connection."),
    )
