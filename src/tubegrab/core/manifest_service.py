"""Core manifest service — turns raw extractor output into domain models.

This is the concrete metadata/manifest resolver consumed by the job
orchestrator and the analysis facade.  It depends on a
:class:`~tubegrab.core.protocols.MetadataProvider` injected at
construction time (dependency inversion), keeping the core free of any
external-system imports.

Guarantees
----------
* Pure orchestration — no ``print()``, no filesystem access.
* Only :class:`~tubegrab.exceptions.ResolutionError` subclasses escape
  from :meth:`ManifestService.resolve` and :meth:`ManifestService.describe`.
* All parsing logic is deterministic and stateless.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from tubegrab.core.models import (
    MediaDescriptor,
    StreamDescriptor,
    StreamKind,
    StreamLocator,
    StreamManifest,
)
from tubegrab.core.protocols import MetadataProvider
from tubegrab.exceptions import ResolutionError, TubegrabError

log = logging.getLogger(__name__)

HIGH_RES_MIN_WIDTH: int = 480
"""Thumbnails at least this wide count as high resolution."""

_DIRECT_PROTOCOLS: frozenset[str] = frozenset({"http", "https"})
_CONTAINER_ALIASES: dict[str, str] = {"m4a": "mp4", "m4v": "mp4"}


class ManifestService:
    """Stateless service that resolves metadata and stream manifests.

    Parameters
    ----------
    provider:
        Any object satisfying the :class:`MetadataProvider` protocol.
    """

    def __init__(self, provider: MetadataProvider) -> None:
        self._provider: MetadataProvider = provider

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, url: str) -> tuple[MediaDescriptor, StreamManifest]:
        """Resolve metadata and every directly downloadable stream of *url*.

        Raises
        ------
        ResolutionError
            If the backend fails to return metadata.
        VideoUnavailableError
            If the video is confirmed unavailable.
        """
        info = self._fetch(url)
        media = self.parse_media(info)
        manifest = self.parse_manifest(info)
        log.debug(
            "Resolved %r: %d video-only, %d audio-only, %d muxed streams",
            media.title,
            len(manifest.video_only),
            len(manifest.audio_only),
            len(manifest.muxed),
        )
        return media, manifest

    def describe(self, url: str) -> MediaDescriptor:
        """Resolve metadata only; the format list is never parsed."""
        return self.parse_media(self._fetch(url))

    # ------------------------------------------------------------------
    # Provider delegation (safe boundary)
    # ------------------------------------------------------------------

    def _fetch(self, url: str) -> dict[str, Any]:
        """Call the provider and ensure only our exceptions escape."""
        try:
            return self._provider.fetch_info(url)
        except ResolutionError:
            # Already a domain error; propagate unchanged.
            raise
        except TubegrabError as exc:
            raise ResolutionError(str(exc), hint=exc.hint) from exc
        except Exception as exc:
            raise ResolutionError(
                f"Unexpected provider error: {exc}",
            ) from exc

    # ------------------------------------------------------------------
    # Raw-dict → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @classmethod
    def parse_media(cls, info: dict[str, Any]) -> MediaDescriptor:
        """Convert a raw info dict into a :class:`MediaDescriptor`."""
        raw_duration = info.get("duration")
        duration: timedelta | None = (
            timedelta(seconds=float(raw_duration))
            if isinstance(raw_duration, (int, float)) and raw_duration > 0
            else None
        )
        author = info.get("uploader") or info.get("channel") or "Unknown"
        return MediaDescriptor(
            title=str(info.get("title") or "Unknown"),
            author=str(author),
            duration=duration,
            thumbnail_url=cls._pick_thumbnail(info),
            video_id=str(info.get("id") or ""),
            webpage_url=str(info.get("webpage_url") or ""),
        )

    @staticmethod
    def _pick_thumbnail(info: dict[str, Any]) -> str:
        """Prefer a high-resolution thumbnail, else the standard one."""
        raw: object = info.get("thumbnails")
        thumbnails = [
            entry
            for entry in (raw if isinstance(raw, list) else [])
            if isinstance(entry, dict) and entry.get("url")
        ]
        thumbnails.sort(key=lambda entry: _safe_int(entry.get("width")) or 0)

        high_res = [
            entry
            for entry in thumbnails
            if (_safe_int(entry.get("width")) or 0) >= HIGH_RES_MIN_WIDTH
        ]
        if high_res:
            return str(high_res[-1]["url"])

        standard = info.get("thumbnail")
        if standard:
            return str(standard)
        if thumbnails:
            return str(thumbnails[-1]["url"])
        return ""

    @classmethod
    def parse_manifest(cls, info: dict[str, Any]) -> StreamManifest:
        """Partition the raw format list into a :class:`StreamManifest`."""
        partitions: dict[StreamKind, list[StreamDescriptor]] = {
            kind: [] for kind in StreamKind
        }
        for raw in cls._extract_raw_formats(info):
            stream = cls.parse_stream(raw)
            if stream is not None:
                partitions[stream.kind].append(stream)
        return StreamManifest(
            video_only=tuple(partitions[StreamKind.VIDEO_ONLY]),
            audio_only=tuple(partitions[StreamKind.AUDIO_ONLY]),
            muxed=tuple(partitions[StreamKind.MUXED]),
        )

    @staticmethod
    def _extract_raw_formats(info: dict[str, Any]) -> list[dict[str, Any]]:
        """Safely pull the ``formats`` list from a raw info dict."""
        raw: object = info.get("formats")
        if not isinstance(raw, list):
            return []
        # Each element is expected to be a dict; skip malformed entries.
        return [entry for entry in raw if isinstance(entry, dict)]

    @staticmethod
    def parse_stream(raw: dict[str, Any]) -> StreamDescriptor | None:
        """Convert one raw format dict, or ``None`` if it cannot be streamed.

        Formats without a direct HTTP URL (HLS, DASH fragments,
        storyboards) and formats carrying neither audio nor video are
        skipped.
        """
        url = raw.get("url")
        protocol = str(raw.get("protocol") or "https")
        if not url or protocol not in _DIRECT_PROTOCOLS:
            return None

        vcodec = str(raw.get("vcodec") or "none")
        acodec = str(raw.get("acodec") or "none")
        has_video = vcodec != "none"
        has_audio = acodec != "none"
        if has_video and has_audio:
            kind = StreamKind.MUXED
        elif has_video:
            kind = StreamKind.VIDEO_ONLY
        elif has_audio:
            kind = StreamKind.AUDIO_ONLY
        else:
            return None

        ext = str(raw.get("ext") or "").lower()
        headers = raw.get("http_headers")
        height = raw.get("height")

        return StreamDescriptor(
            container=_CONTAINER_ALIASES.get(ext, ext) or "bin",
            codec=vcodec if has_video else acodec,
            bitrate=_bitrate_bps(raw),
            total_size=_safe_int(raw.get("filesize"))
            or _safe_int(raw.get("filesize_approx"))
            or 0,
            kind=kind,
            locator=StreamLocator(
                url=str(url),
                headers=tuple(
                    (str(key), str(value))
                    for key, value in (headers.items() if isinstance(headers, dict) else ())
                ),
            ),
            format_id=str(raw.get("format_id") or ""),
            height=height if isinstance(height, int) else None,
        )


# ---------------------------------------------------------------------------
# Utility
# ---------------------------------------------------------------------------

def _bitrate_bps(raw: dict[str, Any]) -> int:
    """Total bitrate in bits/s from yt-dlp's kbit/s fields, ``0`` if absent."""
    total = raw.get("tbr")
    if not isinstance(total, (int, float)):
        parts = [raw.get("abr"), raw.get("vbr")]
        numeric = [part for part in parts if isinstance(part, (int, float))]
        if not numeric:
            return 0
        total = sum(numeric)
    return max(0, round(total * 1000))


def _safe_int(value: object) -> int | None:
    """Convert *value* to ``int`` or return ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float, str)):
            return int(value)
        return None
    except (TypeError, ValueError):
        return None
