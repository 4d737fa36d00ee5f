"""Analysis facade — the lightweight, read-only path.

Resolves title, author, duration and thumbnail for a URL so a caller can
show what it is about to download.  No manifest is inspected and no
bytes are transferred.
"""

from __future__ import annotations

import logging

from tubegrab.core.models import MediaDescriptor
from tubegrab.core.protocols import LogCallback, ManifestResolver
from tubegrab.core.urls import normalize_video_url
from tubegrab.utils.formatting import format_duration

log = logging.getLogger(__name__)


class AnalysisService:
    """Stateless metadata lookup on top of a :class:`ManifestResolver`."""

    def __init__(self, resolver: ManifestResolver) -> None:
        self._resolver: ManifestResolver = resolver

    def analyze(self, url: str, on_log: LogCallback | None = None) -> MediaDescriptor:
        """Return the metadata of *url*.

        Raises
        ------
        InvalidURLError
            If *url* is empty or cannot be parsed.
        ResolutionError
            If the metadata cannot be resolved; never retried.
        """

        def emit(message: str) -> None:
            log.info(message)
            if on_log is not None:
                on_log(message)

        emit("Analyzing URL...")
        media = self._resolver.describe(normalize_video_url(url))

        emit(f"Title: {media.title}")
        emit(f"Channel: {media.author}")
        if media.duration is not None:
            emit(f"Duration: {format_duration(media.duration)}")
        return media
