"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from pathlib import Path
from typing import Any, Protocol

from tubegrab.core.models import (
    JobStatus,
    MediaDescriptor,
    StreamLocator,
    StreamManifest,
)

LogCallback = Callable[[str], None]
"""Receives one human-readable log line."""

ProgressCallback = Callable[[float], None]
"""Receives a transfer fraction in ``[0.0, 1.0]``."""

StatusCallback = Callable[[JobStatus], None]
"""Receives each status the job enters."""


class MetadataProvider(Protocol):
    """Contract for metadata extraction backends.

    Any object that implements :meth:`fetch_info` with the correct
    signature satisfies this protocol structurally (no explicit
    inheritance required).
    """

    def fetch_info(self, url: str) -> dict[str, Any]:
        """Fetch raw metadata for *url* and return a provider-specific dict.

        The returned dict is expected to follow the yt-dlp info-dict
        shape: ``"id"``, ``"title"``, ``"uploader"``/``"channel"``,
        ``"duration"``, ``"thumbnail"``/``"thumbnails"`` and a
        ``"formats"`` list.

        Implementations must map all backend-specific exceptions to
        :class:`~tubegrab.exceptions.TubegrabError` subclasses.

        Raises
        ------
        ResolutionError
            When the backend fails to extract metadata.
        VideoUnavailableError
            When the target video is confirmed unavailable.
        """
        ...  # pragma: no cover


class ManifestResolver(Protocol):
    """Contract for turning a URL into metadata and a stream manifest."""

    def resolve(self, url: str) -> tuple[MediaDescriptor, StreamManifest]:
        """Return the metadata and the available streams for *url*."""
        ...  # pragma: no cover

    def describe(self, url: str) -> MediaDescriptor:
        """Return the metadata only; the manifest is never inspected."""
        ...  # pragma: no cover


class ByteSource(Protocol):
    """Contract for opening the byte stream behind a :class:`StreamLocator`."""

    def iter_bytes(self, locator: StreamLocator) -> Iterator[bytes]:
        """Yield the remote resource's bytes in order, chunk by chunk.

        Raises
        ------
        TransferError
            When the resource cannot be opened or read.
        """
        ...  # pragma: no cover


class Transcoder(Protocol):
    """Contract for the external media-processing tool."""

    def run(self, arguments: Sequence[str]) -> None:
        """Run the tool with *arguments* and wait for it to finish.

        Raises
        ------
        TranscodeError
            On launch failure, non-zero exit, or timeout.  The captured
            output is attached to the exception.
        """
        ...  # pragma: no cover


class StorageSink(Protocol):
    """Contract for persisting a finished file to user-visible storage."""

    def request_access(self) -> None:
        """Ask for permission to write; may raise :class:`ExportError`."""
        ...  # pragma: no cover

    def export(self, path: Path) -> None:
        """Persist the local file at *path*.

        Raises
        ------
        ExportError
            When access is denied or storage fails.
        """
        ...  # pragma: no cover
