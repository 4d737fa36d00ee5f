"""Domain models for tubegrab.

Value objects are **frozen** dataclasses — immutable, with no behaviour
beyond data access and a few derived properties.  They carry zero I/O
and no dependencies on external packages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

from tubegrab.exceptions import UnsupportedModeError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class StreamKind(str, Enum):
    """Which tracks a remote stream carries."""

    VIDEO_ONLY = "video-only"
    AUDIO_ONLY = "audio-only"
    MUXED = "muxed"


class JobMode(str, Enum):
    """Output shape requested for a download job."""

    AUDIO = "audio"
    MERGE = "merge"
    MUXED = "muxed"

    @classmethod
    def parse(cls, value: JobMode | str) -> JobMode:
        """Return the mode named by *value* (case-insensitive).

        Raises
        ------
        UnsupportedModeError
            When *value* does not name a known mode.
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        expected = ", ".join(mode.value for mode in cls)
        raise UnsupportedModeError(
            f"Unsupported mode: {value!r}",
            hint=f"Expected one of: {expected}.",
        )


class JobStatus(str, Enum):
    """Coarse status signal of a job."""

    IDLE = "idle"
    DOWNLOADING = "downloading"
    CONVERTING = "converting"
    EXPORTING = "exporting"
    DONE = "done"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.DONE, JobStatus.ERROR)


# ---------------------------------------------------------------------------
# Video metadata
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MediaDescriptor:
    """Top-level metadata for a single video."""

    title: str
    """Human-readable video title."""

    author: str
    """Channel or uploader name."""

    duration: timedelta | None
    """Running time, or ``None`` if unavailable (e.g. live streams)."""

    thumbnail_url: str
    """Best available thumbnail URL; empty when the video has none."""

    video_id: str = ""
    """Extractor-specific video identifier."""

    webpage_url: str = ""
    """Canonical URL of the video page."""


# ---------------------------------------------------------------------------
# Streams
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class StreamLocator:
    """Opaque handle used by a byte source to open one remote resource."""

    url: str
    headers: tuple[tuple[str, str], ...] = ()

    def header_dict(self) -> dict[str, str]:
        return dict(self.headers)


@dataclass(frozen=True, slots=True)
class StreamDescriptor:
    """A single remote stream variant listed in a manifest."""

    container: str
    """Normalised container name (``mp4`` covers the m4a/AAC family)."""

    codec: str
    """Codec string of the primary track (video codec for muxed streams)."""

    bitrate: int
    """Average bitrate in bits per second; ``0`` when unknown."""

    total_size: int
    """Size in bytes; ``0`` when unknown."""

    kind: StreamKind
    """Partition this stream belongs to."""

    locator: StreamLocator = field(compare=False)
    """Handle passed to the byte source to open the stream."""

    format_id: str = ""
    """Extractor-specific format identifier."""

    height: int | None = None
    """Vertical resolution in pixels for streams that carry video."""

    @property
    def kilobits_per_second(self) -> int:
        return round(self.bitrate / 1000)

    @property
    def resolution_label(self) -> str:
        return f"{self.height}p" if self.height else "unknown resolution"


@dataclass(frozen=True, slots=True)
class StreamManifest:
    """All stream variants of one video, partitioned by kind.

    The tuples guarantee immutability; order is the extractor's order.
    """

    video_only: tuple[StreamDescriptor, ...] = ()
    audio_only: tuple[StreamDescriptor, ...] = ()
    muxed: tuple[StreamDescriptor, ...] = ()

    def __len__(self) -> int:
        return len(self.video_only) + len(self.audio_only) + len(self.muxed)

    def __bool__(self) -> bool:
        return len(self) > 0


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class JobRequest:
    """A validated download request, fixed once the title is known."""

    url: str
    mode: JobMode
    base_name: str
    """Sanitized filename stem shared by every file the job writes."""
