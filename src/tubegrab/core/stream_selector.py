"""Pure stream selection logic.

Every function in this module is a **pure** transformation — no I/O,
no side effects, fully deterministic, and trivially unit-testable.

Policy per output mode:

* ``audio`` — best audio-only stream, ``mp4`` (AAC) preferred.
* ``merge`` — best video-only stream and best audio-only stream, each
  ``mp4`` preferred.
* ``muxed`` — best combined stream, no container preference.

"Best" always means highest bitrate; a preferred container wins over a
higher bitrate in another container.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from tubegrab.core.models import JobMode, StreamDescriptor, StreamManifest
from tubegrab.exceptions import SelectionError

PREFERRED_CONTAINER: str = "mp4"


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

def select_highest_bitrate(
    streams: Iterable[StreamDescriptor],
    predicate: Callable[[StreamDescriptor], bool] | None = None,
) -> StreamDescriptor | None:
    """Return the stream with the highest bitrate, or ``None`` when empty.

    Ties keep the earliest candidate: the running best is only replaced
    by a strictly higher bitrate.
    """
    best: StreamDescriptor | None = None
    for stream in streams:
        if predicate is not None and not predicate(stream):
            continue
        if best is None or stream.bitrate > best.bitrate:
            best = stream
    return best


def prefer_container(
    streams: Iterable[StreamDescriptor],
    container: str = PREFERRED_CONTAINER,
) -> StreamDescriptor | None:
    """Best stream in *container*, falling back to the best of any container."""
    candidates = tuple(streams)
    preferred = select_highest_bitrate(
        candidates,
        lambda stream: stream.container == container,
    )
    if preferred is not None:
        return preferred
    return select_highest_bitrate(candidates)


# ---------------------------------------------------------------------------
# Mode policies
# ---------------------------------------------------------------------------

def select_audio_stream(manifest: StreamManifest) -> StreamDescriptor:
    """Pick the audio-only stream used by the ``audio`` and ``merge`` modes."""
    audio = prefer_container(manifest.audio_only)
    if audio is None:
        raise SelectionError("No suitable audio-only stream found.")
    return audio


def select_video_stream(manifest: StreamManifest) -> StreamDescriptor:
    """Pick the video-only stream used by the ``merge`` mode."""
    video = prefer_container(manifest.video_only)
    if video is None:
        raise SelectionError(
            "No suitable video-only stream found.",
            hint="Try the 'muxed' mode, which needs no separate video track.",
        )
    return video


def select_muxed_stream(manifest: StreamManifest) -> StreamDescriptor:
    """Pick the combined stream used by the ``muxed`` mode."""
    muxed = select_highest_bitrate(manifest.muxed)
    if muxed is None:
        raise SelectionError(
            "No muxed stream available for this video.",
            hint="Try the 'merge' mode instead.",
        )
    return muxed


def select_streams(
    manifest: StreamManifest,
    mode: JobMode,
) -> tuple[StreamDescriptor, ...]:
    """Run the policy for *mode*, returning streams in fetch order.

    ``merge`` yields ``(video, audio)``; the other modes yield one stream.
    Every selection happens before any transfer, so a miss aborts the job
    without touching the network.
    """
    if mode is JobMode.AUDIO:
        return (select_audio_stream(manifest),)
    if mode is JobMode.MERGE:
        return (select_video_stream(manifest), select_audio_stream(manifest))
    return (select_muxed_stream(manifest),)
