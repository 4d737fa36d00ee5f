"""ffmpeg argument vectors for the two transcode steps of a job.

The builders return plain argument lists (the ffmpeg executable itself
is prepended by the :class:`~tubegrab.core.protocols.Transcoder`), so
paths are passed verbatim, with no shell quoting involved.
"""

from __future__ import annotations

from pathlib import Path

MP3_ENCODER: str = "libmp3lame"
MP3_VBR_QUALITY: str = "2"
"""LAME VBR quality index: 0 (best) to 9 (worst)."""

MERGE_AUDIO_ENCODER: str = "aac"

_COMMON_ARGS: tuple[str, ...] = ("-hide_banner", "-nostdin", "-y")


def build_mp3_encode_args(source: Path, target: Path) -> list[str]:
    """Re-encode the audio track of *source* into the MP3 file *target*."""
    return [
        *_COMMON_ARGS,
        "-i", str(source),
        "-vn",
        "-codec:a", MP3_ENCODER,
        "-qscale:a", MP3_VBR_QUALITY,
        str(target),
    ]


def build_merge_args(video: Path, audio: Path, target: Path) -> list[str]:
    """Mux *video* (copied) and *audio* (re-encoded to AAC) into *target*."""
    return [
        *_COMMON_ARGS,
        "-i", str(video),
        "-i", str(audio),
        "-c:v", "copy",
        "-c:a", MERGE_AUDIO_ENCODER,
        str(target),
    ]
