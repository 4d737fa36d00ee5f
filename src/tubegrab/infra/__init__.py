"""Infrastructure layer — external system integration.

This layer wraps all interaction with yt-dlp, the network, ffmpeg and
the user's download directory.  Every raw third-party exception must be
caught here and re-raised as a :class:`~tubegrab.exceptions.TubegrabError`
subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from tubegrab.infra.directory_sink import DirectorySink
from tubegrab.infra.ffmpeg_detector import FfmpegStatus, detect_ffmpeg, require_ffmpeg
from tubegrab.infra.ffmpeg_transcoder import FfmpegTranscoder
from tubegrab.infra.ytdlp_byte_source import YtDlpByteSource
from tubegrab.infra.ytdlp_provider import YtDlpMetadataProvider

__all__: list[str] = [
    "DirectorySink",
    "FfmpegStatus",
    "FfmpegTranscoder",
    "YtDlpByteSource",
    "YtDlpMetadataProvider",
    "detect_ffmpeg",
    "require_ffmpeg",
]
