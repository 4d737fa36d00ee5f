"""tubegrab — single-video acquisition and transcode pipeline.

Resolves a video manifest with yt-dlp, streams the selected tracks to
disk, converts or merges them with ffmpeg, and hands the result to a
storage sink.
"""

from tubegrab.version import __version__

__all__: list[str] = ["__version__"]
