"""Custom exception hierarchy for tubegrab.

All exceptions that cross layer boundaries must inherit from
:class:`TubegrabError`.  Raw third-party exceptions (e.g. from yt-dlp or
:mod:`subprocess`) must NEVER propagate beyond the layer that produced
them — they are caught and re-raised as a typed subclass defined here.

Hierarchy
---------
TubegrabError
├── ValidationError
│   ├── InvalidURLError
│   └── UnsupportedModeError
├── ResolutionError
│   └── VideoUnavailableError
├── SelectionError
├── TransferError
├── TranscodeError
├── ExportError
├── ConfigurationError
└── EnvironmentError
    └── FfmpegNotFoundError
"""

from __future__ import annotations


class TubegrabError(Exception):
    """Base exception for all tubegrab errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Input validation ------------------------------------------------------

class ValidationError(TubegrabError):
    """Raised before a job starts when its input is unusable."""


class InvalidURLError(ValidationError):
    """Raised when the provided URL is empty or cannot be parsed."""


class UnsupportedModeError(ValidationError):
    """Raised when the requested output mode is not one we know."""


# --- Metadata / manifest resolution ----------------------------------------

class ResolutionError(TubegrabError):
    """Raised when metadata or the stream manifest cannot be resolved."""


class VideoUnavailableError(ResolutionError):
    """Raised when the target video is unavailable (private, removed, etc.)."""


# --- Pipeline stages -------------------------------------------------------

class SelectionError(TubegrabError):
    """Raised when no stream in the required partition is available."""


class TransferError(TubegrabError):
    """Raised when copying a remote byte stream to disk fails."""


class TranscodeError(TubegrabError):
    """Raised when the external transcoder cannot produce its output.

    ``output`` holds the combined stdout/stderr captured from the tool,
    ``returncode`` its exit status (``None`` when it never ran to
    completion).
    """

    def __init__(
        self,
        message: str,
        *,
        output: str = "",
        returncode: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.output: str = output
        self.returncode: int | None = returncode


class ExportError(TubegrabError):
    """Raised when the storage sink refuses or fails to persist a file."""


# --- Configuration ---------------------------------------------------------

class ConfigurationError(TubegrabError):
    """Raised when a setting cannot be parsed."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(TubegrabError):
    """Raised when a required runtime dependency is not available."""


class FfmpegNotFoundError(EnvironmentError):
    """Raised when ffmpeg cannot be located on the system PATH."""


def append_ytdlp_upgrade_suggestion(hint: str) -> str:
    """Append yt-dlp upgrade guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "Also try updating yt-dlp:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    pip install --upgrade yt-dlp",
        )
    )
