"""ffmpeg backed implementation of :class:`~tubegrab.core.protocols.Transcoder`.

ffmpeg runs as an isolated subprocess with an argument vector — never a
shell string — so file names containing quotes, spaces or shell
metacharacters reach it verbatim.  Launch failures, non-zero exits and
timeouts are all reported as :class:`~tubegrab.exceptions.TranscodeError`
with the captured output attached.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from tubegrab.exceptions import FfmpegNotFoundError, TranscodeError
from tubegrab.infra.ffmpeg_detector import require_ffmpeg

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT: float = 3600.0
"""Seconds a single ffmpeg run may take before it is killed."""

_OUTPUT_TAIL_CHARS: int = 4000


class FfmpegTranscoder:
    """Runs ffmpeg to completion and checks its exit status.

    Parameters
    ----------
    executable:
        Path or command name of the ffmpeg binary.  When ``None`` it is
        located on PATH at the first :meth:`run`.
    timeout:
        Seconds to wait for each run; ``None`` waits forever.
    """

    def __init__(
        self,
        executable: str | Path | None = None,
        *,
        timeout: float | None = DEFAULT_TIMEOUT,
    ) -> None:
        self._configured = executable
        self._executable: Path | None = None
        self._timeout = timeout

    def _resolve_executable(self) -> Path:
        if self._executable is None:
            self._executable = require_ffmpeg(self._configured)
        return self._executable

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def run(self, arguments: Sequence[str]) -> None:
        """Run ``ffmpeg *arguments`` and wait for it.

        Raises
        ------
        TranscodeError
            When ffmpeg is missing, cannot be launched, exits non-zero,
            or exceeds the timeout.
        """
        try:
            executable = self._resolve_executable()
        except FfmpegNotFoundError as exc:
            raise TranscodeError(str(exc), hint=exc.hint) from exc

        command = [str(executable), *arguments]
        log.debug("Running %s", command)

        try:
            completed = subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise TranscodeError(
                f"ffmpeg did not finish within {self._timeout:g} seconds.",
                output=_tail(_decode(exc.output)),
                hint="Raise TUBEGRAB_TRANSCODE_TIMEOUT or pass --timeout.",
            ) from exc
        except OSError as exc:
            raise TranscodeError(
                f"Could not launch ffmpeg: {exc}",
                output=str(exc),
            ) from exc

        if completed.returncode != 0:
            raise TranscodeError(
                f"ffmpeg failed with exit code {completed.returncode}.",
                output=_tail(completed.stdout or ""),
                returncode=completed.returncode,
            )


# ---------------------------------------------------------------------------
# Utility
# ---------------------------------------------------------------------------

def _decode(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


def _tail(output: str) -> str:
    """Keep the end of ffmpeg's output, where the actual error is printed."""
    if len(output) <= _OUTPUT_TAIL_CHARS:
        return output
    return "…" + output[-_OUTPUT_TAIL_CHARS:]
