"""Observer recording what one caller sees of its jobs.

:class:`JobState` is the plain-Python stand-in for the status, progress
and log panels of a UI.  Pass :meth:`JobState.callbacks` to
:meth:`~tubegrab.core.job_service.JobService.download_video`::

    state = JobState()
    service.download_video(url, "audio", **state.callbacks())
    assert state.status is JobStatus.DONE
"""

from __future__ import annotations

from collections import deque
from typing import Any

from tubegrab.core.models import JobStatus

DEFAULT_MAX_LOG_LINES: int = 200


class JobState:
    """Status, progress fraction and a bounded log for the current job.

    The log is a ring buffer: once *max_log_lines* lines are held, the
    oldest line is dropped for each new one.  Progress is reset to
    ``0.0`` whenever a job enters ``downloading``.
    """

    def __init__(self, max_log_lines: int = DEFAULT_MAX_LOG_LINES) -> None:
        if max_log_lines < 1:
            raise ValueError("max_log_lines must be at least 1")
        self._log: deque[str] = deque(maxlen=max_log_lines)
        self._status: JobStatus = JobStatus.IDLE
        self._progress: float = 0.0
        self._history: list[JobStatus] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def status(self) -> JobStatus:
        return self._status

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def log_lines(self) -> tuple[str, ...]:
        return tuple(self._log)

    @property
    def history(self) -> tuple[JobStatus, ...]:
        """Statuses entered by the current (or last) job, in order."""
        return tuple(self._history)

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def on_log(self, line: str) -> None:
        self._log.append(line)

    def on_progress(self, fraction: float) -> None:
        self._progress = min(1.0, max(0.0, fraction))

    def on_status(self, status: JobStatus) -> None:
        if status is JobStatus.DOWNLOADING and (
            self._status is JobStatus.IDLE or self._status.is_terminal
        ):
            self._history.clear()
            self._progress = 0.0
        self._history.append(status)
        self._status = status

    def callbacks(self) -> dict[str, Any]:
        """Keyword arguments wiring this state into ``download_video``."""
        return {
            "on_log": self.on_log,
            "on_progress": self.on_progress,
            "on_status": self.on_status,
        }

    def clear_log(self) -> None:
        self._log.clear()
