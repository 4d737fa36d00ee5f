"""Rich-based job display driven by the job service callbacks.

This module bridges the ``on_log`` / ``on_progress`` / ``on_status``
callbacks of :meth:`~tubegrab.core.job_service.JobService.download_video`
with a Rich :class:`~rich.progress.Progress` bar.  Every event is also
recorded in a :class:`~tubegrab.core.job_state.JobState`, so the caller
can inspect the final status and the log tail after the job.

Design
------
* The bar describes the current status; its fraction follows the
  current transfer and restarts for every stream.
* Log lines are printed above the live bar.
* Shutdown-safe: once the display is stopped, events are still recorded
  but nothing is rendered.
* No ``print()`` — Rich handles all rendering.
"""

from __future__ import annotations

from typing import Any

from tubegrab.cli.console import get_rich_console
from tubegrab.core.job_state import JobState
from tubegrab.core.models import JobStatus
from tubegrab.exceptions import EnvironmentError

_PERCENT_TOTAL: int = 100

STATUS_LABELS: dict[JobStatus, str] = {
    JobStatus.IDLE: "Waiting",
    JobStatus.DOWNLOADING: "Downloading",
    JobStatus.CONVERTING: "Converting",
    JobStatus.EXPORTING: "Exporting",
    JobStatus.DONE: "Done",
    JobStatus.ERROR: "Failed",
}


class RichJobProgress:
    """Callback adapter rendering one job with Rich.

    Usage::

        with RichJobProgress(JobState()) as display:
            service.download_video(url, mode, **display.callbacks())
    """

    def __init__(self, state: JobState) -> None:
        try:
            from rich.progress import (
                BarColumn,
                Progress,
                SpinnerColumn,
                TaskProgressColumn,
                TextColumn,
                TimeElapsedColumn,
            )
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "rich is not installed. Install with: pip install rich",
            ) from exc

        self._state: JobState = state
        self._progress: Any = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=get_rich_console(),
            transient=False,
        )
        self._task_id: Any = None
        self._started: bool = False

    @property
    def state(self) -> JobState:
        return self._state

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> RichJobProgress:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the Rich progress display."""
        if not self._started:
            self._progress.start()
            self._task_id = self._progress.add_task(
                STATUS_LABELS[self._state.status],
                total=_PERCENT_TOTAL,
            )
            self._started = True

    def stop(self) -> None:
        """Stop the Rich progress display (idempotent)."""
        if self._started:
            self._progress.stop()
            self._started = False

    # ------------------------------------------------------------------
    # Job callbacks
    # ------------------------------------------------------------------

    def on_log(self, line: str) -> None:
        self._state.on_log(line)
        if self._started:
            self._progress.console.print(line, markup=False, highlight=False)

    def on_progress(self, fraction: float) -> None:
        self._state.on_progress(fraction)
        if self._started:
            self._progress.update(
                self._task_id,
                completed=self._state.progress * _PERCENT_TOTAL,
            )

    def on_status(self, status: JobStatus) -> None:
        self._state.on_status(status)
        if not self._started:
            return
        if status is JobStatus.DONE:
            self._progress.update(
                self._task_id,
                description=STATUS_LABELS[status],
                completed=_PERCENT_TOTAL,
            )
        else:
            self._progress.update(self._task_id, description=STATUS_LABELS[status])

    def callbacks(self) -> dict[str, Any]:
        """Keyword arguments wiring this display into ``download_video``."""
        return {
            "on_log": self.on_log,
            "on_progress": self.on_progress,
            "on_status": self.on_status,
        }
