"""Copy a remote byte stream into a local file, reporting progress.

The fetcher never buffers a whole stream: each chunk is written as it
arrives, so memory use is bounded by the chunk size of the source.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from tubegrab.core.protocols import ProgressCallback
from tubegrab.exceptions import TransferError, TubegrabError

log = logging.getLogger(__name__)


def fetch(
    chunks: Iterable[bytes],
    total_bytes: int,
    destination: Path,
    on_progress: ProgressCallback | None = None,
) -> None:
    """Write every chunk of *chunks* to *destination*, in order.

    Any file already at *destination* is removed first, so re-running a
    fetch never appends to a previous attempt.  While bytes arrive,
    ``received / total_bytes`` is reported when *total_bytes* is known
    (> 0); on success exactly one final ``1.0`` is reported.

    The destination handle is closed on every exit path.  A partially
    written file may remain after a failure.

    Raises
    ------
    TransferError
        On any I/O or transport failure.
    """
    received = 0
    try:
        remove_stale(destination)
        with destination.open("xb") as handle:
            for chunk in chunks:
                handle.write(chunk)
                received += len(chunk)
                if on_progress is not None and total_bytes > 0:
                    fraction = received / total_bytes
                    # 1.0 is reserved for the completion report below.
                    if fraction < 1.0:
                        on_progress(fraction)
    except TubegrabError:
        raise
    except Exception as exc:
        raise TransferError(
            f"Download to {destination.name} failed after {received} bytes: {exc}",
            hint="Check your network connection and retry.",
        ) from exc
    finally:
        close = getattr(chunks, "close", None)
        if callable(close):
            close()

    log.debug("Fetched %d bytes into %s", received, destination)
    if on_progress is not None:
        on_progress(1.0)


def remove_stale(path: Path) -> None:
    """Delete a leftover file at *path*; a missing file is not an error."""
    if path.exists():
        log.debug("Removing stale file %s", path)
        path.unlink()


def discard(path: Path) -> None:
    """Best-effort removal of an intermediate file.

    Failures are logged and ignored: cleanup must never fail a job.
    """
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        log.debug("Could not remove temporary file %s: %s", path, exc)
