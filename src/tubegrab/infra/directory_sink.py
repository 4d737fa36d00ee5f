"""Storage sink that copies finished files into a user-visible directory.

This is the desktop counterpart of a mobile gallery: the directory is
where the user looks for downloads.  Every filesystem failure is
re-raised as :class:`~tubegrab.exceptions.ExportError`.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from tubegrab.exceptions import ExportError

log = logging.getLogger(__name__)


class DirectorySink:
    """Concrete :class:`~tubegrab.core.protocols.StorageSink`."""

    def __init__(self, directory: Path) -> None:
        self._directory: Path = directory.expanduser()

    @property
    def directory(self) -> Path:
        return self._directory

    def request_access(self) -> None:
        """Create the directory and check that it is writable.

        Raises
        ------
        ExportError
            If the directory cannot be created or written to.
        """
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ExportError(
                f"Cannot create output directory {self._directory}: {exc}",
                hint="Choose another location with --output-dir.",
            ) from exc
        if not os.access(self._directory, os.W_OK):
            raise ExportError(
                f"Output directory is not writable: {self._directory}",
                hint="Choose another location with --output-dir.",
            )

    def export(self, path: Path) -> None:
        """Copy *path* into the directory, replacing a file of the same name.

        Raises
        ------
        ExportError
            If *path* does not exist or the copy fails.
        """
        if not path.is_file():
            raise ExportError(f"Nothing to export: {path} does not exist.")

        target = self._directory / path.name
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(path, target)
        except OSError as exc:
            raise ExportError(f"Could not save {path.name}: {exc}") from exc
        log.info("Saved %s", target)
