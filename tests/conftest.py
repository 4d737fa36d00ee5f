"""Shared pytest fixtures and configuration for the tubegrab test suite.

Guidelines
----------
* No internet access in any test.
* yt-dlp and ffmpeg must be mocked at the infra boundary.
* Core tests must be pure — files only under ``tmp_path``.
* Tests must not depend on OS state.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def _restore_tubegrab_logger() -> Iterator[None]:
    """Undo handlers and levels installed by ``configure_logging``."""
    logger = logging.getLogger("tubegrab")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture(autouse=True)
def _isolated_environment(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path_factory: pytest.TempPathFactory,
) -> None:
    """Keep real ``TUBEGRAB_*`` variables and ``.env`` files out of tests."""
    for name in list(os.environ):
        if name.startswith("TUBEGRAB_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))
