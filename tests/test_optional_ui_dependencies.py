"""Regression tests for optional CLI UI dependencies (rich/questionary).

These tests verify bootstrap commands are resilient when optional UI
packages are missing, and download flows fail cleanly only when UI paths
are actually exercised.
"""

from __future__ import annotations

import sys
from datetime import timedelta
from unittest.mock import patch

import pytest

from tubegrab.cli import exit_codes
from tubegrab.cli.app import main
from tubegrab.core.models import MediaDescriptor
from tubegrab.exceptions import EnvironmentError


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "rich", None)
    monkeypatch.setitem(sys.modules, "rich.console", None)
    monkeypatch.setitem(sys.modules, "rich.logging", None)
    monkeypatch.setitem(sys.modules, "rich.table", None)
    monkeypatch.setitem(sys.modules, "rich.progress", None)


def _hide_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "questionary", None)


def _media() -> MediaDescriptor:
    return MediaDescriptor(
        title="Test Video",
        author="Test Channel",
        duration=timedelta(seconds=120),
        thumbnail_url="",
    )


def test_help_works_without_rich_or_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    _hide_questionary(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_rich_or_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    _hide_questionary(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_doctor_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    code = main(["doctor"])
    assert code in (exit_codes.SUCCESS, exit_codes.GENERAL_ERROR)


def test_download_errors_cleanly_when_rich_missing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _hide_rich(monkeypatch)

    with patch("tubegrab.core.analysis_service.AnalysisService") as mock_analysis_cls:
        with patch("tubegrab.infra.ytdlp_provider.YtDlpMetadataProvider"):
            mock_analysis_cls.return_value.analyze.return_value = _media()

            with pytest.raises(EnvironmentError, match="rich is not installed"):
                main(["https://www.youtube.com/watch?v=dQw4w9WgXcQ", "--mode", "audio"])


def test_download_errors_cleanly_when_questionary_missing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _hide_questionary(monkeypatch)

    with patch("tubegrab.core.analysis_service.AnalysisService") as mock_analysis_cls:
        with patch("tubegrab.infra.ytdlp_provider.YtDlpMetadataProvider"):
            mock_analysis_cls.return_value.analyze.return_value = _media()

            with pytest.raises(EnvironmentError, match="questionary is not installed"):
                main(["https://www.youtube.com/watch?v=dQw4w9WgXcQ"])
