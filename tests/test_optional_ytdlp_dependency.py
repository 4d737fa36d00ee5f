"""Regression tests for optional yt-dlp dependency boundaries.

These tests ensure CLI paths that do not require yt-dlp still work when
yt-dlp is absent, while runtime extraction/transfer paths fail cleanly
with a typed environment error.
"""

from __future__ import annotations

import sys

import pytest

from tubegrab.cli import exit_codes
from tubegrab.cli.app import main
from tubegrab.core.models import StreamLocator
from tubegrab.exceptions import EnvironmentError
from tubegrab.infra.ytdlp_byte_source import YtDlpByteSource
from tubegrab.infra.ytdlp_provider import YtDlpMetadataProvider


def _remove_ytdlp(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "yt_dlp", None)
    monkeypatch.setitem(sys.modules, "yt_dlp.utils", None)
    monkeypatch.setitem(sys.modules, "yt_dlp.version", None)
    monkeypatch.setitem(sys.modules, "yt_dlp.networking", None)
    monkeypatch.setitem(sys.modules, "yt_dlp.networking.exceptions", None)


def test_help_works_without_ytdlp(monkeypatch: pytest.MonkeyPatch) -> None:
    _remove_ytdlp(monkeypatch)
    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_ytdlp(monkeypatch: pytest.MonkeyPatch) -> None:
    _remove_ytdlp(monkeypatch)
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_doctor_works_without_ytdlp(monkeypatch: pytest.MonkeyPatch) -> None:
    _remove_ytdlp(monkeypatch)
    code = main(["doctor"])
    assert code == exit_codes.GENERAL_ERROR


def test_metadata_extraction_raises_environment_error_without_ytdlp(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _remove_ytdlp(monkeypatch)
    provider = YtDlpMetadataProvider()

    with pytest.raises(EnvironmentError, match="yt-dlp is not installed"):
        provider.fetch_info("https://www.youtube.com/watch?v=dQw4w9WgXcQ")


def test_byte_source_raises_environment_error_without_ytdlp(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _remove_ytdlp(monkeypatch)
    source = YtDlpByteSource()

    with pytest.raises(EnvironmentError, match="yt-dlp is not installed"):
        next(source.iter_bytes(StreamLocator(url="https://cdn.example/v")))
