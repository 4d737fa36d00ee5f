"""Tests for the CLI download flow (cli/app.py).

Infra adapters and services are patched where ``_handle_download``
imports them — no network, no ffmpeg, no terminal prompts.

Coverage:
* Analyze-only flow.
* ``--mode`` skips the interactive prompt; no ``--mode`` prompts.
* Settings overrides from ``--output-dir`` / ``--timeout``.
* Errors raised by the job propagate to the error boundary.
"""

from __future__ import annotations

import argparse
from datetime import timedelta
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from tubegrab.cli import exit_codes
from tubegrab.cli.app import _apply_overrides, main
from tubegrab.config import Settings
from tubegrab.core.models import JobMode, MediaDescriptor
from tubegrab.exceptions import ConfigurationError, SelectionError

URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def _media() -> MediaDescriptor:
    return MediaDescriptor(
        title="Test Video",
        author="Test Channel",
        duration=timedelta(seconds=120),
        thumbnail_url="https://t/max.jpg",
    )


def _args(**overrides: Any) -> argparse.Namespace:
    defaults: dict[str, Any] = {"output_dir": None, "timeout": None}
    defaults.update(overrides)
    return argparse.Namespace(**defaults)


class _Wiring:
    """Starts every patch ``_handle_download`` needs and exposes the mocks."""

    TARGETS: dict[str, str] = {
        "provider": "tubegrab.infra.ytdlp_provider.YtDlpMetadataProvider",
        "manifest": "tubegrab.core.manifest_service.ManifestService",
        "analysis": "tubegrab.core.analysis_service.AnalysisService",
        "render": "tubegrab.cli.mode_prompt.render_analysis",
        "prompt": "tubegrab.cli.mode_prompt.prompt_mode_selection",
        "job": "tubegrab.core.job_service.JobService",
        "byte_source": "tubegrab.infra.ytdlp_byte_source.YtDlpByteSource",
        "transcoder": "tubegrab.infra.ffmpeg_transcoder.FfmpegTranscoder",
        "sink": "tubegrab.infra.directory_sink.DirectorySink",
        "progress": "tubegrab.cli.progress.RichJobProgress",
    }

    def __init__(self) -> None:
        self._patchers = {name: patch(target) for name, target in self.TARGETS.items()}
        self.mocks: dict[str, MagicMock] = {}

    def __enter__(self) -> dict[str, MagicMock]:
        for name, patcher in self._patchers.items():
            self.mocks[name] = patcher.start()
        self.mocks["analysis"].return_value.analyze.return_value = _media()
        self.mocks["prompt"].return_value = JobMode.MUXED

        service = self.mocks["job"].return_value
        service.__enter__.return_value = service
        service.__exit__.return_value = False
        service.download_video.return_value = Path("/scratch/Test Video.muxed.mp4")

        display = self.mocks["progress"].return_value
        display.__enter__.return_value = display
        display.__exit__.return_value = False
        display.callbacks.return_value = {"on_log": None}

        self.mocks["sink"].return_value.directory = Path("/out")
        return self.mocks

    def __exit__(self, *_args: object) -> None:
        for patcher in self._patchers.values():
            patcher.stop()


# ---------------------------------------------------------------------------
# Flows
# ---------------------------------------------------------------------------

class TestAnalyzeOnly:
    def test_renders_and_stops(self) -> None:
        with _Wiring() as mocks:
            code = main([URL, "--analyze-only"])

        assert code == exit_codes.SUCCESS
        mocks["analysis"].return_value.analyze.assert_called_once_with(URL)
        mocks["render"].assert_called_once_with(_media())
        mocks["job"].assert_not_called()
        mocks["prompt"].assert_not_called()


class TestDownload:
    def test_mode_flag_skips_prompt(self) -> None:
        with _Wiring() as mocks:
            code = main([URL, "--mode", "audio"])

        assert code == exit_codes.SUCCESS
        mocks["prompt"].assert_not_called()
        service = mocks["job"].return_value
        service.request_storage_access.assert_called_once()
        service.download_video.assert_called_once_with(URL, JobMode.AUDIO, on_log=None)
        service.__exit__.assert_called_once()

    def test_prompt_used_without_mode(self) -> None:
        with _Wiring() as mocks:
            main([URL])

        mocks["prompt"].assert_called_once()
        mocks["job"].return_value.download_video.assert_called_once_with(
            URL, JobMode.MUXED, on_log=None,
        )

    def test_services_share_one_resolver(self) -> None:
        with _Wiring() as mocks:
            main([URL, "--mode", "muxed"])

        resolver = mocks["manifest"].return_value
        mocks["analysis"].assert_called_once_with(resolver)
        assert mocks["job"].call_args.args[0] is resolver

    def test_settings_flow_into_adapters(self, tmp_path: Path) -> None:
        with _Wiring() as mocks:
            main([URL, "--mode", "merge", "-o", str(tmp_path), "--timeout", "0"])

        mocks["sink"].assert_called_once_with(tmp_path)
        mocks["transcoder"].assert_called_once_with(None, timeout=None)
        mocks["byte_source"].assert_called_once_with(chunk_size=Settings().chunk_size)

    def test_environment_settings_used(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path,
    ) -> None:
        monkeypatch.setenv("TUBEGRAB_FFMPEG", "/opt/ffmpeg")
        monkeypatch.setenv("TUBEGRAB_SCRATCH_DIR", str(tmp_path / "scratch"))
        with _Wiring() as mocks:
            main([URL, "--mode", "audio"])

        mocks["transcoder"].assert_called_once_with("/opt/ffmpeg", timeout=3600.0)
        assert mocks["job"].call_args.kwargs["scratch_dir"] == tmp_path / "scratch"

    def test_job_errors_propagate(self) -> None:
        with _Wiring() as mocks:
            mocks["job"].return_value.download_video.side_effect = SelectionError("none")
            with pytest.raises(SelectionError):
                main([URL, "--mode", "merge"])
            mocks["job"].return_value.__exit__.assert_called_once()

    def test_verbose_sets_log_level(self) -> None:
        import logging

        with _Wiring():
            main([URL, "--analyze-only", "-vv"])
        assert logging.getLogger("tubegrab").level == logging.DEBUG


# ---------------------------------------------------------------------------
# Overrides
# ---------------------------------------------------------------------------

class TestApplyOverrides:
    def test_no_flags_returns_same_settings(self) -> None:
        settings = Settings()
        assert _apply_overrides(settings, _args()) is settings

    def test_output_dir_and_timeout(self, tmp_path: Path) -> None:
        result = _apply_overrides(Settings(), _args(output_dir=tmp_path, timeout=12.5))
        assert result.output_dir == tmp_path
        assert result.transcode_timeout == 12.5

    def test_zero_timeout_disables(self) -> None:
        assert _apply_overrides(Settings(), _args(timeout=0.0)).transcode_timeout is None

    def test_negative_timeout_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            _apply_overrides(Settings(), _args(timeout=-1.0))
