"""Smoke tests — verify scaffold wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from tubegrab import __version__
from tubegrab.cli import exit_codes
from tubegrab.cli.app import cli, main
from tubegrab.exceptions import (
    ConfigurationError,
    EnvironmentError,
    ExportError,
    FfmpegNotFoundError,
    InvalidURLError,
    ResolutionError,
    SelectionError,
    TranscodeError,
    TransferError,
    TubegrabError,
    UnsupportedModeError,
    ValidationError,
    VideoUnavailableError,
    append_ytdlp_upgrade_suggestion,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_string(self) -> None:
        assert isinstance(__version__, str)

    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            ValidationError,
            InvalidURLError,
            UnsupportedModeError,
            ResolutionError,
            VideoUnavailableError,
            SelectionError,
            TransferError,
            TranscodeError,
            ExportError,
            ConfigurationError,
            EnvironmentError,
            FfmpegNotFoundError,
        ],
    )
    def test_all_exceptions_inherit_from_base(
        self, exc_class: type[TubegrabError]
    ) -> None:
        assert issubclass(exc_class, TubegrabError)

    @pytest.mark.parametrize(
        ("child", "parent"),
        [
            (InvalidURLError, ValidationError),
            (UnsupportedModeError, ValidationError),
            (VideoUnavailableError, ResolutionError),
            (FfmpegNotFoundError, EnvironmentError),
        ],
    )
    def test_grouping(self, child: type, parent: type) -> None:
        assert issubclass(child, parent)

    def test_base_inherits_from_exception(self) -> None:
        assert issubclass(TubegrabError, Exception)

    def test_hint_is_stored(self) -> None:
        err = TubegrabError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        err = TubegrabError("boom")
        assert err.hint is None

    def test_transcode_error_carries_output(self) -> None:
        err = TranscodeError("failed", output="Invalid data", returncode=1)
        assert err.output == "Invalid data"
        assert err.returncode == 1
        assert err.hint is None

    def test_transcode_error_defaults(self) -> None:
        err = TranscodeError("failed")
        assert err.output == ""
        assert err.returncode is None


class TestUpgradeSuggestion:
    def test_appended_once(self) -> None:
        hint = append_ytdlp_upgrade_suggestion("Check the URL.")
        assert hint.startswith("Check the URL.")
        assert "pip install --upgrade yt-dlp" in hint
        assert append_ytdlp_upgrade_suggestion(hint) == hint


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_success_is_zero(self) -> None:
        assert exit_codes.SUCCESS == 0

    def test_general_error_is_one(self) -> None:
        assert exit_codes.GENERAL_ERROR == 1

    def test_keyboard_interrupt_is_130(self) -> None:
        assert exit_codes.KEYBOARD_INTERRUPT == 130

    def test_unexpected_error_is_two(self) -> None:
        assert exit_codes.UNEXPECTED_ERROR == 2


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestCLIRouting:
    def test_no_args_returns_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        """No arguments should print help and exit 0."""
        code = main([])
        assert code == exit_codes.SUCCESS
        assert "usage: tubegrab" in capsys.readouterr().out

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    def test_unknown_mode_rejected_by_parser(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["https://youtu.be/dQw4w9WgXcQ", "--mode", "flac"])
        assert exc_info.value.code == 2

    @patch("tubegrab.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_returns_success(self, _mock_doc: object) -> None:
        code = main(["doctor"])
        assert code == exit_codes.SUCCESS

    def test_url_returns_success(
        self, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """URL argument should route to _handle_download (mocked)."""
        from tubegrab.cli import app as app_module

        seen: list[str] = []

        def fake_download(url: str, _args: object) -> int:
            seen.append(url)
            return exit_codes.SUCCESS

        monkeypatch.setattr(app_module, "_handle_download", fake_download)
        code = main(["https://www.youtube.com/watch?v=dQw4w9WgXcQ"])
        assert code == exit_codes.SUCCESS
        assert seen == ["https://www.youtube.com/watch?v=dQw4w9WgXcQ"]


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    @patch("tubegrab.cli.app.main", side_effect=InvalidURLError("bad", hint="fix it"))
    def test_known_error_exits_one(
        self, _mock_main: object, capsys: pytest.CaptureFixture[str],
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "bad" in err
        assert "fix it" in err

    @patch("tubegrab.cli.app.main", side_effect=KeyboardInterrupt)
    def test_keyboard_interrupt_exits_130(self, _mock_main: object) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.KEYBOARD_INTERRUPT

    @patch("tubegrab.cli.app.main", side_effect=RuntimeError("kaboom"))
    def test_unexpected_error_exits_two(self, _mock_main: object) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.UNEXPECTED_ERROR

    @patch("tubegrab.cli.app.main", return_value=exit_codes.SUCCESS)
    def test_success_exits_zero(self, _mock_main: object) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.SUCCESS
