"""CLI application entry point and command routing for tubegrab.

This module is the **sole error boundary** for the entire application.
It catches :class:`~tubegrab.exceptions.TubegrabError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core/service
  and infrastructure layers.
* ``print()`` is forbidden outside the CLI layer; Rich console is used
  exclusively.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

from tubegrab.cli import exit_codes
from tubegrab.cli.console import console
from tubegrab.config import Settings
from tubegrab.core.models import JobMode
from tubegrab.exceptions import TubegrabError
from tubegrab.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Sub-commands are not used; the CLI supports:
    * ``tubegrab <url>``                 — analyze, pick a mode, download
    * ``tubegrab <url> --analyze-only``  — show video details only
    * ``tubegrab doctor``                — environment diagnostics
    * ``tubegrab --version``
    """
    parser = argparse.ArgumentParser(
        prog="tubegrab",
        description="Single-video downloader: MP3 audio, merged or muxed MP4.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="Video URL (or bare YouTube id) to download, or 'doctor' to run diagnostics.",
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=[mode.value for mode in JobMode],
        default=None,
        help="Output mode; prompts interactively when omitted.",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=None,
        help="Directory receiving finished files (overrides TUBEGRAB_OUTPUT_DIR).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Limit for each ffmpeg run; 0 disables it (overrides TUBEGRAB_TRANSCODE_TIMEOUT).",
    )
    parser.add_argument(
        "--analyze-only",
        action="store_true",
        help="Show the video's details and exit without downloading.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Show more log output (-vv for debug).",
    )
    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return *settings* with the command-line flags applied."""
    changes: dict[str, object] = {}
    if args.output_dir is not None:
        changes["output_dir"] = args.output_dir
    if args.timeout is not None:
        if args.timeout < 0:
            from tubegrab.exceptions import ConfigurationError

            raise ConfigurationError("--timeout must not be negative.")
        changes["transcode_timeout"] = args.timeout or None
    return dataclasses.replace(settings, **changes) if changes else settings


# ---------------------------------------------------------------------------
# Command dispatch (no business logic)
# ---------------------------------------------------------------------------

def _handle_download(url: str, args: argparse.Namespace) -> int:
    """Dispatch a single-video download.

    Flow:
    1. Load settings and apply command-line overrides.
    2. Analyze the URL and display the video's details.
    3. Resolve the output mode from ``--mode`` or an interactive prompt.
    4. Wire infra adapters into a job service and run the job with Rich
       progress.
    """
    from tubegrab.cli.mode_prompt import prompt_mode_selection, render_analysis
    from tubegrab.cli.progress import RichJobProgress
    from tubegrab.config import load_settings
    from tubegrab.core.analysis_service import AnalysisService
    from tubegrab.core.job_service import JobService
    from tubegrab.core.job_state import JobState
    from tubegrab.core.manifest_service import ManifestService
    from tubegrab.infra.directory_sink import DirectorySink
    from tubegrab.infra.ffmpeg_transcoder import FfmpegTranscoder
    from tubegrab.infra.ytdlp_byte_source import YtDlpByteSource
    from tubegrab.infra.ytdlp_provider import YtDlpMetadataProvider

    settings = _apply_overrides(load_settings(), args)

    resolver = ManifestService(YtDlpMetadataProvider())

    console.print(f"\n[bold]Analyzing…[/bold]  {url}")
    media = AnalysisService(resolver).analyze(url)
    render_analysis(media)

    if args.analyze_only:
        return exit_codes.SUCCESS

    mode = JobMode.parse(args.mode) if args.mode else prompt_mode_selection()

    sink = DirectorySink(settings.output_dir)
    service = JobService(
        resolver,
        YtDlpByteSource(chunk_size=settings.chunk_size),
        FfmpegTranscoder(settings.ffmpeg_path, timeout=settings.transcode_timeout),
        sink,
        scratch_dir=settings.scratch_dir,
    )

    console.print(f"[bold green]Starting {mode.value} download…[/bold green]\n")

    with service:
        service.request_storage_access()
        with RichJobProgress(JobState(settings.log_lines)) as display:
            artifact = service.download_video(url, mode, **display.callbacks())

    console.print(
        f"\n[bold green]Saved:[/bold green] {sink.directory / artifact.name}"
    )
    return exit_codes.SUCCESS


def _handle_doctor() -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from tubegrab.cli.doctor import run_doctor
    from tubegrab.config import load_settings

    return run_doctor(load_settings())


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the tubegrab CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.target is None:
        parser.print_help()
        return exit_codes.SUCCESS

    from tubegrab.cli.log_setup import configure_logging

    configure_logging(args.verbose)

    target: str = args.target

    if target.lower() == "doctor":
        return _handle_doctor()

    return _handle_download(target, args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except TubegrabError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
