"""Analysis display and interactive mode selection for the CLI layer.

This module is responsible for:

* Rendering a Rich table with the analysed video's details.
* Prompting the user to pick an output mode via questionary arrow keys.
* Returning the selected :class:`~tubegrab.core.models.JobMode`.

All display-related logic lives here — no business logic, no
downloading, no metadata parsing.
"""

from __future__ import annotations

from typing import Any

from tubegrab.cli.console import console
from tubegrab.core.models import JobMode, MediaDescriptor
from tubegrab.exceptions import EnvironmentError
from tubegrab.utils.formatting import format_duration

MODE_DESCRIPTIONS: dict[JobMode, str] = {
    JobMode.AUDIO: "MP3 audio (best audio track, re-encoded)",
    JobMode.MERGE: "Best quality video (separate tracks merged into MP4)",
    JobMode.MUXED: "Quick video (single pre-muxed stream, no conversion)",
}


def _import_questionary() -> Any:
    """Import questionary lazily for interactive selection."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def _import_rich_table() -> type[Any]:
    """Import rich table lazily for analysis rendering."""
    try:
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Table


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms, no I/O)
# ---------------------------------------------------------------------------

def _build_choice_label(mode: JobMode) -> str:
    """Build the single-line label shown in the questionary selector.

    Format: ``"audio   MP3 audio (best audio track, re-encoded)"``
    """
    return f"{mode.value:<7} {MODE_DESCRIPTIONS[mode]}"


def _analysis_rows(media: MediaDescriptor) -> list[tuple[str, str]]:
    rows = [
        ("Title", media.title),
        ("Channel", media.author),
        ("Duration", format_duration(media.duration)),
    ]
    if media.thumbnail_url:
        rows.append(("Thumbnail", media.thumbnail_url))
    return rows


# ---------------------------------------------------------------------------
# Rich table display
# ---------------------------------------------------------------------------

def render_analysis(media: MediaDescriptor) -> None:
    """Print a Rich table summarising the analysed video."""
    table_class = _import_rich_table()

    table = table_class(
        title="Video",
        show_header=False,
        border_style="dim",
    )
    table.add_column("Field", style="bold cyan", min_width=10)
    table.add_column("Value", overflow="fold")

    for label, value in _analysis_rows(media):
        table.add_row(label, value)

    console.print()
    console.print(table)
    console.print()


# ---------------------------------------------------------------------------
# Public prompt function
# ---------------------------------------------------------------------------

def prompt_mode_selection() -> JobMode:
    """Prompt the user for an output mode.

    Returns
    -------
    JobMode
        The user's chosen mode.

    Raises
    ------
    KeyboardInterrupt
        If the user presses Ctrl+C during selection.
    ValidationError
        If the user cancels the prompt (Esc / None return).
    """
    from tubegrab.exceptions import ValidationError

    questionary = _import_questionary()

    choices = [
        questionary.Choice(title=_build_choice_label(mode), value=mode.value)
        for mode in JobMode
    ]

    selected: str | None = questionary.select(
        "Select what to download:",
        choices=choices,
        use_arrow_keys=True,
        use_shortcuts=False,
    ).ask()  # Returns None on Ctrl+C / Esc

    if selected is None:
        raise ValidationError(
            "No mode selected.",
            hint="Use arrow keys to pick a mode, or pass --mode.",
        )

    return JobMode.parse(selected)
