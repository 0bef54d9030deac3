"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sweepctl.core.decider import OutcomeStatus
from sweepctl.core.theme import get_theme

if TYPE_CHECKING:
    from sweepctl.core.decider import CandidateOutcome


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals, None otherwise to let
    Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())

# Display style per outcome
_STATUS_STYLES: dict[OutcomeStatus, str] = {
    OutcomeStatus.PURGE: "purge",
    OutcomeStatus.KEPT: "kept",
    OutcomeStatus.DECLARED: "declared",
    OutcomeStatus.ERROR: "error",
}


def create_outcome_table(title: str = "Purge Plan") -> Table:
    """Create a pre-configured table for displaying purge outcomes.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for outcome display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Kind", width=6)
    table.add_column("Name", no_wrap=True)
    table.add_column("Id", style="muted", justify="right")
    table.add_column("Decision", width=9)
    table.add_column("Note", style="text", overflow="ellipsis")
    return table


def format_outcome_row(outcome: CandidateOutcome) -> tuple[str, str, str, str, str]:
    """Format a candidate outcome as a table row with proper styling.

    Args:
        outcome: The outcome to format.

    Returns:
        Tuple of (kind, name, id, decision, note) with Rich markup.
    """
    style = _STATUS_STYLES[outcome.status]
    entity_id = str(outcome.entity_id) if outcome.entity_id is not None else "-"

    if outcome.reason is not None:
        note = outcome.reason.value
    elif outcome.error is not None:
        note = str(outcome.error.cause)
    elif outcome.action is not None and outcome.action.noop:
        note = "noop"
    else:
        note = "-"

    return (
        outcome.kind.value,
        f"[{style}]{escape(outcome.name)}[/]",
        entity_id,
        f"[{style}]{outcome.status.value}[/]",
        escape(note),
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
