"""Purge command implementation.

Removes undeclared users and groups that no exemption rule protects.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from sweepctl.cli.types import KindChoice, get_kinds, load_manifest_or_exit, plan_or_exit
from sweepctl.core.executor import apply_actions, get_operators
from sweepctl.models.action import PurgeAction, PurgeActionResult
from sweepctl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Purge undeclared users and groups.",
    invoke_without_command=True,
)


def _create_actions_table(actions: tuple[PurgeAction, ...], dry_run: bool) -> Table:
    """Create a Rich table displaying planned purge actions.

    Args:
        actions: Actions to display.
        dry_run: Whether this is a dry-run.

    Returns:
        Rich Table configured for action display.
    """
    title = "Planned Purges (Dry Run)" if dry_run else "Planned Purges"

    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Kind", width=6)
    table.add_column("Name", no_wrap=True)
    table.add_column("Id", style="muted", justify="right")
    table.add_column("Note")

    for action in actions:
        table.add_row(
            action.kind.value,
            f"[purge]{escape(action.name)}[/purge]",
            str(action.entity_id) if action.entity_id is not None else "-",
            "[muted]noop[/muted]" if action.noop else "",
        )

    return table


def _print_results(results: list[PurgeActionResult]) -> None:
    """Print per-action results and a summary line.

    Args:
        results: Results returned by apply_actions().
    """
    for result in results:
        label = escape(result.action.label)
        if result.failed:
            print_error(f"Failed to remove {label}: {escape(result.error or 'unknown error')}")
        elif result.action.noop:
            console.print(f"[muted]noop: {label} not removed[/muted]")
        elif result.dry_run:
            console.print(f"[info]Would remove {label}[/info]")
        else:
            console.print(f"[success]Removed {label}[/success]")

    failed = sum(1 for r in results if r.failed)
    succeeded = len(results) - failed
    if failed:
        print_warning(f"{succeeded} succeeded, {failed} failed.")
    else:
        print_success(f"{succeeded} action(s) completed.")


@app.callback(invoke_without_command=True)
def purge_entities(
    ctx: typer.Context,
    kind: Annotated[
        KindChoice,
        typer.Option(
            "--kind",
            "-k",
            help="Entity kind to purge: user, group, or all.",
            case_sensitive=False,
        ),
    ] = KindChoice.ALL,
    manifest_path: Annotated[
        Path | None,
        typer.Option(
            "--manifest",
            "-m",
            help="Path to the manifest file.",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be removed without removing anything.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt.",
        ),
    ] = False,
) -> None:
    """Purge undeclared users and groups.

    The full plan is computed before anything is removed. Entities are
    removed one at a time; a failure does not stop the remaining removals.

    Examples:
        sweepctl purge --dry-run       # Preview removals
        sweepctl purge --kind user     # Purge users only
        sweepctl purge -y              # Purge without confirmation
    """
    if ctx.invoked_subcommand is not None:
        return

    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    manifest = load_manifest_or_exit(manifest_path)
    plan = plan_or_exit(manifest, get_kinds(kind), quiet=quiet)

    actions = plan.actions
    if not actions:
        print_success("Nothing to purge.")
        return

    console.print(_create_actions_table(actions, dry_run))

    if not dry_run and not yes:
        confirmed = typer.confirm(f"Remove {len(actions)} entities?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    operators = get_operators({action.kind for action in actions}, dry_run=dry_run)
    results = apply_actions(list(actions), operators)
    _print_results(results)

    if any(r.failed for r in results):
        raise typer.Exit(code=1)
