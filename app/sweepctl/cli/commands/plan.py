"""Plan command implementation.

Shows which undeclared users and groups would be purged and why the
others are kept.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from sweepctl.cli.types import KindChoice, get_kinds, load_manifest_or_exit, plan_or_exit
from sweepctl.core.decider import OutcomeStatus
from sweepctl.core.planner import PurgePlan
from sweepctl.utils.formatting import (
    console,
    create_outcome_table,
    format_outcome_row,
    print_success,
)

app = typer.Typer(
    help="Show what would be purged and why.",
    invoke_without_command=True,
)


def _print_summary(plan: PurgePlan) -> None:
    """Print summary line for a purge plan.

    Args:
        plan: The PurgePlan to summarize.
    """
    counts = plan.summary()
    parts = [
        f"[purge]{counts[OutcomeStatus.PURGE.value]} to purge[/purge]",
        f"[kept]{counts[OutcomeStatus.KEPT.value]} kept[/kept]",
        f"[declared]{counts[OutcomeStatus.DECLARED.value]} declared[/declared]",
    ]
    if counts[OutcomeStatus.ERROR.value]:
        parts.append(f"[error]{counts[OutcomeStatus.ERROR.value]} skipped[/error]")
    console.print(f"\nSummary: {', '.join(parts)}")


@app.callback(invoke_without_command=True)
def plan_purge_command(
    ctx: typer.Context,
    kind: Annotated[
        KindChoice,
        typer.Option(
            "--kind",
            "-k",
            help="Entity kind to plan: user, group, or all.",
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
    show_all: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Also list declared entities.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
) -> None:
    """Show the purge decision for every undeclared user and group.

    Nothing is changed on the system.

    Decisions:
      purge: Undeclared and not protected by any rule
      kept: Protected by name, id list or system threshold
      declared: Listed in the manifest (shown with --all)
      error: Could not be evaluated and is skipped

    Examples:
        sweepctl plan                  # Plan for users and groups
        sweepctl plan --kind group     # Groups only
        sweepctl plan --json           # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    quiet = json_output or bool(ctx.obj and ctx.obj.get("quiet"))
    manifest = load_manifest_or_exit(manifest_path)
    plan = plan_or_exit(manifest, get_kinds(kind), quiet=quiet)

    if json_output:
        console.print_json(json.dumps(plan.to_dict()))
        return

    outcomes = [
        o for o in plan.outcomes if show_all or o.status != OutcomeStatus.DECLARED
    ]

    if not outcomes:
        print_success("No undeclared users or groups found.")
        return

    table = create_outcome_table()
    for outcome in outcomes:
        table.add_row(*format_outcome_row(outcome))

    console.print(table)
    _print_summary(plan)
