"""Init command implementation.

Creates a manifest.toml file declaring every user and group that
currently exists, so that a first purge run removes nothing.
"""

import socket
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from sweepctl.core.manifest import ManifestError, manifest_exists, save_manifest
from sweepctl.core.paths import get_manifest_path
from sweepctl.core.registry import get_scanner
from sweepctl.models.entity import EntityKind
from sweepctl.models.manifest import DeclaredEntry, Manifest, ManifestMeta, SystemConfig
from sweepctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Initialize manifest from current users and groups.",
    invoke_without_command=True,
)


def _collect_declared(kind: EntityKind) -> dict[str, DeclaredEntry]:
    """Declare every entity of a kind currently on the system.

    Args:
        kind: Entity kind to scan.

    Returns:
        Dictionary of entity names to DeclaredEntry.

    Raises:
        RuntimeError: If the scanner cannot query the system.
    """
    scanner = get_scanner(kind)
    return {
        entity.name: DeclaredEntry(reason="Present at init")
        for entity in scanner.scan()
    }


def _create_manifest(users: dict[str, DeclaredEntry], groups: dict[str, DeclaredEntry]) -> Manifest:
    """Create a new manifest with the given declared entities.

    Purging stays disabled until the user enables it per kind.
    """
    now = datetime.now(UTC)

    return Manifest(
        meta=ManifestMeta(version="1.0", created=now, updated=now),
        system=SystemConfig(name=socket.gethostname()),
        users=users,
        groups=groups,
    )


@app.callback(invoke_without_command=True)
def init_manifest(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path for manifest file.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing manifest.",
        ),
    ] = False,
) -> None:
    """Initialize a new manifest from the current users and groups.

    Every existing user and group is declared, and purging is left
    disabled. Remove entries you want gone, then enable purging with
    ``purge = true`` in the purge.user or purge.group table.

    Examples:
        sweepctl init                  # Create manifest in default location
        sweepctl init -o ./hosts.toml  # Write to a custom path
    """
    if ctx.invoked_subcommand is not None:
        return

    output_path = output or get_manifest_path()

    if manifest_exists(output_path) and not force:
        print_error(f"Manifest already exists: {output_path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        users = _collect_declared(EntityKind.USER)
        groups = _collect_declared(EntityKind.GROUP)
    except RuntimeError as e:
        print_error(f"Scan failed: {escape(str(e))}")
        raise typer.Exit(code=1) from e

    manifest = _create_manifest(users, groups)

    try:
        saved_path = save_manifest(manifest, output_path)
    except ManifestError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    console.print(f"  Users: [info]{len(users)}[/info]  Groups: [info]{len(groups)}[/info]")
    print_success(f"Manifest written to {saved_path}")
