"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path

import typer
from rich.markup import escape

from sweepctl.core.errors import SweepError
from sweepctl.core.manifest import ManifestError, ManifestNotFoundError, load_manifest
from sweepctl.core.paths import get_manifest_path
from sweepctl.core.planner import PurgePlan, plan_purge
from sweepctl.models.entity import EntityKind
from sweepctl.models.manifest import Manifest
from sweepctl.utils.formatting import print_error, print_info, print_warning


class KindChoice(str, Enum):
    """Entity kinds selectable on the command line."""

    USER = "user"
    GROUP = "group"
    ALL = "all"


def get_kinds(choice: KindChoice = KindChoice.ALL) -> list[EntityKind]:
    """Get the entity kinds for a CLI selection.

    Args:
        choice: The kind choice (user, group, or all).

    Returns:
        List of entity kinds, users first.
    """
    if choice == KindChoice.ALL:
        return [EntityKind.USER, EntityKind.GROUP]
    return [EntityKind(choice.value)]


def load_manifest_or_exit(path: Path | None = None) -> Manifest:
    """Load the manifest, exiting with code 1 on any manifest error.

    Args:
        path: Manifest path. If None, uses the default manifest path.

    Returns:
        The loaded Manifest.

    Raises:
        typer.Exit: If the manifest is missing or invalid.
    """
    manifest_path = path or get_manifest_path()
    try:
        return load_manifest(manifest_path)
    except ManifestNotFoundError as e:
        print_error(f"Manifest not found: {manifest_path}")
        print_info("Run 'sweepctl init' to create a manifest from your current system.")
        raise typer.Exit(code=1) from e
    except ManifestError as e:
        print_error(f"Failed to load manifest: {escape(str(e))}")
        raise typer.Exit(code=1) from e


def plan_or_exit(manifest: Manifest, kinds: list[EntityKind], *, quiet: bool = False) -> PurgePlan:
    """Plan a purge, exiting with code 1 on configuration or scan errors.

    Kinds with purging disabled and per-entity errors are reported as
    warnings unless quiet is set.

    Args:
        manifest: Loaded manifest.
        kinds: Entity kinds to plan for.
        quiet: Suppress warnings.

    Returns:
        The complete PurgePlan.

    Raises:
        typer.Exit: If the purge settings are invalid or scanning fails.
    """
    try:
        plan = plan_purge(manifest, kinds)
    except SweepError as e:
        print_error(f"Invalid purge configuration: {escape(str(e))}")
        raise typer.Exit(code=1) from e
    except RuntimeError as e:
        print_error(f"Scan failed: {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if not quiet:
        for kind in plan.skipped_kinds:
            hint = f"set purge = true in [purge.{kind.value}]"
            print_warning(f"Purging is disabled for {kind.value}s; {escape(hint)}.")
        for error in plan.errors:
            print_warning(f"Skipped {escape(str(error))}")

    return plan
