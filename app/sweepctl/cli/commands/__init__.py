"""CLI commands for sweepctl.

This package contains all subcommand implementations.
"""

from sweepctl.cli.commands import init, plan, purge

__all__ = ["init", "plan", "purge"]
