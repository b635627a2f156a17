"""Subcommand modules for shellbridge.

Provides register_commands() which uses deferred imports to keep
``shellbridge --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from shellbridge.commands.dock import dock
    from shellbridge.commands.kube import kube

    cli.add_command(kube)
    cli.add_command(dock)

    # --- Standalone commands ---
    from shellbridge.commands.invoke import invoke

    cli.add_command(invoke)
