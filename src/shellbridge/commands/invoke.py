"""Standalone command: invoke an arbitrary host command."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from shellbridge.commands._base import BridgeCommand
from shellbridge.services.command import CommandService

if TYPE_CHECKING:
    from shellbridge.commands._context import AppContext


def _parse_args(pairs: tuple[str, ...]) -> dict[str, Any]:
    """Parse ``key=value`` pairs; values are JSON when they parse as JSON."""
    args: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--arg")
        if key in args:
            raise click.BadParameter(f"duplicate argument {key!r}", param_hint="--arg")
        try:
            args[key] = json.loads(value)
        except json.JSONDecodeError:
            args[key] = value
    return args


@click.command(
    "invoke",
    cls=BridgeCommand,
    examples="""\
  shellbridge invoke load_kubeconfig -a path=~/.kube/config
  shellbridge invoke set_dock_progress -a progress=0.25
  shellbridge --mode standalone invoke anything""",
)
@click.argument("command")
@click.option("-a", "--arg", "pairs", multiple=True, help="Command argument as key=value.")
@click.pass_obj
def invoke(app: AppContext, command: str, pairs: tuple[str, ...]) -> None:
    """Invoke COMMAND on the host and print its result."""
    args = _parse_args(pairs)
    app.emit(app.run(CommandService(app.bridge).run(command, args)))
