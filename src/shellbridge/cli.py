"""shellbridge entry point.

The root group only gathers the global flags into :class:`BridgeSettings`
and hands an :class:`AppContext` to the subcommands.  The host backend is
chosen later, the first time a subcommand needs it.
"""

from __future__ import annotations

import click

from shellbridge import __version__
from shellbridge.commands import register_commands
from shellbridge.commands._base import BridgeGroup
from shellbridge.commands._context import AppContext
from shellbridge.config.settings import BridgeSettings
from shellbridge.domain.types import ModeSetting

_MODE_HELP = (
    "Where commands go: 'native' sends them to an installed host plugin, "
    "'standalone' answers them in-process, 'auto' (default) picks native "
    "when a host plugin is installed."
)

_ROOT_EXAMPLES = """\
  shellbridge kube contexts
  shellbridge --mode standalone dock simulate
  shellbridge --json kube resolve staging
  shellbridge -c ./shellbridge.toml invoke set_dock_badge -a label=3"""


@click.group(cls=BridgeGroup, invoke_without_command=True, examples=_ROOT_EXAMPLES)
@click.version_option(version=__version__, prog_name="shellbridge")
@click.option("--mode", type=click.Choice([m.value for m in ModeSetting]), help=_MODE_HELP)
@click.option(
    "-c",
    "--config",
    "config_path",
    metavar="FILE",
    help="Read this shellbridge.toml instead of searching for one.",
)
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only names or a one-line status.")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Log each host call to stderr and attach timing spans to results.",
)
@click.option("--log-json", is_flag=True, help="Write log lines to stderr as JSON.")
@click.pass_context
def cli(
    ctx: click.Context,
    mode: str | None,
    config_path: str | None,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
) -> None:
    """Send commands to the desktop host, follow dock state and inspect kubeconfig contexts."""
    # Unset flags stay None so env vars and the config file can supply them.
    flags = {
        "json_output": json_output,
        "quiet": quiet,
        "verbose": verbose,
        "log_json": log_json,
    }
    settings = BridgeSettings.from_cli(
        config_path=config_path,
        mode=mode,
        **{name: True for name, given in flags.items() if given},
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
