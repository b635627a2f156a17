"""Command group: kubeconfig loading and context resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shellbridge.commands._base import BridgeGroup
from shellbridge.services.kube import KubeService

if TYPE_CHECKING:
    from shellbridge.commands._context import AppContext

_KUBE_EXAMPLES = """\
  shellbridge kube load
  shellbridge kube load --path ~/.kube/staging
  shellbridge kube contexts
  shellbridge kube resolve dev
  shellbridge --json kube resolve"""

_PATH_HELP = "Kubeconfig path passed to the host (default from [kube] kubeconfig_path)."


def _service(app: AppContext) -> KubeService:
    return KubeService(app.bridge, default_path=app.settings.kube.kubeconfig_path)


@click.group(cls=BridgeGroup, examples=_KUBE_EXAMPLES)
@click.pass_obj
def kube(app: AppContext) -> None:
    """Load kubeconfig documents and resolve contexts."""


@kube.command(
    examples="""\
  shellbridge kube load
  shellbridge --json kube load --path /etc/kube/admin.conf"""
)
@click.option("--path", default=None, help=_PATH_HELP)
@click.pass_obj
def load(app: AppContext, path: str | None) -> None:
    """Load and summarize a kubeconfig through the host."""
    app.emit(app.run(_service(app).load(path)))


@kube.command(
    examples="""\
  shellbridge kube contexts
  shellbridge -q kube contexts"""
)
@click.option("--path", default=None, help=_PATH_HELP)
@click.pass_obj
def contexts(app: AppContext, path: str | None) -> None:
    """List contexts with their effective namespaces."""
    app.emit(app.run(_service(app).list_contexts(path)))


@kube.command(
    examples="""\
  shellbridge kube resolve
  shellbridge kube resolve prod-eu --path ~/.kube/prod"""
)
@click.argument("context_name", required=False)
@click.option("--path", default=None, help=_PATH_HELP)
@click.pass_obj
def resolve(app: AppContext, context_name: str | None, path: str | None) -> None:
    """Resolve CONTEXT_NAME (default: [kube] default_context, then current-context)."""
    name = context_name or app.settings.kube.default_context
    app.emit(app.run(_service(app).resolve(name, path)))
