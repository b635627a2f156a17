"""Command group: dock progress bar and badge."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from shellbridge.commands._base import BridgeGroup
from shellbridge.infrastructure.host import StandaloneBackend
from shellbridge.services.dock import DockService, simulate_dock_events

if TYPE_CHECKING:
    from shellbridge.commands._context import AppContext

_DOCK_EXAMPLES = """\
  shellbridge dock set-progress 0.4
  shellbridge dock set-badge 3
  shellbridge dock clear
  shellbridge dock clear-badge
  shellbridge --mode standalone dock simulate progress=0.5 badge=x progress=null"""

_NULLS = {"null", "none", ""}


def _parse_event(token: str) -> tuple[str, Any]:
    field, sep, raw = token.partition("=")
    if not sep or field not in ("progress", "badge"):
        raise click.BadParameter(
            f"expected progress=<0..1|null> or badge=<text|null>, got {token!r}",
            param_hint="EVENTS",
        )
    if raw.lower() in _NULLS:
        return field, None
    if field == "badge":
        return field, raw
    try:
        return field, float(raw)
    except ValueError as exc:
        raise click.BadParameter(f"progress must be a number, got {raw!r}") from exc


@click.group(cls=BridgeGroup, examples=_DOCK_EXAMPLES)
@click.pass_obj
def dock(app: AppContext) -> None:
    """Drive and observe the dock progress bar and badge."""


@dock.command("set-progress")
@click.argument("progress", type=float)
@click.pass_obj
def set_progress(app: AppContext, progress: float) -> None:
    """Set dock progress to PROGRESS (a fraction between 0 and 1)."""
    app.emit(app.run(DockService(app.bridge).set_progress(progress)))


@dock.command("set-badge")
@click.argument("label")
@click.pass_obj
def set_badge(app: AppContext, label: str) -> None:
    """Show LABEL as the dock badge."""
    app.emit(app.run(DockService(app.bridge).set_badge(label)))


@dock.command("clear")
@click.pass_obj
def clear(app: AppContext) -> None:
    """Clear dock progress."""
    app.emit(app.run(DockService(app.bridge).clear_progress()))


@dock.command("clear-badge")
@click.pass_obj
def clear_badge(app: AppContext) -> None:
    """Clear the dock badge."""
    app.emit(app.run(DockService(app.bridge).clear_badge()))


@dock.command(
    examples="""\
  shellbridge --mode standalone dock simulate progress=0.5 badge=x progress=null
  shellbridge --json --mode standalone dock simulate badge=3"""
)
@click.argument("events", nargs=-1, required=True)
@click.pass_obj
def simulate(app: AppContext, events: tuple[str, ...]) -> None:
    """Replay EVENTS through the in-process channel and show the folded dock state.

    Only available in standalone mode.
    """
    parsed = [_parse_event(token) for token in events]
    backend = app.backend
    if not isinstance(backend, StandaloneBackend):
        raise click.UsageError("dock simulate requires standalone mode (--mode standalone)")
    app.emit(
        app.run(
            simulate_dock_events(
                backend,
                parsed,
                progress_event=app.settings.dock.progress_event,
                badge_event=app.settings.dock.badge_event,
            )
        )
    )
