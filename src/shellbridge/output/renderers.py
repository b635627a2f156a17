"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from shellbridge.output.console import rendered

if TYPE_CHECKING:
    from rich.console import Console

    from shellbridge.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to text via Rich.

    Plain text (no ANSI) unless stdout is a terminal, so CliRunner and
    piped output stay clean.
    """
    chunks: list[str] = []
    with rendered(chunks) as console:
        if result.ok:
            _OP_RENDERERS.get(result.op, _render_generic)(result, console)
        else:
            _render_error(result, console)
        if verbose:
            _render_meta(console, result)
    return "".join(chunks).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("name", "")) for item in items if isinstance(item, dict))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="sb.ok")
    op = Text(f"  {result.op}", style="sb.op")
    console.print(label, op, sep="", end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="sb.key")
    if isinstance(value, dict | list):
        v = Text(json.dumps(value, separators=(",", ":")))
    elif value is None:
        v = Text("None", style="dim")
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block, including the telemetry span tree."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_span(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    prefix = " " * indent
    line = f"{prefix}{span.get('name', '?')}  {span.get('duration_ms', 0.0):.2f}ms"
    annotations = span.get("annotations")
    if annotations:
        line += "  " + " ".join(f"{k}={v}" for k, v in annotations.items())
    if span.get("error"):
        line += f"  error={span['error']}"
    console.print(Text(line, style="dim"))
    for child in span.get("children", []):
        _render_span(console, child, indent + 2)


# ── Per-op renderers ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_contexts(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    items = result.data.get("items", [])
    if not items:
        console.print(Text("  No contexts.", style="dim"))
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("")
    table.add_column("NAME")
    table.add_column("NAMESPACE")
    table.add_column("CLUSTER")
    table.add_column("USER")
    for item in items:
        marker = Text("*", style="sb.current") if item.get("current") else Text("")
        table.add_row(
            marker,
            str(item.get("name", "")),
            str(item.get("namespace", "")),
            str(item.get("cluster") or "-"),
            str(item.get("user") or "-"),
        )
    console.print(table)


def _render_dock_state(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    _field(console, "progress", f"{result.data.get('percent', 0)}%")
    _field(console, "badge", result.data.get("badge") or "None")
    _field(console, "events", result.data.get("events", 0))


def _render_error(result: ServiceResult, console: Console) -> None:
    label = Text("ERROR", style="sb.error")
    op = Text(f"  {result.op}", style="sb.op")
    console.print(label, op, sep="", end="")
    console.print()
    if result.error is None:
        console.print("  Unknown error")
        return
    console.print(f"  {result.error.message}")
    for key, value in result.error.detail.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Callable[[ServiceResult, Console], None]] = {
    "list_contexts": _render_contexts,
    "dock_simulate": _render_dock_state,
}
