"""Rich console and theme for rendering results to text.

Renderers never write to the terminal themselves: they print inside
:func:`rendered` and hand the captured text to click, which keeps
``format_result() -> str`` free of side effects.  Styling is kept only
when stdout is a terminal.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.theme import Theme

RENDER_WIDTH = 120

BRIDGE_THEME = Theme(
    {
        "sb.ok": "bold green",
        "sb.error": "bold red",
        "sb.op": "bold cyan",
        "sb.key": "dim",
        "sb.current": "bold green",
    }
)


@contextmanager
def rendered(buffer: list[str], *, width: int = RENDER_WIDTH) -> Iterator[Console]:
    """Yield a console whose output is appended to *buffer* on exit."""
    console = Console(theme=BRIDGE_THEME, highlight=False, width=width)
    with console.capture() as capture:
        yield console
    buffer.append(capture.get())
