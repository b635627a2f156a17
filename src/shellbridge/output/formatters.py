"""Output mode dispatch for ServiceResult.

The CLI renders ServiceResult for humans (Rich) or machines (--json).
``--quiet`` reduces output to a single status line or bare names.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from shellbridge.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from shellbridge.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output flags relevant to formatting."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display according to *settings*."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
