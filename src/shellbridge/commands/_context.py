"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy backend selection and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any

import click

from shellbridge.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from shellbridge.config.settings import BridgeSettings
    from shellbridge.infrastructure.host import Backend
    from shellbridge.services.bridge import ExecutionBridge
    from shellbridge.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The backend is selected lazily on first use so ``--help`` and
    ``--version`` never trigger plugin discovery.
    """

    def __init__(self, settings: BridgeSettings) -> None:
        self.settings = settings
        self._backend: Backend | None = None

        # Configure structured logging
        from shellbridge.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        # Enable telemetry context var when verbose
        if settings.verbose:
            from shellbridge.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def backend(self) -> Backend:
        """The execution-mode backend, selected once per process."""
        if self._backend is None:
            from shellbridge.infrastructure.host import HostUnavailableError, select_backend
            from shellbridge.plugins.manager import PluginManager

            pm = PluginManager()
            pm.discover_and_load(self.settings.host.entry_point_group)
            try:
                mode, host = pm.resolve_mode(self.settings.mode)
                self._backend = select_backend(mode, host)
            except HostUnavailableError as exc:
                raise click.ClickException(str(exc)) from exc
        return self._backend

    @property
    def bridge(self) -> ExecutionBridge:
        from shellbridge.services.bridge import ExecutionBridge

        return ExecutionBridge(self.backend)

    def run(self, coro: Coroutine[Any, Any, ServiceResult]) -> ServiceResult:
        """Drive a service coroutine to completion on a fresh event loop."""
        return asyncio.run(coro)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
