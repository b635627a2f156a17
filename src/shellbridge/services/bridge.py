"""ExecutionBridge: the single path from UI actions to host commands.

One invocation is one attempt: no retries, no timeout.  Host failures are
reclassified into the CommandError taxonomy; standalone mode never fails.
"""

from __future__ import annotations

import re
import time
from collections.abc import Mapping
from typing import Any

import structlog

from shellbridge.domain.errors import CommandError, HostFailure, MissingArgument
from shellbridge.domain.types import ExecutionMode
from shellbridge.infrastructure.host import Backend, HostRejection
from shellbridge.services.telemetry import trace_span

log = structlog.get_logger("shellbridge.bridge")

_MISSING_ARG_RE = re.compile(
    r"^invalid args `(?P<field>.+?)` for command `(?P<command>.+?)`:",
    re.IGNORECASE,
)


def classify_failure(command: str, raw: Any) -> MissingArgument | HostFailure:
    """Map an opaque host failure payload onto the CommandError taxonomy.

    Only string payloads of the recognized shape, naming the command that was
    actually invoked, become MissingArgument; everything else passes through
    unchanged as HostFailure.
    """
    if isinstance(raw, str):
        match = _MISSING_ARG_RE.match(raw)
        if match and match.group("command") == command:
            return MissingArgument(match.group("field"), command)
    return HostFailure(raw)


class ExecutionBridge:
    """Dispatches named commands through the injected backend."""

    def __init__(self, backend: Backend) -> None:
        self._backend = backend

    @property
    def mode(self) -> ExecutionMode:
        return self._backend.mode

    @property
    def backend(self) -> Backend:
        return self._backend

    async def invoke(self, command: str, args: Mapping[str, Any] | None = None) -> Any:
        """Invoke *command* with *args* and return the host's result.

        Raises:
            MissingArgument: the host reported a missing argument for *command*.
            HostFailure: any other host failure, with the original payload.
        """
        call_args = dict(args or {})
        started = time.perf_counter()
        with trace_span(f"invoke:{command}") as span:
            if span:
                span.annotate("mode", self.mode.value)
            try:
                result = await self._backend.invoke(command, call_args)
            except Exception as exc:
                if isinstance(exc, HostRejection):
                    error: CommandError = classify_failure(command, exc.payload)
                else:
                    error = HostFailure(exc)
                if span:
                    span.fail(error.code)
                self._trace(command, call_args, started, error=error)
                raise error from exc

            self._trace(command, call_args, started)
            return result

    def _trace(
        self,
        command: str,
        args: dict[str, Any],
        started: float,
        *,
        error: CommandError | None = None,
    ) -> None:
        # Argument values may carry credentials; only names are traced.
        fields = {
            "command": command,
            "mode": self.mode.value,
            "args": sorted(args),
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        }
        if error is None:
            log.debug("bridge.invoke", ok=True, **fields)
        else:
            log.debug("bridge.invoke", ok=False, error=str(error), code=error.code, **fields)
