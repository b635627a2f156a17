"""CommandService: raw command invocation for diagnostics."""

from __future__ import annotations

from typing import Any

from shellbridge.domain.errors import CommandError
from shellbridge.services.base import BaseService
from shellbridge.services.result import ServiceResult, error_result
from shellbridge.services.telemetry import traced


class CommandService(BaseService):
    """Invokes an arbitrary host command and wraps the outcome."""

    @traced
    async def run(self, command: str, args: dict[str, Any] | None = None) -> ServiceResult:
        try:
            result = await self._bridge.invoke(command, args)
        except CommandError as exc:
            return error_result(command, exc, **self._meta())
        return ServiceResult(
            ok=True,
            op=command,
            data={"command": command, "result": result},
            meta=self._meta(),
        )
