"""BaseService: shared foundation for the CLI-facing services.

Every service receives the :class:`ExecutionBridge` at construction time and
returns :class:`ServiceResult` from its public coroutines.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shellbridge.services.bridge import ExecutionBridge


class BaseService:
    """Base for service classes operating through the bridge.

    Usage::

        class KubeService(BaseService):
            async def load(self, path: str | None = None) -> ServiceResult:
                document = await ConfigurationLoader(self._bridge).load(path)
                ...
    """

    def __init__(self, bridge: ExecutionBridge) -> None:
        self._bridge = bridge

    def _meta(self) -> dict[str, Any]:
        return {"mode": self._bridge.mode.value}
