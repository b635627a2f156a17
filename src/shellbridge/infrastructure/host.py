"""Execution-mode strategy: talk to a privileged host, or stand in for one.

The mode is decided once by :func:`select_backend` and the resulting backend
is injected into both the execution bridge and the event channel.  Nothing
downstream re-checks whether a host is present.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from shellbridge.domain.types import ExecutionMode

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], None]
Unlisten = Callable[[], None]


class HostRejection(Exception):  # noqa: N818
    """Raised by a host to reject a command; *payload* is the opaque failure value."""

    def __init__(self, payload: Any) -> None:
        self.payload = payload
        super().__init__(payload if isinstance(payload, str) else repr(payload))


class HostUnavailableError(RuntimeError):
    """Native mode was requested but no host plugin provided one."""


@runtime_checkable
class Host(Protocol):
    """The privileged host process as seen from the UI side."""

    async def invoke(self, command: str, args: Mapping[str, Any]) -> Any: ...

    async def listen(self, event: str, handler: EventHandler) -> Unlisten | None: ...


class LocalEventTarget:
    """Same-process listener registry keyed by event name.

    Used in standalone mode so in-process code can simulate host pushes.
    Delivery is synchronous and in registration order.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[EventHandler]] = {}

    def add_listener(self, event: str, handler: EventHandler) -> Unlisten:
        self._listeners.setdefault(event, []).append(handler)

        def remove() -> None:
            listeners = self._listeners.get(event, [])
            if handler in listeners:
                listeners.remove(handler)

        return remove

    def emit(self, event: str, payload: Any = None) -> int:
        """Deliver *payload* to every listener of *event*. Returns the listener count."""
        listeners = list(self._listeners.get(event, ()))
        for handler in listeners:
            handler(payload)
        return len(listeners)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))


class Backend(ABC):
    """Strategy interface behind the bridge and the channel."""

    mode: ExecutionMode

    @abstractmethod
    async def invoke(self, command: str, args: Mapping[str, Any]) -> Any:
        """Dispatch *command*; host failures surface as exceptions."""

    @abstractmethod
    async def listen(self, event: str, handler: EventHandler) -> Unlisten:
        """Register *handler* for *event* and return its teardown callable."""


class NativeBackend(Backend):
    """Forwards commands and subscriptions to a real host."""

    mode = ExecutionMode.NATIVE

    def __init__(self, host: Host) -> None:
        self._host = host

    @property
    def host(self) -> Host:
        return self._host

    async def invoke(self, command: str, args: Mapping[str, Any]) -> Any:
        return await self._host.invoke(command, args)

    async def listen(self, event: str, handler: EventHandler) -> Unlisten:
        unlisten = await self._host.listen(event, handler)
        if not callable(unlisten):
            logger.debug("Host returned no teardown for %s", event)
            return _noop
        return unlisten


class StandaloneBackend(Backend):
    """No host: commands resolve to ``None`` and events stay in-process."""

    mode = ExecutionMode.STANDALONE

    def __init__(self, events: LocalEventTarget | None = None) -> None:
        self.events = events or LocalEventTarget()

    async def invoke(self, command: str, args: Mapping[str, Any]) -> Any:
        return None

    async def listen(self, event: str, handler: EventHandler) -> Unlisten:
        return self.events.add_listener(event, handler)

    def emit(self, event: str, payload: Any = None) -> int:
        """Simulate a host push event."""
        return self.events.emit(event, payload)


def _noop() -> None:
    return None


def select_backend(mode: ExecutionMode, host: Host | None = None) -> Backend:
    """Build the backend for *mode*; called once at startup."""
    if mode is ExecutionMode.NATIVE:
        if host is None:
            msg = "Native mode requires a host, but none was provided"
            raise HostUnavailableError(msg)
        return NativeBackend(host)
    return StandaloneBackend()
