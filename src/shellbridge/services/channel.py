"""EventChannel: subscriptions to host push events.

Every ``subscribe`` returns a concrete :class:`Subscription` whose
``cancel()`` is always safe to call, any number of times.
"""

from __future__ import annotations

import logging
from typing import Any

from shellbridge.domain.types import ExecutionMode
from shellbridge.infrastructure.host import Backend, EventHandler, Unlisten

logger = logging.getLogger(__name__)


class Subscription:
    """Cancellation handle for one handler registered on one event name.

    After :meth:`cancel`, late deliveries from the transport are dropped.
    """

    def __init__(self, event: str, handler: EventHandler) -> None:
        self.event = event
        self._handler = handler
        self._unlisten: Unlisten | None = None
        self._cancelled = False

    @property
    def active(self) -> bool:
        return not self._cancelled

    def _deliver(self, payload: Any) -> None:
        if self._cancelled:
            return
        self._handler(payload)

    def _bind(self, unlisten: Unlisten) -> None:
        self._unlisten = unlisten

    def cancel(self) -> None:
        """Stop delivery and release the transport registration. Idempotent."""
        if self._cancelled:
            return
        self._cancelled = True
        unlisten, self._unlisten = self._unlisten, None
        if unlisten is None:
            return
        try:
            unlisten()
        except Exception:
            # The transport may already have torn the registration down.
            logger.debug("Teardown for %s failed", self.event, exc_info=True)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()


class EventChannel:
    """Subscribes handlers to named events through the injected backend.

    Delivery order is whatever the backend's transport provides; the
    channel neither buffers nor reorders.
    """

    def __init__(self, backend: Backend) -> None:
        self._backend = backend

    @property
    def mode(self) -> ExecutionMode:
        return self._backend.mode

    async def subscribe(self, event: str, handler: EventHandler) -> Subscription:
        """Register *handler* for *event*.

        Registration failures propagate to the caller.
        """
        subscription = Subscription(event, handler)
        unlisten = await self._backend.listen(event, subscription._deliver)
        subscription._bind(unlisten)
        logger.debug("Subscribed to %s (%s)", event, self.mode.value)
        return subscription
