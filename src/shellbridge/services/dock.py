"""Dock progress and badge: inbound state sync and outbound commands.

:class:`DockStateSynchronizer` folds ``progress-updated`` and
``badge-updated`` pushes into one :class:`DockState`.  Each event touches
only its own field, a missing key means "no change", and ``None`` clears.

:class:`DockService` issues the host commands that cause those pushes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from shellbridge.domain.dock import DockState
from shellbridge.domain.errors import CommandError
from shellbridge.infrastructure.host import StandaloneBackend
from shellbridge.services.base import BaseService
from shellbridge.services.channel import EventChannel, Subscription
from shellbridge.services.result import ServiceError, ServiceResult, error_result
from shellbridge.services.telemetry import traced

logger = logging.getLogger(__name__)

PROGRESS_EVENT = "progress-updated"
BADGE_EVENT = "badge-updated"


class DockStateSynchronizer:
    """Keeps a shared DockState in step with host push events.

    Parameters:
        channel: Event channel to subscribe through.
        state: State object to mutate in place (a fresh one if omitted).
        progress_event: Event name carrying ``{"progress": float | None}``.
        badge_event: Event name carrying ``{"badge": str | None}``.
    """

    def __init__(
        self,
        channel: EventChannel,
        state: DockState | None = None,
        *,
        progress_event: str = PROGRESS_EVENT,
        badge_event: str = BADGE_EVENT,
    ) -> None:
        self._channel = channel
        self.state = state if state is not None else DockState()
        self._progress_event = progress_event
        self._badge_event = badge_event
        self._subscriptions: list[Subscription] = []

    @property
    def running(self) -> bool:
        return bool(self._subscriptions)

    async def start(self) -> None:
        """Subscribe to both events. A no-op if already started."""
        if self._subscriptions:
            return
        progress = await self._channel.subscribe(self._progress_event, self.apply_progress)
        try:
            badge = await self._channel.subscribe(self._badge_event, self.apply_badge)
        except Exception:
            progress.cancel()
            raise
        self._subscriptions = [progress, badge]

    def stop(self) -> None:
        """Cancel both subscriptions. Idempotent."""
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.cancel()

    def apply_progress(self, payload: Any) -> None:
        if not isinstance(payload, Mapping):
            logger.warning("Ignoring %s payload: %r", self._progress_event, payload)
            return
        if "progress" not in payload:
            return
        value = payload["progress"]
        if value is None:
            self.state.progress = None
            return
        if isinstance(value, bool) or not isinstance(value, int | float) or not 0 <= value <= 1:
            logger.warning("Ignoring out-of-range dock progress: %r", value)
            return
        self.state.progress = float(value)

    def apply_badge(self, payload: Any) -> None:
        if not isinstance(payload, Mapping):
            logger.warning("Ignoring %s payload: %r", self._badge_event, payload)
            return
        if "badge" not in payload:
            return
        value = payload["badge"]
        if value is not None and not isinstance(value, str):
            logger.warning("Ignoring non-string dock badge: %r", value)
            return
        self.state.badge = value


class DockService(BaseService):
    """Host commands that drive the dock progress bar and badge."""

    @traced
    async def set_progress(self, progress: float) -> ServiceResult:
        op = "set_dock_progress"
        if not 0.0 <= progress <= 1.0:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="INVALID_PROGRESS",
                    message="Progress must be between 0.0 and 1.0",
                    detail={"progress": progress},
                ),
            )
        return await self._run(op, {"progress": progress})

    @traced
    async def set_badge(self, label: str) -> ServiceResult:
        return await self._run("set_dock_badge", {"label": label})

    @traced
    async def clear_progress(self) -> ServiceResult:
        return await self._run("clear_dock")

    @traced
    async def clear_badge(self) -> ServiceResult:
        return await self._run("clear_dock_badge")

    async def _run(self, command: str, args: dict[str, Any] | None = None) -> ServiceResult:
        try:
            await self._bridge.invoke(command, args)
        except CommandError as exc:
            return error_result(command, exc, **self._meta())
        return ServiceResult(ok=True, op=command, data=dict(args or {}), meta=self._meta())


async def simulate_dock_events(
    backend: StandaloneBackend,
    events: list[tuple[str, Any]],
    *,
    progress_event: str = PROGRESS_EVENT,
    badge_event: str = BADGE_EVENT,
) -> ServiceResult:
    """Replay ``(field, value)`` pairs as in-process pushes and report the folded state.

    Each pair is emitted as ``{field: value}`` on the event for that field.
    """
    event_names = {"progress": progress_event, "badge": badge_event}
    synchronizer = DockStateSynchronizer(
        EventChannel(backend),
        progress_event=progress_event,
        badge_event=badge_event,
    )
    await synchronizer.start()
    try:
        for field, value in events:
            backend.emit(event_names[field], {field: value})
    finally:
        synchronizer.stop()

    state = synchronizer.state
    return ServiceResult(
        ok=True,
        op="dock_simulate",
        data={
            "progress": state.progress,
            "badge": state.badge,
            "percent": state.progress_percent,
            "events": len(events),
        },
        meta={"mode": backend.mode.value},
    )
