"""Timing spans for service calls and the host round-trips they make.

A ``@traced`` service coroutine opens a root span.  Every bridge invocation
made while it runs opens a child span through :func:`trace_span`.  Spans
are collected only while telemetry is enabled (``-v``); the finished tree
is attached to ``ServiceResult.meta["telemetry"]``.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec

import structlog

from shellbridge.services.result import ServiceResult

log = structlog.get_logger("shellbridge.telemetry")

_enabled: ContextVar[bool] = ContextVar("shellbridge_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("shellbridge_active_span", default=None)


@dataclass
class Span:
    """One timed unit of work; children are the calls made inside it."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    started: float = field(default_factory=time.perf_counter, repr=False)
    finished: float | None = field(default=None, repr=False)

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def child(self, name: str) -> Span:
        span = Span(name=name)
        self.children.append(span)
        return span

    def finish(self) -> None:
        if self.finished is None:
            self.finished = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def fail(self, code: str) -> None:
        self.error = code

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.error is not None:
            data["error"] = self.error
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Open a child of the active span; yields None outside a traced call."""
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return

    span = parent.child(name)
    token = _active.set(span)
    try:
        yield span
    finally:
        span.finish()
        _active.reset(token)


_P = ParamSpec("_P")


def traced(
    func: Callable[_P, Awaitable[ServiceResult]],
) -> Callable[_P, Awaitable[ServiceResult]]:
    """Time an async service method and attach its span tree to the result."""

    @functools.wraps(func)
    async def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> ServiceResult:
        if not _enabled.get():
            return await func(*args, **kwargs)

        span = Span(name=func.__qualname__)
        token = _active.set(span)
        result: ServiceResult | None = None
        try:
            result = await func(*args, **kwargs)
        finally:
            span.finish()
            _active.reset(token)
            log.debug(
                "span.complete",
                span_name=span.name,
                duration_ms=round(span.duration_ms, 2),
                ok=result is not None and result.ok,
                host_calls=len(span.children),
            )

        meta = {**(result.meta or {}), "telemetry": span.to_dict()}
        return result.model_copy(update={"meta": meta})

    return wrapper


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The span calls would currently nest under, or None when disabled."""
    if not _enabled.get():
        return None
    return _active.get()
