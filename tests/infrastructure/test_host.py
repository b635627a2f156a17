"""Tests for the execution-mode backends."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from shellbridge.domain.types import ExecutionMode
from shellbridge.infrastructure.host import (
    HostUnavailableError,
    LocalEventTarget,
    NativeBackend,
    StandaloneBackend,
    select_backend,
)
from tests.conftest import FakeHost


class TestLocalEventTarget:
    def test_emit_delivers_in_registration_order(self) -> None:
        target = LocalEventTarget()
        seen: list[tuple[str, Any]] = []
        target.add_listener("tick", lambda p: seen.append(("a", p)))
        target.add_listener("tick", lambda p: seen.append(("b", p)))

        assert target.emit("tick", 1) == 2
        assert seen == [("a", 1), ("b", 1)]

    def test_emit_is_keyed_by_event_name(self) -> None:
        target = LocalEventTarget()
        seen: list[Any] = []
        target.add_listener("a", seen.append)

        assert target.emit("b", "ignored") == 0
        assert seen == []

    def test_remove_is_safe_to_repeat(self) -> None:
        target = LocalEventTarget()
        remove = target.add_listener("a", lambda p: None)
        remove()
        remove()
        assert target.listener_count("a") == 0


class TestStandaloneBackend:
    def test_invoke_returns_none(self) -> None:
        backend = StandaloneBackend()
        assert asyncio.run(backend.invoke("load_kubeconfig", {"path": "x"})) is None

    def test_listen_and_emit(self) -> None:
        backend = StandaloneBackend()
        seen: list[Any] = []
        unlisten = asyncio.run(backend.listen("evt", seen.append))
        backend.emit("evt", {"k": 1})
        unlisten()
        backend.emit("evt", {"k": 2})
        assert seen == [{"k": 1}]

    def test_mode(self) -> None:
        assert StandaloneBackend().mode is ExecutionMode.STANDALONE


class TestNativeBackend:
    def test_forwards_invoke(self) -> None:
        host = FakeHost({"ping": "pong"})
        backend = NativeBackend(host)
        assert asyncio.run(backend.invoke("ping", {"n": 1})) == "pong"
        assert host.calls == [("ping", {"n": 1})]

    def test_missing_teardown_becomes_noop(self) -> None:
        class SilentHost(FakeHost):
            async def listen(self, event, handler):  # type: ignore[override]
                await super().listen(event, handler)
                return None

        unlisten = asyncio.run(NativeBackend(SilentHost()).listen("evt", lambda p: None))
        assert callable(unlisten)
        unlisten()


class TestSelectBackend:
    def test_standalone(self) -> None:
        assert isinstance(select_backend(ExecutionMode.STANDALONE), StandaloneBackend)

    def test_native_with_host(self) -> None:
        backend = select_backend(ExecutionMode.NATIVE, FakeHost())
        assert isinstance(backend, NativeBackend)
        assert backend.mode is ExecutionMode.NATIVE

    def test_native_without_host_raises(self) -> None:
        with pytest.raises(HostUnavailableError):
            select_backend(ExecutionMode.NATIVE, None)
