"""Shared pytest fixtures and fake hosts for shellbridge tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Generator, Mapping
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from shellbridge.infrastructure.host import (
    HostRejection,
    NativeBackend,
    StandaloneBackend,
)
from shellbridge.plugins import hookimpl
from shellbridge.services.bridge import ExecutionBridge
from shellbridge.services.channel import EventChannel
from shellbridge.services.telemetry import disable_telemetry

END_TO_END_RAW: dict[str, Any] = {
    "current-context": "dev",
    "clusters": [{"name": "c1", "cluster": {"server": "https://x"}}],
    "contexts": [{"name": "dev", "context": {"cluster": "c1", "user": "u1"}}],
    "users": [{"name": "u1", "user": {"client-certificate": "a", "client-key": "b"}}],
}


class FakeHost:
    """In-memory host: canned command responses plus a push-event registry.

    A response that is a ``HostRejection`` (or any exception) is raised
    instead of returned.
    """

    def __init__(self, responses: Mapping[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.listeners: dict[str, list[Callable[[Any], None]]] = {}
        self.unlisten_calls = 0
        self.fail_unlisten = False

    async def invoke(self, command: str, args: Mapping[str, Any]) -> Any:
        self.calls.append((command, dict(args)))
        response = self.responses.get(command)
        if isinstance(response, BaseException):
            raise response
        return response

    async def listen(self, event: str, handler: Callable[[Any], None]) -> Callable[[], None]:
        self.listeners.setdefault(event, []).append(handler)

        def unlisten() -> None:
            self.unlisten_calls += 1
            if self.fail_unlisten:
                msg = "listener already torn down"
                raise RuntimeError(msg)
            self.listeners[event].remove(handler)

        return unlisten

    def push(self, event: str, payload: Any) -> None:
        """Deliver to every handler ever registered, like a transport that ignores teardown."""
        for handler in list(self.listeners.get(event, [])):
            handler(payload)


class HostPlugin:
    """pluggy plugin exposing a FakeHost."""

    def __init__(self, host: FakeHost) -> None:
        self.host = host

    @hookimpl
    def shellbridge_host(self) -> FakeHost:
        return self.host


def rejection(payload: Any) -> HostRejection:
    return HostRejection(payload)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_host() -> FakeHost:
    return FakeHost({"load_kubeconfig": END_TO_END_RAW})


@pytest.fixture
def native_bridge(fake_host: FakeHost) -> ExecutionBridge:
    return ExecutionBridge(NativeBackend(fake_host))


@pytest.fixture
def standalone_backend() -> StandaloneBackend:
    return StandaloneBackend()


@pytest.fixture
def standalone_channel(standalone_backend: StandaloneBackend) -> EventChannel:
    return EventChannel(standalone_backend)


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Run each test away from stray config, env overrides and global logging state.

    The CLI reconfigures logging and enables telemetry on ``-v``; both are
    process-global, so they are restored after every test.
    """
    for key in list(os.environ):
        if key.startswith("SHELLBRIDGE_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)

    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    package = logging.getLogger("shellbridge")
    package_level = package.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    package.setLevel(package_level)
    structlog.reset_defaults()
    disable_telemetry()


@pytest.fixture
def installed_host(fake_host: FakeHost, monkeypatch: pytest.MonkeyPatch) -> FakeHost:
    """Make plugin discovery find ``fake_host``, as if a host plugin were installed."""
    from shellbridge.plugins.manager import PluginManager

    def discover_and_load(self: PluginManager, group: str = "shellbridge.hosts") -> list[str]:
        self.register_plugin(HostPlugin(fake_host), name="fake-host")
        return self.list_plugin_names()

    monkeypatch.setattr(PluginManager, "discover_and_load", discover_and_load)
    return fake_host
