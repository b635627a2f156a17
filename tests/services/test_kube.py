"""Tests for KubeService: snapshot ownership and service results."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from shellbridge.infrastructure.host import NativeBackend, StandaloneBackend
from shellbridge.services.bridge import ExecutionBridge
from shellbridge.services.kube import KubeService
from tests.conftest import END_TO_END_RAW, FakeHost, rejection


def _service(host: FakeHost, **kwargs: Any) -> KubeService:
    return KubeService(ExecutionBridge(NativeBackend(host)), **kwargs)


class TestLoad:
    def test_summary(self, fake_host: FakeHost) -> None:
        result = asyncio.run(_service(fake_host).load())
        assert result.ok
        assert result.op == "load_kubeconfig"
        assert result.data["current_context"] == "dev"
        assert result.data["server"] == "https://x"
        assert result.data["clusters"] == 1
        assert result.data["users"] == 1
        assert result.meta == {"mode": "native"}

    def test_default_path_from_constructor(self, fake_host: FakeHost) -> None:
        asyncio.run(_service(fake_host, default_path="/srv/kubeconfig").load())
        assert fake_host.calls == [("load_kubeconfig", {"path": "/srv/kubeconfig"})]

    def test_standalone_reports_invalid_format(self) -> None:
        service = KubeService(ExecutionBridge(StandaloneBackend()))
        result = asyncio.run(service.load())
        assert not result.ok
        assert result.error is not None and result.error.code == "INVALID_FORMAT"
        assert service.document is None

    def test_failed_refresh_keeps_previous_snapshot(self, fake_host: FakeHost) -> None:
        service = _service(fake_host)
        asyncio.run(service.load())
        first = service.document

        fake_host.responses["load_kubeconfig"] = rejection("permission denied")
        result = asyncio.run(service.load())

        assert not result.ok
        assert result.error is not None and result.error.detail == {"raw": "permission denied"}
        assert service.document is first

    def test_successful_refresh_replaces_snapshot(self, fake_host: FakeHost) -> None:
        service = _service(fake_host)
        asyncio.run(service.load())
        fake_host.responses["load_kubeconfig"] = {"current-context": "other"}
        asyncio.run(service.load())
        assert service.document is not None
        assert service.document.current_context == "other"
        assert service.document.contexts == []


class TestRefreshCoalescing:
    def test_concurrent_refreshes_share_one_call(self) -> None:
        class SlowHost(FakeHost):
            async def invoke(self, command: str, args: Mapping[str, Any]) -> Any:
                await asyncio.sleep(0.01)
                return await super().invoke(command, args)

        host = SlowHost({"load_kubeconfig": END_TO_END_RAW})
        service = _service(host)

        async def refresh_many() -> list[Any]:
            return await asyncio.gather(service.refresh(), service.refresh(), service.refresh())

        documents = asyncio.run(refresh_many())
        assert len(host.calls) == 1
        assert documents[0] is documents[1] is documents[2]

    def test_concurrent_refreshes_of_different_paths_load_each(self) -> None:
        class EchoHost(FakeHost):
            async def invoke(self, command: str, args: Mapping[str, Any]) -> Any:
                self.calls.append((command, dict(args)))
                await asyncio.sleep(0.01)
                return {"current-context": args["path"]}

        host = EchoHost()
        service = _service(host)

        async def refresh_both() -> list[Any]:
            return await asyncio.gather(service.refresh("/a"), service.refresh("/b"))

        doc_a, doc_b = asyncio.run(refresh_both())
        assert sorted(args["path"] for _, args in host.calls) == ["/a", "/b"]
        assert doc_a.current_context == "/a"
        assert doc_b.current_context == "/b"


class TestListContexts:
    def test_items(self, fake_host: FakeHost) -> None:
        result = asyncio.run(_service(fake_host).list_contexts())
        assert result.ok
        assert result.data["count"] == 1
        assert result.data["items"] == [
            {
                "name": "dev",
                "label": "dev (default)",
                "namespace": "default",
                "cluster": "c1",
                "user": "u1",
                "current": True,
            }
        ]


class TestResolve:
    def test_defaults_to_current_context(self, fake_host: FakeHost) -> None:
        result = asyncio.run(_service(fake_host).resolve())
        assert result.ok
        assert result.data == {
            "context": "dev",
            "found": True,
            "namespace": "default",
            "cluster": "c1",
            "user": "u1",
            "server": "https://x",
            "credentials": "client-certificate",
        }
        assert result.warnings == []

    def test_unknown_context_warns(self, fake_host: FakeHost) -> None:
        result = asyncio.run(_service(fake_host).resolve("prod"))
        assert result.ok
        assert result.data == {"context": "prod", "found": False}
        assert result.warnings == ["Context 'prod' not found"]

    def test_dangling_references_warn(self) -> None:
        raw = {
            "contexts": [{"name": "x", "context": {"cluster": "nope", "user": "nobody"}}],
        }
        result = asyncio.run(_service(FakeHost({"load_kubeconfig": raw})).resolve("x"))
        assert result.ok
        assert "server" not in result.data
        assert result.warnings == ["Cluster 'nope' not found", "User 'nobody' not found"]

    def test_partial_context_warns_about_missing_user(self) -> None:
        raw = {
            **END_TO_END_RAW,
            "contexts": [
                *END_TO_END_RAW["contexts"],
                {"name": "half", "context": {"cluster": "c1"}},
            ],
        }
        result = asyncio.run(_service(FakeHost({"load_kubeconfig": raw})).resolve("half"))
        assert result.ok
        assert result.data["cluster"] == "c1"
        assert result.data["server"] == "https://x"
        assert result.data["user"] is None
        assert "credentials" not in result.data
        assert result.warnings == ["Context 'half' names no user"]
