"""Tests for kubeconfig normalization and ConfigurationLoader."""

from __future__ import annotations

import asyncio
import copy
from typing import Any

import pytest

from shellbridge.domain.errors import HostFailure, InvalidFormat, MissingArgument
from shellbridge.infrastructure.host import NativeBackend, StandaloneBackend
from shellbridge.services.bridge import ExecutionBridge
from shellbridge.services.loader import (
    DEFAULT_KUBECONFIG_PATH,
    ConfigurationLoader,
    normalize_kubeconfig,
)
from shellbridge.services.resolver import resolve_context
from tests.conftest import END_TO_END_RAW, FakeHost, rejection


def _loader(payload: Any) -> tuple[ConfigurationLoader, FakeHost]:
    host = FakeHost({"load_kubeconfig": payload})
    return ConfigurationLoader(ExecutionBridge(NativeBackend(host))), host


class TestNormalize:
    def test_current_context_renamed(self) -> None:
        doc = normalize_kubeconfig({"current-context": "ctxA"})
        assert doc["currentContext"] == "ctxA"
        assert "current-context" not in doc

    def test_absent_current_context_is_none(self) -> None:
        assert normalize_kubeconfig({})["currentContext"] is None

    def test_user_keys_renamed(self) -> None:
        doc = normalize_kubeconfig(END_TO_END_RAW)
        user = doc["users"][0]["user"]
        assert user == {"clientCertificate": "a", "clientKey": "b"}

    def test_users_without_credentials_dropped(self) -> None:
        raw = {
            "users": [
                {"name": "missing"},
                {"name": "null", "user": None},
                {"name": "scalar", "user": "oops"},
                {"name": "empty", "user": {}},
                {"name": "token", "user": {"token": "t"}},
            ]
        }
        names = [u["name"] for u in normalize_kubeconfig(raw)["users"]]
        assert names == ["empty", "token"]

    def test_input_not_mutated(self) -> None:
        raw = copy.deepcopy(END_TO_END_RAW)
        normalize_kubeconfig(raw)
        assert raw == END_TO_END_RAW


class TestLoad:
    def test_end_to_end_document(self) -> None:
        loader, host = _loader(END_TO_END_RAW)
        doc = asyncio.run(loader.load())

        assert host.calls == [("load_kubeconfig", {"path": DEFAULT_KUBECONFIG_PATH})]
        assert doc.current_context == "dev"
        assert doc.users[0].user.client_certificate == "a"
        assert doc.users[0].user.client_key == "b"

        wire = doc.to_wire()
        assert wire["currentContext"] == "dev"
        assert "current-context" not in wire
        assert wire["users"][0]["user"] == {"clientCertificate": "a", "clientKey": "b"}

    def test_explicit_path(self) -> None:
        loader, host = _loader(END_TO_END_RAW)
        asyncio.run(loader.load("/etc/kube/admin.conf"))
        assert host.calls[0][1] == {"path": "/etc/kube/admin.conf"}

    def test_drops_users_without_user(self) -> None:
        raw = {**END_TO_END_RAW, "users": [{"name": "u0", "user": None}, *END_TO_END_RAW["users"]]}
        loader, _ = _loader(raw)
        doc = asyncio.run(loader.load())
        assert [u.name for u in doc.users] == ["u1"]

    def test_each_load_is_a_fresh_document(self) -> None:
        loader, host = _loader(END_TO_END_RAW)
        first = asyncio.run(loader.load())
        host.responses["load_kubeconfig"] = {"current-context": "prod"}
        second = asyncio.run(loader.load())

        assert first.current_context == "dev"
        assert second.current_context == "prod"
        assert second.clusters == []

    @pytest.mark.parametrize("payload", [None, [], "apiVersion: v1", 42])
    def test_non_mapping_is_invalid_format(self, payload: Any) -> None:
        loader, _ = _loader(payload)
        with pytest.raises(InvalidFormat):
            asyncio.run(loader.load())

    def test_standalone_mode_is_invalid_format(self) -> None:
        loader = ConfigurationLoader(ExecutionBridge(StandaloneBackend()))
        with pytest.raises(InvalidFormat):
            asyncio.run(loader.load())

    def test_partial_context_loads_with_unset_parts(self) -> None:
        raw = copy.deepcopy(END_TO_END_RAW)
        raw["contexts"].append({"name": "half", "context": {"cluster": "c1"}})
        loader, _ = _loader(raw)
        doc = asyncio.run(loader.load())

        assert [c.name for c in doc.contexts] == ["dev", "half"]
        resolution = resolve_context(doc, "half")
        assert resolution.context is not None
        assert resolution.context.user_ref is None
        assert resolution.cluster is not None
        assert resolution.cluster.server == "https://x"
        assert resolution.user is None

    def test_cluster_without_server_loads(self) -> None:
        loader, _ = _loader({"clusters": [{"name": "c1"}], "contexts": [{"name": "bare"}]})
        doc = asyncio.run(loader.load())
        assert doc.clusters[0].server is None
        assert doc.contexts[0].cluster_ref is None

    def test_unusable_entries_dropped_one_by_one(self) -> None:
        loader, _ = _loader(
            {
                "clusters": ["c0", {"name": "c1", "cluster": {"server": "https://x"}}, {}],
                "contexts": {"name": "dev"},
                "current-context": 7,
            }
        )
        doc = asyncio.run(loader.load())
        assert [c.name for c in doc.clusters] == ["c1"]
        assert doc.contexts == []
        assert doc.current_context is None

    def test_bridge_errors_propagate(self) -> None:
        loader, _ = _loader(rejection("invalid args `path` for command `load_kubeconfig`: x"))
        with pytest.raises(MissingArgument):
            asyncio.run(loader.load())

        loader, _ = _loader(rejection("No such file or directory"))
        with pytest.raises(HostFailure):
            asyncio.run(loader.load())
