"""KubeService: load, list and resolve kubeconfig contexts for display."""

from __future__ import annotations

import asyncio
import functools
from typing import TYPE_CHECKING, Any

from shellbridge.domain.errors import CommandError
from shellbridge.services.base import BaseService
from shellbridge.services.loader import DEFAULT_KUBECONFIG_PATH, LOAD_COMMAND, ConfigurationLoader
from shellbridge.services.resolver import (
    context_label,
    current_context_server,
    effective_namespace,
    resolve_context,
)
from shellbridge.services.result import ServiceResult, error_result
from shellbridge.services.telemetry import traced

if TYPE_CHECKING:
    from shellbridge.domain.kubeconfig import ConfigurationDocument
    from shellbridge.services.bridge import ExecutionBridge


class KubeService(BaseService):
    """Owns the current configuration snapshot.

    ``document`` is replaced wholesale by every successful refresh and left
    untouched by a failed one.
    """

    def __init__(
        self,
        bridge: ExecutionBridge,
        *,
        default_path: str = DEFAULT_KUBECONFIG_PATH,
    ) -> None:
        super().__init__(bridge)
        self._loader = ConfigurationLoader(bridge)
        self._default_path = default_path
        self._inflight: dict[str, asyncio.Future[ConfigurationDocument]] = {}
        self.document: ConfigurationDocument | None = None

    async def refresh(self, path: str | None = None) -> ConfigurationDocument:
        """Load a fresh snapshot of the document at *path*.

        Callers asking for a path whose load is already in flight share its
        outcome instead of issuing a second host command.  Loads of
        different paths run independently; the last one to finish becomes
        ``document``.
        """
        resolved_path = path or self._default_path
        future = self._inflight.get(resolved_path)
        if future is None or future.done():
            future = asyncio.ensure_future(self._loader.load(resolved_path))
            self._inflight[resolved_path] = future
            future.add_done_callback(functools.partial(self._forget, resolved_path))
        document = await asyncio.shield(future)
        self.document = document
        return document

    def _forget(self, path: str, future: asyncio.Future[ConfigurationDocument]) -> None:
        if self._inflight.get(path) is future:
            del self._inflight[path]

    @traced
    async def load(self, path: str | None = None) -> ServiceResult:
        resolved_path = path or self._default_path
        try:
            document = await self.refresh(resolved_path)
        except CommandError as exc:
            return error_result(LOAD_COMMAND, exc, **self._meta())

        return ServiceResult(
            ok=True,
            op=LOAD_COMMAND,
            data={
                "path": resolved_path,
                "current_context": document.current_context,
                "server": current_context_server(document),
                "clusters": len(document.clusters),
                "contexts": len(document.contexts),
                "users": len(document.users),
            },
            meta=self._meta(),
        )

    @traced
    async def list_contexts(self, path: str | None = None) -> ServiceResult:
        op = "list_contexts"
        try:
            document = await self.refresh(path)
        except CommandError as exc:
            return error_result(op, exc, **self._meta())

        items = [
            {
                "name": ctx.name,
                "label": context_label(ctx),
                "namespace": effective_namespace(ctx),
                "cluster": ctx.cluster_ref,
                "user": ctx.user_ref,
                "current": ctx.name == document.current_context,
            }
            for ctx in document.contexts
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"current_context": document.current_context, "count": len(items), "items": items},
            meta=self._meta(),
        )

    @traced
    async def resolve(self, context_name: str | None = None, path: str | None = None) -> ServiceResult:
        op = "resolve_context"
        try:
            document = await self.refresh(path)
        except CommandError as exc:
            return error_result(op, exc, **self._meta())

        name = context_name or document.current_context
        resolution = resolve_context(document, name)
        warnings: list[str] = []
        data: dict[str, Any] = {"context": name, "found": resolution.context is not None}

        if resolution.context is None:
            warnings.append(f"Context {name!r} not found" if name else "No context selected")
        else:
            context = resolution.context
            data["namespace"] = resolution.namespace
            data["cluster"] = context.cluster_ref
            data["user"] = context.user_ref
            if context.cluster_ref is None:
                warnings.append(f"Context {name!r} names no cluster")
            elif resolution.cluster is None:
                warnings.append(f"Cluster {context.cluster_ref!r} not found")
            else:
                data["server"] = resolution.cluster.server
            if context.user_ref is None:
                warnings.append(f"Context {name!r} names no user")
            elif resolution.user is None:
                warnings.append(f"User {context.user_ref!r} not found")
            else:
                data["credentials"] = resolution.user.user.kind

        return ServiceResult(ok=True, op=op, data=data, warnings=warnings, meta=self._meta())
