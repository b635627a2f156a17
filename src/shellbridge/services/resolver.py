"""Configuration resolver: pure lookups over a loaded document.

Dangling or missing cluster and user references resolve to ``None``; they
are never an error.  Collections are small, so lookups are linear scans.
"""

from __future__ import annotations

from dataclasses import dataclass

from shellbridge.domain.kubeconfig import (
    ConfigurationDocument,
    NamedCluster,
    NamedContext,
    NamedUser,
)

DEFAULT_NAMESPACE = "default"


@dataclass(frozen=True)
class ContextResolution:
    """The context selected by name plus whatever it references."""

    context: NamedContext | None = None
    cluster: NamedCluster | None = None
    user: NamedUser | None = None

    @property
    def namespace(self) -> str | None:
        """Effective namespace, or None when no context was resolved."""
        if self.context is None:
            return None
        return effective_namespace(self.context)


def effective_namespace(context: NamedContext) -> str:
    return context.namespace or DEFAULT_NAMESPACE


def context_label(context: NamedContext) -> str:
    """Picker label, e.g. ``"dev (default)"``."""
    return f"{context.name} ({effective_namespace(context)})"


def find_context(document: ConfigurationDocument, name: str) -> NamedContext | None:
    return next((c for c in document.contexts if c.name == name), None)


def find_cluster(document: ConfigurationDocument, name: str | None) -> NamedCluster | None:
    if name is None:
        return None
    return next((c for c in document.clusters if c.name == name), None)


def find_user(document: ConfigurationDocument, name: str | None) -> NamedUser | None:
    if name is None:
        return None
    return next((u for u in document.users if u.name == name), None)


def resolve_context(
    document: ConfigurationDocument,
    context_name: str | None,
) -> ContextResolution:
    """Resolve *context_name* into its context, cluster and user.

    An unset or unknown name yields an empty resolution.
    """
    if not context_name:
        return ContextResolution()
    context = find_context(document, context_name)
    if context is None:
        return ContextResolution()
    return ContextResolution(
        context=context,
        cluster=find_cluster(document, context.cluster_ref),
        user=find_user(document, context.user_ref),
    )


def current_context_server(document: ConfigurationDocument) -> str | None:
    """API server URL of the document's current context, if it resolves."""
    cluster = resolve_context(document, document.current_context).cluster
    return cluster.server if cluster else None
