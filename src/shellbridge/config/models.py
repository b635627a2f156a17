"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, shellbridge.toml only contains
overrides.  An empty file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel

from shellbridge.services.dock import BADGE_EVENT, PROGRESS_EVENT
from shellbridge.services.loader import DEFAULT_KUBECONFIG_PATH


class KubeConfigSettings(BaseModel):
    """[kube] section."""

    model_config = {"frozen": True}

    kubeconfig_path: str = DEFAULT_KUBECONFIG_PATH
    default_context: str | None = None


class DockConfig(BaseModel):
    """[dock] section."""

    model_config = {"frozen": True}

    progress_event: str = PROGRESS_EVENT
    badge_event: str = BADGE_EVENT


class HostConfig(BaseModel):
    """[host] section."""

    model_config = {"frozen": True}

    entry_point_group: str = "shellbridge.hosts"
