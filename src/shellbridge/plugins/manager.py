"""Plugin discovery and host selection.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
The execution mode is decided here, once, from the configured mode setting
and whether any plugin provides a host.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from shellbridge.domain.types import ExecutionMode, ModeSetting
from shellbridge.infrastructure.host import Host, HostUnavailableError
from shellbridge.plugins.hookspecs import PROJECT_NAME, ShellbridgeHookSpec

DEFAULT_ENTRY_POINT_GROUP = "shellbridge.hosts"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and host lookup."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ShellbridgeHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, group: str = DEFAULT_ENTRY_POINT_GROUP) -> list[str]:
        """Load plugins registered under the *group* entry-point group.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(group)
        self._normalize_plugin_instances()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. an embedding host)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance."""
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def find_host(self) -> Host | None:
        """Ask plugins for a host; the first non-None answer wins."""
        host = self._pm.hook.shellbridge_host()
        if host is not None and not isinstance(host, Host):
            logger.warning("Ignoring host of type %s: missing invoke/listen", type(host).__name__)
            return None
        return host

    def resolve_mode(self, setting: ModeSetting) -> tuple[ExecutionMode, Host | None]:
        """Decide the execution mode for this process.

        ``auto`` selects native exactly when a host is available.

        Raises:
            HostUnavailableError: native mode was requested but no plugin
                provides a host.
        """
        if setting is ModeSetting.STANDALONE:
            return ExecutionMode.STANDALONE, None
        host = self.find_host()
        if host is not None:
            return ExecutionMode.NATIVE, host
        if setting is ModeSetting.NATIVE:
            msg = "Native mode requested, but no installed plugin provides a host"
            raise HostUnavailableError(msg)
        return ExecutionMode.STANDALONE, None

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
