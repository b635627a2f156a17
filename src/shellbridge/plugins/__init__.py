"""Host discovery via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
A host plugin answers ``shellbridge_host()``; with none installed the CLI
runs standalone.
"""

from shellbridge.plugins.hookspecs import hookimpl
from shellbridge.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
