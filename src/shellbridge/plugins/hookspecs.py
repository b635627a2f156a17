"""Pluggy hook specifications for shellbridge host discovery."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from shellbridge.infrastructure.host import Host

PROJECT_NAME = "shellbridge"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class ShellbridgeHookSpec:
    """Hook specifications for the shellbridge plugin system."""

    @hookspec(firstresult=True)
    def shellbridge_host(self) -> Host | None:
        """Return the privileged host to bridge to, or None to abstain.

        The first non-None answer wins.
        """
