"""Core enums shared across layers."""

from __future__ import annotations

from enum import StrEnum


class ExecutionMode(StrEnum):
    """Whether a privileged host is embedding the UI.

    Determined once at startup and never re-checked at call sites.
    """

    NATIVE = "native"
    STANDALONE = "standalone"


class ModeSetting(StrEnum):
    """User-facing mode selection; ``auto`` resolves by host discovery."""

    AUTO = "auto"
    NATIVE = "native"
    STANDALONE = "standalone"
