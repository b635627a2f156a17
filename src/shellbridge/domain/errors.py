"""CommandError taxonomy raised by the bridge and the configuration loader.

``MissingArgument`` and ``HostFailure`` are produced by the execution bridge;
``InvalidFormat`` only by the configuration loader.  None of them are ever
raised in standalone mode by the bridge itself.
"""

from __future__ import annotations

from typing import Any, ClassVar


class CommandError(Exception):
    """Base class for failures of a single command invocation."""

    code: ClassVar[str] = "COMMAND_ERROR"

    def detail(self) -> dict[str, Any]:
        """Structured fields for the service-layer error payload."""
        return {}


class MissingArgument(CommandError):
    """The host rejected a command because a required argument was missing."""

    code: ClassVar[str] = "MISSING_ARGUMENT"
    category: ClassVar[str] = "missing-args"

    def __init__(self, field: str, command: str) -> None:
        self.field = field
        self.command = command
        super().__init__(f"Missing required field '{field}' for command '{command}'")

    def detail(self) -> dict[str, Any]:
        return {"field": self.field, "command": self.command, "category": self.category}


class HostFailure(CommandError):
    """Any other host failure, carrying the original payload verbatim."""

    code: ClassVar[str] = "HOST_FAILURE"

    def __init__(self, raw: Any) -> None:
        self.raw = raw
        super().__init__(raw if isinstance(raw, str) else repr(raw))

    def detail(self) -> dict[str, Any]:
        raw = self.raw
        if isinstance(raw, BaseException):
            raw = str(raw)
        return {"raw": raw}


class InvalidFormat(CommandError):
    """The host returned something that is not a configuration document."""

    code: ClassVar[str] = "INVALID_FORMAT"

    def __init__(self, message: str = "Invalid KubeConfig format", *, raw: Any = None) -> None:
        self.raw = raw
        super().__init__(message)

    def detail(self) -> dict[str, Any]:
        return {"received": type(self.raw).__name__}
