"""ServiceResult and ServiceError: what every service coroutine returns.

The bridge, channel and loader raise :class:`CommandError`; services catch
it and return a failed result instead, so the CLI only ever deals with
this one shape.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from shellbridge.domain.errors import CommandError


class ServiceError(BaseModel):
    """Error code, message and structured fields of a failed operation."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_command_error(cls, exc: CommandError) -> ServiceError:
        return cls(code=exc.code, message=str(exc), detail=exc.detail())


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name, usually the host command (``"load_kubeconfig"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal findings, such as dangling context references.
        error: Set exactly when ``ok`` is False.
        meta: Execution mode and, with ``-v``, the telemetry span tree.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


def error_result(op: str, exc: CommandError, **meta: Any) -> ServiceResult:
    """Failed result for *op* carrying *exc*; keyword arguments become ``meta``."""
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError.from_command_error(exc),
        meta=meta or None,
    )
