"""Infrastructure layer: host transports behind the execution-mode strategy.

Exports the backend implementations and the host protocol.
"""

from shellbridge.infrastructure.host import (
    Backend,
    Host,
    HostRejection,
    HostUnavailableError,
    LocalEventTarget,
    NativeBackend,
    StandaloneBackend,
    select_backend,
)

__all__ = [
    "Backend",
    "Host",
    "HostRejection",
    "HostUnavailableError",
    "LocalEventTarget",
    "NativeBackend",
    "StandaloneBackend",
    "select_backend",
]
