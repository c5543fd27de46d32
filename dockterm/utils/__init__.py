"""Shared utility functions for Dockterm."""

from dockterm.utils.exceptions import (
    DocktermError,
    EndpointUnavailableError,
    HandshakeError,
    ConnectionClosedDuringHandshakeError,
    HandshakeRejectedError,
    StreamError,
    StreamReadError,
    StreamWriteError,
    TerminalModeUnavailableError,
    ContainerError,
    ContainerNotFoundError,
    ContainerNotRunningError,
    ConfigError,
    ConfigLoadError,
)
from dockterm.utils.logging import (
    get_logger,
    configure_logging,
    is_debug_mode,
)

__all__ = [
    # Exceptions
    "DocktermError",
    "EndpointUnavailableError",
    "HandshakeError",
    "ConnectionClosedDuringHandshakeError",
    "HandshakeRejectedError",
    "StreamError",
    "StreamReadError",
    "StreamWriteError",
    "TerminalModeUnavailableError",
    "ContainerError",
    "ContainerNotFoundError",
    "ContainerNotRunningError",
    "ConfigError",
    "ConfigLoadError",
    # Logging
    "get_logger",
    "configure_logging",
    "is_debug_mode",
]
