"""Custom exception hierarchy for Dockterm."""

from typing import Optional


class DocktermError(Exception):
    """Base exception for all Dockterm errors."""

    pass


class EndpointUnavailableError(DocktermError):
    """Engine control socket is missing or refuses connections."""

    def __init__(self, socket_path: str, reason: str = ""):
        self.socket_path = socket_path
        message = f"Could not connect to {socket_path}. Is Docker running?"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class HandshakeError(DocktermError):
    """Attach upgrade handshake failed."""

    pass


class ConnectionClosedDuringHandshakeError(HandshakeError):
    """Engine closed the connection before the response header was complete."""

    pass


class HandshakeRejectedError(HandshakeError):
    """Engine answered the attach request with something other than 101."""

    def __init__(self, message: str, status: Optional[int] = None, header: str = ""):
        self.status = status
        self.header = header
        super().__init__(message)


class StreamError(DocktermError):
    """Raw stream I/O errors after the handshake."""

    pass


class StreamReadError(StreamError):
    """Reading from the attached stream failed."""

    pass


class StreamWriteError(StreamError):
    """Writing to the attached stream failed."""

    pass


class TerminalModeUnavailableError(DocktermError):
    """Terminal could not be switched to raw mode."""

    pass


class ContainerError(DocktermError):
    """Container-related errors."""

    pass


class ContainerNotFoundError(ContainerError):
    """Container does not exist."""

    pass


class ContainerNotRunningError(ContainerError):
    """Container exists but is not running."""

    pass


class ConfigError(DocktermError):
    """Configuration-related errors."""

    pass


class ConfigLoadError(ConfigError):
    """Failed to load configuration."""

    pass
