# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Attach handshake over the engine control socket.

The engine speaks HTTP on its unix socket. An attach request asks it to
upgrade the connection; once the 101 response header has been consumed the
socket is a raw duplex pipe: bytes written go to the container's stdin, bytes
read are its combined stdout/stderr.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote

from dockterm.utils.exceptions import (
    ConnectionClosedDuringHandshakeError,
    EndpointUnavailableError,
    HandshakeRejectedError,
    StreamReadError,
    StreamWriteError,
)
from dockterm.utils.logging import get_logger

logger = get_logger(__name__)

HEADER_TERMINATOR = b"\r\n\r\n"
DEFAULT_MAX_HEADER_BYTES = 16384

_STATUS_LINE = re.compile(r"^HTTP/1\.[01] (\d{3})(?=\s|$)")


def build_attach_request(target: str) -> bytes:
    """Build the upgrade request for streaming stdin/stdout/stderr."""
    path = f"/containers/{quote(target, safe='')}/attach?stream=1&stdin=1&stdout=1&stderr=1"
    lines = [
        f"POST {path} HTTP/1.1",
        "Host: localhost",
        "Upgrade: tcp",
        "Connection: Upgrade",
        "",
        "",
    ]
    return "\r\n".join(lines).encode("ascii")


def parse_status(header: str) -> Optional[int]:
    """Return the status code from a response header, or None if malformed."""
    match = _STATUS_LINE.match(header)
    if not match:
        return None
    return int(match.group(1))


async def read_response_header(
    reader: asyncio.StreamReader,
    max_bytes: int = DEFAULT_MAX_HEADER_BYTES,
) -> str:
    """Read the response one byte at a time up to and including CRLF CRLF.

    Raises:
        ConnectionClosedDuringHandshakeError: stream ended first
        HandshakeRejectedError: more than max_bytes without a terminator
    """
    header = bytearray()
    while not header.endswith(HEADER_TERMINATOR):
        if len(header) >= max_bytes:
            raise HandshakeRejectedError(
                f"Response header exceeds {max_bytes} bytes",
                status=parse_status(header.decode("latin-1")),
                header=header.decode("latin-1"),
            )
        try:
            byte = await reader.read(1)
        except (ConnectionError, OSError) as e:
            raise ConnectionClosedDuringHandshakeError(f"Connection lost during handshake: {e}") from e
        if not byte:
            raise ConnectionClosedDuringHandshakeError("Connection closed during handshake")
        header += byte
    return header.decode("latin-1")


class Transport:
    """Raw duplex stream to an attached container.

    Wraps the asyncio stream pair and turns OS-level failures into
    StreamReadError / StreamWriteError. close() is idempotent.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        socket_path: Union[str, Path],
        target: str,
    ):
        self.reader = reader
        self.writer = writer
        self.socket_path = str(socket_path)
        self.target = target
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def read(self, size: int) -> bytes:
        """Read up to size bytes; b"" means the remote end closed."""
        try:
            return await self.reader.read(size)
        except (ConnectionError, OSError) as e:
            raise StreamReadError(str(e)) from e

    async def write(self, data: bytes) -> None:
        try:
            self.writer.write(data)
            await self.writer.drain()
        except (ConnectionError, OSError) as e:
            raise StreamWriteError(str(e)) from e

    async def close(self) -> None:
        """Close the connection once. Errors are logged and dropped."""
        if self._closed:
            return
        self._closed = True
        try:
            self.writer.close()
            await self.writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug(f"Transport close for {self.target}: {e}")

    def __repr__(self) -> str:
        return f"Transport(target={self.target!r}, socket={self.socket_path!r})"


async def open_endpoint(socket_path: Union[str, Path]):
    """Open the control socket, mapping "not there" to EndpointUnavailableError."""
    path = str(socket_path)
    try:
        return await asyncio.open_unix_connection(path)
    except FileNotFoundError as e:
        raise EndpointUnavailableError(path, "socket not found") from e
    except ConnectionRefusedError as e:
        raise EndpointUnavailableError(path, "connection refused") from e


async def connect(
    target: str,
    socket_path: Union[str, Path],
    max_header_bytes: int = DEFAULT_MAX_HEADER_BYTES,
) -> Transport:
    """Attach to target and return the upgraded raw transport.

    Raises:
        EndpointUnavailableError: control socket missing or refusing
        ConnectionClosedDuringHandshakeError: engine hung up mid-header
        HandshakeRejectedError: status was not 101 Switching Protocols
    """
    reader, writer = await open_endpoint(socket_path)
    transport = Transport(reader, writer, socket_path, target)
    logger.debug(f"Connected to {socket_path}, requesting attach to {target}")

    try:
        await transport.write(build_attach_request(target))
        header = await read_response_header(reader, max_header_bytes)
    except StreamWriteError as e:
        await transport.close()
        raise ConnectionClosedDuringHandshakeError(f"Connection lost during handshake: {e}") from e
    except BaseException:
        await transport.close()
        raise

    status = parse_status(header)
    if status != 101:
        await transport.close()
        status_line = header.split("\r\n", 1)[0]
        raise HandshakeRejectedError(
            f"Attach to {target} rejected: {status_line or 'empty response'}",
            status=status,
            header=header,
        )

    logger.info(f"Attached to {target} via {socket_path}")
    return transport
