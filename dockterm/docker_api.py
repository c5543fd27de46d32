# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Read-only container queries over the engine control socket.

Only the inspect endpoint is used: before attaching to check the container is
running, and after a lost stream to tell the user what happened to it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple, Union
from urllib.parse import quote

from dockterm.attach.handshake import open_endpoint, parse_status
from dockterm.utils.exceptions import ContainerError, ContainerNotFoundError
from dockterm.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ContainerStatus:
    """The State block of a container inspect response."""
    name: str
    status: str = "unknown"
    running: bool = False
    restarting: bool = False
    exit_code: int = 0
    error: str = ""

    @classmethod
    def from_inspect(cls, name: str, data: Dict[str, Any]) -> "ContainerStatus":
        state = data.get("State") or {}
        return cls(
            name=(data.get("Name") or name).lstrip("/"),
            status=str(state.get("Status", "unknown")),
            running=bool(state.get("Running", False)),
            restarting=bool(state.get("Restarting", False)),
            exit_code=int(state.get("ExitCode") or 0),
            error=str(state.get("Error") or ""),
        )

    def describe(self) -> str:
        """One-line summary for the user."""
        if self.restarting:
            return "restarting"
        if self.running:
            return "running"
        if self.status == "exited":
            if self.exit_code != 0:
                detail = f"crashed (exit code {self.exit_code})"
                if self.error:
                    detail += f": {self.error}"
                return detail
            return "stopped (exit code 0)"
        return self.status


def split_response(raw: bytes) -> Tuple[int, Dict[str, str], bytes]:
    """Split a raw HTTP/1.x response into (status, headers, body)."""
    head, sep, body = raw.partition(b"\r\n\r\n")
    if not sep:
        raise ContainerError("Malformed response from engine: no header terminator")

    text = head.decode("latin-1")
    status = parse_status(text)
    if status is None:
        raise ContainerError(f"Malformed status line from engine: {text.splitlines()[0] if text else ''!r}")

    headers: Dict[str, str] = {}
    for line in text.split("\r\n")[1:]:
        key, _, value = line.partition(":")
        if key:
            headers[key.strip().lower()] = value.strip()

    if headers.get("transfer-encoding", "").lower() == "chunked":
        body = decode_chunked(body)
    elif "content-length" in headers:
        try:
            length = int(headers["content-length"])
        except ValueError as e:
            raise ContainerError(f"Bad Content-Length {headers['content-length']!r}") from e
        body = body[:length]
    return status, headers, body


def decode_chunked(body: bytes) -> bytes:
    """Decode a Transfer-Encoding: chunked body."""
    out = bytearray()
    pos = 0
    while True:
        line_end = body.find(b"\r\n", pos)
        if line_end == -1:
            raise ContainerError("Truncated chunked body")
        size_field = body[pos:line_end].split(b";", 1)[0].strip()
        try:
            size = int(size_field, 16)
        except ValueError as e:
            raise ContainerError(f"Bad chunk size {size_field!r}") from e
        if size == 0:
            return bytes(out)
        start = line_end + 2
        out += body[start:start + size]
        pos = start + size + 2


async def inspect_container(target: str, socket_path: Union[str, Path]) -> ContainerStatus:
    """GET /containers/<target>/json and return its state.

    Raises:
        EndpointUnavailableError: control socket missing or refusing
        ContainerNotFoundError: engine answered 404
        ContainerError: any other failure
    """
    reader, writer = await open_endpoint(socket_path)
    request = (
        f"GET /containers/{quote(target, safe='')}/json HTTP/1.1\r\n"
        "Host: localhost\r\n"
        "Accept: application/json\r\n"
        "Connection: close\r\n"
        "\r\n"
    )
    try:
        writer.write(request.encode("ascii"))
        await writer.drain()
        raw = await reader.read()
    except (ConnectionError, OSError) as e:
        raise ContainerError(f"Inspect of {target} failed: {e}") from e
    finally:
        try:
            writer.close()
            await writer.wait_closed()
        except (ConnectionError, OSError):
            pass

    status, _, body = split_response(raw)
    if status == 404:
        raise ContainerNotFoundError(f"No such container: {target}")
    if status != 200:
        message = body.decode("utf-8", errors="replace").strip()
        try:
            message = json.loads(message).get("message", message)
        except (json.JSONDecodeError, AttributeError):
            pass
        raise ContainerError(f"Inspect of {target} failed ({status}): {message}")

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ContainerError(f"Invalid JSON from engine for {target}: {e}") from e

    logger.debug(f"Inspected {target}: {data.get('State')}")
    return ContainerStatus.from_inspect(target, data)
