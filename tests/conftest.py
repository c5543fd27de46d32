# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Shared fixtures: a fake engine on a unix socket and fake terminal parts."""

import asyncio
import contextlib
import shutil
import tempfile
from pathlib import Path

import pytest

from dockterm.utils.exceptions import TerminalModeUnavailableError

UPGRADE_RESPONSE = (
    b"HTTP/1.1 101 UPGRADED\r\n"
    b"Content-Type: application/vnd.docker.raw-stream\r\n"
    b"Connection: Upgrade\r\n"
    b"Upgrade: tcp\r\n"
    b"\r\n"
)

NOT_FOUND_RESPONSE = (
    b"HTTP/1.1 404 Not Found\r\n"
    b"Content-Type: application/json\r\n"
    b"Content-Length: 42\r\n"
    b"\r\n"
    b'{"message":"No such container: missing1"}\n'
)


@pytest.fixture
def socket_path():
    """Socket path in a short temp dir (unix socket paths are length-limited)."""
    temp_dir = Path(tempfile.mkdtemp(prefix="dt-"))
    yield temp_dir / "engine.sock"
    shutil.rmtree(temp_dir, ignore_errors=True)


@contextlib.asynccontextmanager
async def fake_engine(path, handler):
    """Serve handler(reader, writer) on a unix socket for the duration."""
    server = await asyncio.start_unix_server(handler, path=str(path))
    try:
        yield server
    finally:
        server.close()
        await server.wait_closed()


async def read_request(reader: asyncio.StreamReader) -> bytes:
    return await reader.readuntil(b"\r\n\r\n")


def run(coro, timeout: float = 5.0):
    """Run a coroutine with a hard timeout so a hang fails instead of blocking."""
    async def _bounded():
        return await asyncio.wait_for(coro, timeout)
    return asyncio.run(_bounded())


class FakeKeys:
    """Stands in for StdinReader: tests push text, None means EOF."""

    def __init__(self, *chunks):
        self.queue = asyncio.Queue()
        self.started = False
        self.stopped = False
        for chunk in chunks:
            self.queue.put_nowait(chunk)

    def start(self):
        self.started = True

    async def read(self):
        return await self.queue.get()

    def stop(self):
        self.stopped = True

    def type(self, text):
        self.queue.put_nowait(text)


class FakeTerminal:
    """Stands in for TerminalMode and records calls."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.enabled = False
        self.enable_calls = 0
        self.restore_calls = 0

    def enable(self):
        self.enable_calls += 1
        if self.fail:
            raise TerminalModeUnavailableError("not a terminal")
        self.enabled = True

    def restore(self):
        self.restore_calls += 1
        self.enabled = False


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point config and state lookups at a temp dir."""
    import dockterm.config

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.delenv("DOCKTERM_SOCKET", raising=False)
    monkeypatch.delenv("DOCKER_HOST", raising=False)
    monkeypatch.setattr(dockterm.config, "_config", None)
    yield tmp_path
