# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Interactive attach session.

Runs two tasks against one upgraded transport:
- inbound: container output -> log region
- outbound: keystrokes -> line editor -> container stdin on Enter

The session ends when the container stream closes or the user presses
Ctrl+C; the other task is then cancelled. End of terminal input only stops
the outbound task, so output keeps flowing until the container hangs up.
Teardown (terminal mode, input reader, transport) runs exactly once.
"""

from __future__ import annotations

import asyncio
import codecs
import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from dockterm.attach.editor import EditKind, KeyDecoder, LineEditor
from dockterm.attach.handshake import Transport, connect
from dockterm.attach.renderer import FooterState, RenderQueue, TerminalRenderer
from dockterm.models.config import AttachConfig, FooterConfig
from dockterm.utils.exceptions import (
    StreamReadError,
    StreamWriteError,
    TerminalModeUnavailableError,
)
from dockterm.utils.logging import get_logger
from dockterm.utils.terminal import TerminalMode

logger = get_logger(__name__)

STATUS_CONNECTING = "Connecting..."
STATUS_CONNECTED = "Connected"


class SessionState(Enum):
    """Lifecycle of one attach."""
    CONNECTING = "connecting"
    HANDSHAKING = "handshaking"
    ATTACHED = "attached"
    DETACHING = "detaching"
    CLOSED = "closed"


@dataclass
class Session:
    """State of one attach lifetime."""
    target: str
    editor: LineEditor = field(default_factory=LineEditor)
    running: bool = False
    clean_exit: bool = False
    state: SessionState = SessionState.CONNECTING
    status: str = STATUS_CONNECTING

    @property
    def input_buffer(self) -> str:
        return self.editor.buffer

    def footer_state(self) -> FooterState:
        return FooterState(self.target, self.status, self.editor.buffer)


class StdinReader:
    """Cancellable terminal input.

    The descriptor is watched with loop.add_reader and decoded text is handed
    over through a queue, so a pending read() can be cancelled without closing
    stdin. None marks end of input.
    """

    def __init__(self, fd: Optional[int] = None, read_size: int = 128):
        self.fd = sys.stdin.fileno() if fd is None else fd
        self.read_size = read_size
        self._queue: asyncio.Queue = asyncio.Queue()
        self._decoder = codecs.getincrementaldecoder("utf-8")("replace")
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def start(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._loop.add_reader(self.fd, self._on_readable)

    def _on_readable(self) -> None:
        try:
            data = os.read(self.fd, self.read_size)
        except OSError as e:
            logger.debug(f"stdin read failed: {e}")
            data = b""
        if not data:
            self.stop()
            self._queue.put_nowait(None)
            return
        text = self._decoder.decode(data)
        if text:
            self._queue.put_nowait(text)

    async def read(self) -> Optional[str]:
        return await self._queue.get()

    def stop(self) -> None:
        if self._loop is None:
            return
        try:
            self._loop.remove_reader(self.fd)
        except (ValueError, OSError) as e:
            logger.debug(f"stdin reader removal failed: {e}")
        self._loop = None


Connector = Callable[..., Awaitable[Transport]]


class AttachSession:
    """Drives Connecting -> Handshaking -> Attached -> Detaching -> Closed."""

    def __init__(
        self,
        target: str,
        socket_path: Union[str, Path],
        attach_config: Optional[AttachConfig] = None,
        footer_config: Optional[FooterConfig] = None,
        renderer: Optional[TerminalRenderer] = None,
        keys: Optional[StdinReader] = None,
        terminal: Optional[TerminalMode] = None,
        connector: Connector = connect,
    ):
        self.config = attach_config or AttachConfig()
        self.footer_config = footer_config or FooterConfig()
        self.session = Session(target=target)
        self.socket_path = socket_path
        self.renderer = renderer or TerminalRenderer(footer=self.footer_config)
        self.keys = keys
        self.terminal = terminal
        self.connector = connector
        self.transport: Optional[Transport] = None
        self.render: Optional[RenderQueue] = None
        self.decoder = KeyDecoder()
        self._input_closed = False
        self._torn_down = False

    @property
    def connected_status(self) -> str:
        return f"{STATUS_CONNECTED} | {self.footer_config.detach_hint}"

    async def run(self) -> Session:
        """Attach, run both loops until either ends, tear down.

        Handshake errors propagate before anything touches the terminal.
        """
        session = self.session
        session.state = SessionState.HANDSHAKING
        try:
            self.transport = await self.connector(
                session.target,
                self.socket_path,
                max_header_bytes=self.config.max_header_bytes,
            )
        except BaseException:
            session.state = SessionState.CLOSED
            raise

        session.state = SessionState.ATTACHED
        session.running = True
        session.status = self.connected_status
        try:
            self._enter_raw_mode()
            if self.keys is None:
                self.keys = StdinReader(read_size=self.config.input_read_size)
            self.keys.start()

            self.render = RenderQueue(self.renderer)
            self.render.start()
            self.render.footer(session.footer_state())

            await self._run_loops()
        finally:
            await self._teardown()
        return session

    def _enter_raw_mode(self) -> None:
        if self.terminal is None:
            self.terminal = TerminalMode()
        try:
            self.terminal.enable()
        except TerminalModeUnavailableError as e:
            logger.warning(f"Raw mode unavailable, input will be line-buffered: {e}")

    async def _run_loops(self) -> None:
        inbound = asyncio.ensure_future(self._inbound())
        outbound = asyncio.ensure_future(self._outbound())
        try:
            done, pending = await asyncio.wait(
                {inbound, outbound}, return_when=asyncio.FIRST_COMPLETED
            )
            if outbound in done and self._input_closed and not inbound.done():
                logger.debug("Waiting for the container to close the stream")
                done, pending = await asyncio.wait({inbound})
        finally:
            self.session.running = False
            self.session.state = SessionState.DETACHING
            for task in (inbound, outbound):
                task.cancel()
            await asyncio.gather(inbound, outbound, return_exceptions=True)

        for task in done:
            if not task.cancelled() and task.exception() is not None:
                logger.error(f"Session loop failed: {task.exception()!r}")

    async def _inbound(self) -> None:
        session = self.session
        while session.running:
            try:
                chunk = await self.transport.read(self.config.read_size)
            except StreamReadError as e:
                logger.debug(f"Inbound stream ended: {e}")
                chunk = b""
            if not chunk:
                logger.info(f"Stream from {session.target} closed")
                session.running = False
                return
            self.render.log(chunk, session.footer_state())

    async def _outbound(self) -> None:
        session = self.session
        while session.running:
            text = await self.keys.read()
            if text is None:
                logger.debug("Terminal input closed")
                self._input_closed = True
                return
            for key in self.decoder.feed(text):
                if not await self._handle_key(key):
                    return

    async def _handle_key(self, key: str) -> bool:
        """Apply one key. Returns False when the session should end."""
        session = self.session
        action = session.editor.feed(key)

        if action.kind is EditKind.INTERRUPT:
            session.clean_exit = True
            session.running = False
            logger.info(f"Detach requested for {session.target}")
            return False

        if action.kind is EditKind.SUBMIT:
            try:
                await self.transport.write(action.text.encode("utf-8"))
            except StreamWriteError as e:
                logger.debug(f"Outbound stream ended: {e}")
                session.running = False
                return False
            self.render.footer(session.footer_state())
        elif action.kind is EditKind.APPEND:
            self.render.echo(action.text, session.footer_state())
        elif action.kind is EditKind.DELETE:
            self.render.footer(session.footer_state())
        return True

    async def _teardown(self) -> None:
        if self._torn_down:
            return
        self._torn_down = True
        session = self.session
        session.running = False
        session.state = SessionState.DETACHING

        if self.render is not None:
            await self.render.close()
        if self.terminal is not None:
            self.terminal.restore()
        if self.keys is not None:
            self.keys.stop()
        if self.transport is not None:
            await self.transport.close()
        self.renderer.finish()

        session.state = SessionState.CLOSED
        logger.info(f"Session for {session.target} closed (clean_exit={session.clean_exit})")


async def attach(
    target: str,
    socket_path: Union[str, Path],
    attach_config: Optional[AttachConfig] = None,
    footer_config: Optional[FooterConfig] = None,
) -> Session:
    """Attach the current terminal to target until detach or stream end."""
    return await AttachSession(
        target,
        socket_path,
        attach_config=attach_config,
        footer_config=footer_config,
    ).run()
