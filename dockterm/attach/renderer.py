# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Log region plus fixed two-line footer.

Screen layout while attached:

    ...container output...
    [target] status text          <- status line
    > typed input_                <- input line, cursor rests here

Between renders the cursor sits on the input line after the typed text.
Every render starts by moving up to the status line, which is the top of the
footer region.
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from typing import BinaryIO, Optional, Tuple

from dockterm.models.config import FooterConfig
from dockterm.utils.logging import get_logger

logger = get_logger(__name__)

CSI = "\x1b["
HIDE_CURSOR = f"{CSI}?25l"
SHOW_CURSOR = f"{CSI}?25h"
CLEAR_LINE = f"{CSI}2K"
CLEAR_SCREEN_DOWN = f"{CSI}J"
RESET_STYLE = f"{CSI}0m"


def cursor_up(n: int) -> str:
    return f"{CSI}{n}A"


@dataclass(frozen=True)
class FooterState:
    """Snapshot of what the footer shows, taken when a render is requested."""
    target: str
    status: str
    input_text: str


class TerminalRenderer:
    """Writes log chunks and the footer to a binary output stream.

    Not safe to call from two places at once; RenderQueue serializes callers.
    """

    def __init__(self, output: Optional[BinaryIO] = None, footer: Optional[FooterConfig] = None):
        self.output = output if output is not None else sys.stdout.buffer
        self.footer = footer or FooterConfig()
        self._footer_drawn = False
        self._shown_input = ""

    def _write(self, data) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8", errors="replace")
        try:
            self.output.write(data)
        except (OSError, ValueError) as e:
            logger.debug(f"Terminal write failed: {e}")

    def _flush(self) -> None:
        try:
            self.output.flush()
        except (OSError, ValueError) as e:
            logger.debug(f"Terminal flush failed: {e}")

    def _to_footer_top(self) -> str:
        """Sequence moving from the input line to the start of the status line."""
        if not self._footer_drawn:
            return "\r"
        return "\r" + cursor_up(1)

    def status_line(self, state: FooterState) -> str:
        return f"{CSI}{self.footer.status_sgr}m[{state.target}] {state.status}{RESET_STYLE}"

    def footer_text(self, state: FooterState) -> str:
        """Footer drawn from the start of the status line; ends on the input line."""
        return (
            f"{CLEAR_LINE}{self.status_line(state)}\r\n"
            f"{CLEAR_LINE}{self.footer.prompt}{state.input_text}"
        )

    def _emit_footer(self, state: FooterState) -> None:
        self._write(self.footer_text(state))
        self._footer_drawn = True
        self._shown_input = state.input_text

    def draw_footer(self, state: FooterState) -> None:
        """Redraw status and input lines in place."""
        self._write(self._to_footer_top())
        self._emit_footer(state)
        self._flush()

    def write_log(self, chunk: bytes, state: FooterState) -> None:
        """Print a chunk of container output above the footer."""
        if not chunk:
            return
        self._write(HIDE_CURSOR)
        self._write(self._to_footer_top())
        self._write(CLEAR_SCREEN_DOWN)
        self._write(chunk)
        if not chunk.endswith(b"\n"):
            # Keeps the footer on its own lines; splits partial output lines
            self._write(b"\n")
        self._footer_drawn = False
        self._emit_footer(state)
        self._write(SHOW_CURSOR)
        self._flush()

    def echo(self, text: str, state: FooterState) -> None:
        """Echo a typed character, or redraw if the input line is out of date."""
        if self._footer_drawn and self._shown_input + text == state.input_text:
            self._write(text)
            self._shown_input = state.input_text
            self._flush()
        else:
            self.draw_footer(state)

    def finish(self) -> None:
        """Terminate the footer so the shell prompt starts on a fresh line."""
        self._write("\r\n")
        self._flush()


# Queue commands: (op, payload, footer state)
RenderCommand = Tuple[str, object, FooterState]


class RenderQueue:
    """Single consumer for all terminal output of a session.

    Both session loops submit commands; one task executes them in order so
    only one render is ever in flight.
    """

    def __init__(self, renderer: TerminalRenderer):
        self.renderer = renderer
        self._queue: asyncio.Queue = asyncio.Queue()
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.ensure_future(self._run())

    def log(self, chunk: bytes, state: FooterState) -> None:
        self._queue.put_nowait(("log", chunk, state))

    def footer(self, state: FooterState) -> None:
        self._queue.put_nowait(("footer", None, state))

    def echo(self, text: str, state: FooterState) -> None:
        self._queue.put_nowait(("echo", text, state))

    def _execute(self, command: RenderCommand) -> None:
        op, payload, state = command
        if op == "log":
            self.renderer.write_log(payload, state)
        elif op == "footer":
            self.renderer.draw_footer(state)
        elif op == "echo":
            self.renderer.echo(payload, state)
        else:
            logger.warning(f"Unknown render command: {op}")

    async def _run(self) -> None:
        while True:
            command = await self._queue.get()
            try:
                self._execute(command)
            except Exception as e:
                logger.error(f"Render failed: {e}")
            finally:
                self._queue.task_done()

    async def close(self) -> None:
        """Render everything still queued, then stop the consumer."""
        if self._task is None:
            return
        await self._queue.join()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
