# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Terminal mode helpers: raw input for attach sessions and reset."""

import os
import sys
import termios
from typing import List, Optional

from dockterm.utils.exceptions import TerminalModeUnavailableError
from dockterm.utils.logging import get_logger

logger = get_logger(__name__)

# Escape sequences that undo what an interrupted session may have left behind
RESET_SEQUENCES = (
    "\x1b[?25h"  # show cursor
    "\x1b[0m"  # reset attributes
    "\x1b[?1000l\x1b[?1002l\x1b[?1003l\x1b[?1006l"  # mouse tracking off
)


class TerminalMode:
    """Raw-mode toggle for an input descriptor.

    Raw here means: no line buffering, no local echo, and no signal keys, so
    Ctrl+C arrives as a byte. Output processing stays on so "\\n" still maps to
    CRLF on the way out.
    """

    def __init__(self, fd: Optional[int] = None):
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._saved: Optional[List] = None

    @property
    def active(self) -> bool:
        return self._saved is not None

    def enable(self) -> None:
        """Switch to raw mode.

        Raises:
            TerminalModeUnavailableError: fd is not a terminal or termios failed
        """
        if not os.isatty(self.fd):
            raise TerminalModeUnavailableError(f"fd {self.fd} is not a terminal")
        try:
            saved = termios.tcgetattr(self.fd)
            new = termios.tcgetattr(self.fd)
            new[3] &= ~(termios.ICANON | termios.ECHO | termios.ISIG | termios.IEXTEN)
            new[0] &= ~(termios.IXON | termios.ICRNL | termios.INLCR | termios.IGNCR)
            new[6][termios.VMIN] = 1
            new[6][termios.VTIME] = 0
            termios.tcsetattr(self.fd, termios.TCSANOW, new)
        except termios.error as e:
            raise TerminalModeUnavailableError(f"termios failed: {e}") from e
        self._saved = saved

    def restore(self) -> None:
        """Restore the mode saved by enable(). Best-effort, never raises."""
        if self._saved is None:
            return
        saved, self._saved = self._saved, None
        try:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, saved)
        except (termios.error, OSError) as e:
            logger.debug(f"Terminal restore failed: {e}")


def reset_terminal() -> None:
    """Put the controlling terminal back into a sane cooked state."""
    sys.stdout.write(RESET_SEQUENCES)
    sys.stdout.flush()

    fd = sys.stdin.fileno()
    if not os.isatty(fd):
        return
    try:
        attrs = termios.tcgetattr(fd)
        attrs[3] |= termios.ICANON | termios.ECHO | termios.ISIG | termios.IEXTEN
        attrs[0] |= termios.ICRNL | termios.IXON
        termios.tcsetattr(fd, termios.TCSANOW, attrs)
    except termios.error as e:
        logger.warning(f"Could not reset terminal modes: {e}")
