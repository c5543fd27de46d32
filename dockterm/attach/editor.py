# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Single-line input editor for attach sessions.

Keystrokes become edit actions. The editor only ever holds printable text, so
the footer can echo the buffer verbatim without escaping.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Tuple

INTERRUPT = "\x03"
SUBMIT_KEYS = ("\r", "\n")
DELETE_KEYS = ("\x08", "\x7f")
ESC = "\x1b"


class EditKind(Enum):
    """What the outbound loop should do after a keystroke."""
    APPEND = "append"
    DELETE = "delete"
    SUBMIT = "submit"
    INTERRUPT = "interrupt"
    IGNORE = "ignore"


@dataclass(frozen=True)
class EditAction:
    kind: EditKind
    # APPEND: the character to echo. SUBMIT: the line to send, newline included.
    text: str = ""


IGNORED = EditAction(EditKind.IGNORE)


def is_printable(key: str) -> bool:
    """Single character at or above space that is not a control character."""
    return len(key) == 1 and key.isprintable()


def apply_key(buffer: str, key: str) -> Tuple[str, EditAction]:
    """Apply one logical key to buffer and return (new_buffer, action)."""
    if key == INTERRUPT:
        return buffer, EditAction(EditKind.INTERRUPT)

    if key in SUBMIT_KEYS:
        return "", EditAction(EditKind.SUBMIT, buffer + "\n")

    if key in DELETE_KEYS:
        if not buffer:
            return buffer, IGNORED
        return buffer[:-1], EditAction(EditKind.DELETE)

    if is_printable(key):
        return buffer + key, EditAction(EditKind.APPEND, key)

    return buffer, IGNORED


def _escape_end(text: str, start: int) -> int:
    """Index just past the escape sequence starting at text[start] (an ESC)."""
    i = start + 1
    if i >= len(text):
        return i

    introducer = text[i]
    if introducer == "[":
        # CSI: parameter/intermediate bytes, then one final byte in @..~
        i += 1
        while i < len(text) and not ("\x40" <= text[i] <= "\x7e"):
            i += 1
        return min(i + 1, len(text))
    if introducer == "O":
        # SS3: exactly one more byte (F1-F4, keypad)
        return min(i + 2, len(text))
    # Alt+key and other two-byte forms
    return i + 1


def iter_keys(text: str) -> Iterator[str]:
    """Split a chunk of terminal input into logical keys, in arrival order.

    Escape sequences (arrow keys, function keys, Alt+key) come out as one key
    so their printable tail is never mistaken for typed text.
    """
    i = 0
    while i < len(text):
        if text[i] == ESC:
            end = _escape_end(text, i)
            yield text[i:end]
            i = end
        elif text[i] == "\r" and text[i + 1:i + 2] == "\n":
            # CRLF from pasted text is one submit, not two
            yield "\r"
            i += 2
        else:
            yield text[i]
            i += 1


class LineEditor:
    """Owns the in-progress input line. Only touched by the outbound loop."""

    def __init__(self, buffer: str = ""):
        self.buffer = buffer

    def feed(self, key: str) -> EditAction:
        self.buffer, action = apply_key(self.buffer, key)
        return action

    def __len__(self) -> int:
        return len(self.buffer)


def is_partial_escape(key: str) -> bool:
    """True for an escape sequence cut off before its final byte."""
    if not key.startswith(ESC):
        return False
    if len(key) == 1:
        return True
    if key[1] == "[":
        return len(key) == 2 or not ("\x40" <= key[-1] <= "\x7e")
    if key[1] == "O":
        return len(key) < 3
    return False


class KeyDecoder:
    """Splits successive reads into keys.

    An escape sequence cut off at the end of one read is held back and
    completed by the next, so its tail is never taken for typed text.
    """

    def __init__(self):
        self._pending = ""

    def feed(self, text: str) -> List[str]:
        keys: List[str] = []
        if self._pending == ESC and text and text[0] not in "[O":
            # Bare Escape press followed by an ordinary key
            keys.append(ESC)
            self._pending = ""

        keys.extend(iter_keys(self._pending + text))
        self._pending = ""
        if keys and is_partial_escape(keys[-1]):
            self._pending = keys.pop()
        return keys
