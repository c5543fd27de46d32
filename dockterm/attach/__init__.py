# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Interactive attach: handshake, line editor, renderer and session loop."""

from dockterm.attach.editor import EditAction, EditKind, KeyDecoder, LineEditor, apply_key, iter_keys
from dockterm.attach.handshake import Transport, build_attach_request, connect
from dockterm.attach.renderer import FooterState, RenderQueue, TerminalRenderer
from dockterm.attach.session import AttachSession, Session, SessionState, StdinReader, attach

__all__ = [
    "EditAction",
    "EditKind",
    "KeyDecoder",
    "LineEditor",
    "apply_key",
    "iter_keys",
    "Transport",
    "build_attach_request",
    "connect",
    "FooterState",
    "RenderQueue",
    "TerminalRenderer",
    "AttachSession",
    "Session",
    "SessionState",
    "StdinReader",
    "attach",
]
