# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Centralized path definitions for Dockterm.

Usage:
    from dockterm.paths import HostPaths

    config_file = HostPaths.config_file()
    socket = HostPaths.docker_socket()
"""

import os
from pathlib import Path
from typing import Optional


class HostPaths:
    """Paths on the host machine where the dockterm CLI runs."""

    # Docker socket
    DOCKER_SOCKET = "/var/run/docker.sock"

    @staticmethod
    def config_dir() -> Path:
        """$XDG_CONFIG_HOME/dockterm/ or ~/.config/dockterm/"""
        xdg = os.getenv("XDG_CONFIG_HOME")
        if xdg:
            return Path(xdg) / "dockterm"
        return Path.home() / ".config" / "dockterm"

    @staticmethod
    def config_file() -> Path:
        """~/.config/dockterm/config.yml"""
        return HostPaths.config_dir() / "config.yml"

    @staticmethod
    def state_dir() -> Path:
        """$XDG_STATE_HOME/dockterm/ or ~/.local/state/dockterm/"""
        xdg = os.getenv("XDG_STATE_HOME")
        if xdg:
            return Path(xdg) / "dockterm"
        return Path.home() / ".local" / "state" / "dockterm"

    @staticmethod
    def log_file() -> Path:
        """~/.local/state/dockterm/dockterm.log"""
        return HostPaths.state_dir() / "dockterm.log"

    @staticmethod
    def docker_socket(configured: Optional[str] = None) -> Path:
        """Resolve the engine control socket.

        Order: DOCKTERM_SOCKET, DOCKER_HOST (unix:// only), the configured
        value, then the well-known default.
        """
        env_socket = os.getenv("DOCKTERM_SOCKET")
        if env_socket:
            return Path(env_socket)

        docker_host = os.getenv("DOCKER_HOST", "")
        if docker_host.startswith("unix://"):
            return Path(docker_host[len("unix://"):])

        if configured:
            return Path(configured)

        return Path(HostPaths.DOCKER_SOCKET)
