# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Tests for host config loading and socket resolution."""

from pathlib import Path

import pytest

from dockterm.config import HostConfig
from dockterm.paths import HostPaths
from dockterm.utils.exceptions import ConfigLoadError


class TestHostConfig:
    """Tests for ~/.config/dockterm/config.yml handling."""

    def test_missing_file_uses_defaults(self, isolated_home):
        config = HostConfig()
        assert not config.exists()
        assert config.config_path == isolated_home / "config" / "dockterm" / "config.yml"
        assert config.model.attach.read_size == 8192
        assert config.model.attach.max_header_bytes == 16384
        assert config.model.footer.prompt == "> "
        assert config.model.footer.status_sgr == 44

    def test_values_loaded(self, isolated_home):
        path = isolated_home / "config.yml"
        path.write_text(
            "version: '1.0'\n"
            "attach:\n"
            "  socket_path: /run/podman/podman.sock\n"
            "  check_running: false\n"
            "footer:\n"
            "  prompt: '$ '\n"
            "  status_color: Magenta\n"
        )
        config = HostConfig(path)
        assert config.exists()
        assert config.model.attach.socket_path == "/run/podman/podman.sock"
        assert config.model.attach.check_running is False
        assert config.model.footer.prompt == "$ "
        assert config.model.footer.status_color == "magenta"
        assert config.socket_path() == Path("/run/podman/podman.sock")

    def test_empty_file_uses_defaults(self, isolated_home):
        path = isolated_home / "config.yml"
        path.write_text("")
        assert HostConfig(path).model.attach.read_size == 8192

    def test_invalid_yaml(self, isolated_home):
        path = isolated_home / "config.yml"
        path.write_text("attach: [unclosed\n")
        with pytest.raises(ConfigLoadError):
            HostConfig(path)

    def test_invalid_values(self, isolated_home):
        path = isolated_home / "config.yml"
        path.write_text("footer:\n  status_color: plaid\nattach:\n  read_size: 0\n")
        with pytest.raises(ConfigLoadError) as exc_info:
            HostConfig(path)
        assert "footer.status_color" in str(exc_info.value)
        assert "attach.read_size" in str(exc_info.value)

    def test_non_mapping(self, isolated_home):
        path = isolated_home / "config.yml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigLoadError):
            HostConfig(path)


class TestSocketResolution:
    """Tests for engine socket precedence."""

    def test_default_socket(self, isolated_home):
        assert HostPaths.docker_socket() == Path("/var/run/docker.sock")

    def test_docker_host_unix(self, isolated_home, monkeypatch):
        monkeypatch.setenv("DOCKER_HOST", "unix:///run/user/1000/docker.sock")
        assert HostPaths.docker_socket("/configured.sock") == Path("/run/user/1000/docker.sock")

    def test_docker_host_tcp_ignored(self, isolated_home, monkeypatch):
        monkeypatch.setenv("DOCKER_HOST", "tcp://10.0.0.2:2375")
        assert HostPaths.docker_socket("/configured.sock") == Path("/configured.sock")

    def test_dockterm_socket_wins(self, isolated_home, monkeypatch):
        monkeypatch.setenv("DOCKER_HOST", "unix:///run/docker.sock")
        monkeypatch.setenv("DOCKTERM_SOCKET", "/tmp/other.sock")
        assert HostPaths.docker_socket() == Path("/tmp/other.sock")

    def test_cli_override_wins(self, isolated_home, monkeypatch):
        monkeypatch.setenv("DOCKTERM_SOCKET", "/tmp/other.sock")
        assert HostConfig().socket_path("/tmp/flag.sock") == Path("/tmp/flag.sock")
