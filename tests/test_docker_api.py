# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Tests for the container inspect client."""

import json

import pytest

from dockterm.docker_api import ContainerStatus, decode_chunked, inspect_container, split_response
from dockterm.utils.exceptions import ContainerError, ContainerNotFoundError, EndpointUnavailableError
from tests.conftest import NOT_FOUND_RESPONSE, fake_engine, read_request, run

INSPECT_BODY = {
    "Id": "abc123def456",
    "Name": "/game",
    "State": {
        "Status": "running",
        "Running": True,
        "Restarting": False,
        "ExitCode": 0,
        "Error": "",
    },
}


def json_response(data, chunked=False):
    body = json.dumps(data).encode()
    if chunked:
        half = len(body) // 2
        payload = b"".join(
            b"%x\r\n%s\r\n" % (len(part), part) for part in (body[:half], body[half:])
        ) + b"0\r\n\r\n"
        return b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n" + payload
    return b"HTTP/1.1 200 OK\r\nContent-Length: %d\r\n\r\n" % len(body) + body


class TestResponseParsing:
    """Tests for raw HTTP response handling."""

    def test_content_length_body(self):
        status, headers, body = split_response(json_response({"a": 1}))
        assert status == 200
        assert headers["content-length"] == str(len(body))
        assert json.loads(body) == {"a": 1}

    def test_chunked_body(self):
        status, headers, body = split_response(json_response(INSPECT_BODY, chunked=True))
        assert status == 200
        assert json.loads(body) == INSPECT_BODY

    def test_decode_chunked_with_extension(self):
        assert decode_chunked(b"3;foo=bar\r\nabc\r\n2\r\nde\r\n0\r\n\r\n") == b"abcde"

    def test_truncated_chunked_body(self):
        with pytest.raises(ContainerError):
            decode_chunked(b"5\r\nab")

    def test_missing_terminator(self):
        with pytest.raises(ContainerError):
            split_response(b"HTTP/1.1 200 OK\r\nContent-Length: 2")

    def test_bad_status_line(self):
        with pytest.raises(ContainerError):
            split_response(b"SSH-2.0-OpenSSH\r\n\r\n")

    def test_bad_content_length(self):
        with pytest.raises(ContainerError, match="Content-Length"):
            split_response(b"HTTP/1.1 200 OK\r\nContent-Length: lots\r\n\r\n{}")


class TestContainerStatus:
    """Tests for state summaries."""

    def test_from_inspect(self):
        status = ContainerStatus.from_inspect("abc123", INSPECT_BODY)
        assert status.name == "game"
        assert status.running
        assert status.describe() == "running"

    def test_describe_crash(self):
        status = ContainerStatus("game", status="exited", exit_code=137, error="OOM")
        assert status.describe() == "crashed (exit code 137): OOM"

    def test_describe_clean_stop(self):
        assert ContainerStatus("game", status="exited").describe() == "stopped (exit code 0)"

    def test_describe_restarting(self):
        assert ContainerStatus("game", status="restarting", restarting=True).describe() == "restarting"

    def test_missing_state_block(self):
        status = ContainerStatus.from_inspect("abc123", {})
        assert status.name == "abc123"
        assert status.status == "unknown"
        assert not status.running


class TestInspectContainer:
    """Tests for inspect_container() against a fake engine."""

    def test_inspect_running(self, socket_path):
        requests = []

        async def handler(reader, writer):
            requests.append(await read_request(reader))
            writer.write(json_response(INSPECT_BODY, chunked=True))
            await writer.drain()
            writer.close()

        async def scenario():
            async with fake_engine(socket_path, handler):
                return await inspect_container("game", socket_path)

        status = run(scenario())
        assert requests[0].startswith(b"GET /containers/game/json HTTP/1.1\r\n")
        assert b"Connection: close" in requests[0]
        assert status.running

    def test_inspect_not_found(self, socket_path):
        async def handler(reader, writer):
            await read_request(reader)
            writer.write(NOT_FOUND_RESPONSE)
            await writer.drain()
            writer.close()

        async def scenario():
            async with fake_engine(socket_path, handler):
                await inspect_container("missing1", socket_path)

        with pytest.raises(ContainerNotFoundError):
            run(scenario())

    def test_inspect_server_error_message(self, socket_path):
        async def handler(reader, writer):
            await read_request(reader)
            body = b'{"message":"engine on fire"}'
            writer.write(b"HTTP/1.1 500 Internal Server Error\r\nContent-Length: %d\r\n\r\n" % len(body) + body)
            await writer.drain()
            writer.close()

        async def scenario():
            async with fake_engine(socket_path, handler):
                await inspect_container("game", socket_path)

        with pytest.raises(ContainerError) as exc_info:
            run(scenario())
        assert "engine on fire" in str(exc_info.value)
        assert "500" in str(exc_info.value)

    def test_inspect_missing_socket(self, socket_path):
        with pytest.raises(EndpointUnavailableError):
            run(inspect_container("game", socket_path))
