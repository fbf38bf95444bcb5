"""Shared fixtures for toolhost tests."""

from __future__ import annotations

import io
import json
from typing import Any

import pytest

from toolhost.protocol.errors import ToolError
from toolhost.protocol.transport import StreamTransport
from toolhost.server.server import Server
from toolhost.tools.base import BaseTool


class RecordingTool(BaseTool):
    """Echo tool that remembers every call."""

    name = "echo"
    description = "Echo the text argument."
    schema = {"properties": {"text": {"type": "string"}}}

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    def execute(self, arguments: dict[str, Any]) -> str:
        self.calls.append(arguments)
        return str(arguments.get("text", ""))


class FailingTool(BaseTool):
    name = "broken"
    description = "Always fails."

    def execute(self, arguments: dict[str, Any]) -> str:
        raise ToolError(-2147023436, "Facial recognition timed out")


def make_transport(*messages: dict[str, Any] | str) -> tuple[StreamTransport, io.StringIO]:
    """Build an in-memory transport preloaded with *messages*."""
    lines = [m if isinstance(m, str) else json.dumps(m) for m in messages]
    reader = io.StringIO("".join(line + "\n" for line in lines))
    writer = io.StringIO()
    return StreamTransport(reader, writer), writer


def read_responses(writer: io.StringIO) -> list[dict[str, Any]]:
    return [json.loads(line) for line in writer.getvalue().splitlines() if line]


@pytest.fixture
def echo_tool() -> RecordingTool:
    return RecordingTool()


@pytest.fixture
def server(echo_tool: RecordingTool) -> Server:
    srv = Server("demo", "1.0", {})
    srv.add_tool(echo_tool)
    return srv
