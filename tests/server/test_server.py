"""End-to-end tests for Server and its run loop over an in-memory transport."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from tests.conftest import FailingTool, RecordingTool, make_transport, read_responses
from toolhost.config import ServerSettings
from toolhost.protocol.errors import DecodeError, DuplicateToolError, InvalidRequestError
from toolhost.server.server import RunStatus, Server


class TestScenarios:
    """Request/response pairs a client would see on the wire."""

    def test_initialize(self, server: Server) -> None:
        transport, out = make_transport(
            {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}}
        )
        server.run(transport)
        assert out.getvalue() == (
            '{"jsonrpc":"2.0","id":1,"result":{"protocolVersion":"2024-11-05",'
            '"serverInfo":{"name":"demo","version":"1.0"},"capabilities":{}}}\n'
        )

    def test_tools_list(self, server: Server) -> None:
        transport, out = make_transport({"id": 2, "method": "tools/list"})
        server.run(transport)
        (response,) = read_responses(out)
        assert response["id"] == 2
        (tool,) = response["result"]["tools"]
        assert tool["name"] == "echo"
        assert tool["description"] == "Echo the text argument."
        assert tool["inputSchema"]["type"] == "object"

    def test_call_missing_tool(self, server: Server, echo_tool: RecordingTool) -> None:
        transport, out = make_transport(
            {"id": 3, "method": "tools/call", "params": {"name": "missing"}}
        )
        server.run(transport)
        assert read_responses(out) == [
            {"jsonrpc": "2.0", "id": 3, "error": {"code": -32601, "message": "Method not found"}}
        ]
        assert echo_tool.calls == []

    def test_call_echo(self, server: Server, echo_tool: RecordingTool) -> None:
        transport, out = make_transport(
            {"id": 4, "method": "tools/call", "params": {"name": "echo", "arguments": {"text": "hi"}}}
        )
        server.run(transport)
        assert read_responses(out) == [
            {"jsonrpc": "2.0", "id": 4, "result": {"content": [{"type": "text", "text": "hi"}]}}
        ]
        assert echo_tool.calls == [{"text": "hi"}]

    def test_cancelled_produces_no_output(self, server: Server) -> None:
        transport, out = make_transport({"method": "notifications/cancelled"})
        assert server.run(transport) is RunStatus.TERMINATED
        assert out.getvalue() == ""


class TestRunLoop:
    def test_full_session(self, server: Server) -> None:
        transport, out = make_transport(
            {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}},
            {"jsonrpc": "2.0", "method": "notifications/initialized"},
            {"jsonrpc": "2.0", "id": 2, "method": "tools/list"},
            {"jsonrpc": "2.0", "id": 3, "method": "tools/call", "params": {"name": "echo", "arguments": {"text": "a"}}},
        )
        assert server.run(transport) is RunStatus.CLOSED
        assert [r["id"] for r in read_responses(out)] == [1, 2, 3]

    def test_notifications_never_answered(self, server: Server) -> None:
        transport, out = make_transport(
            {"method": "notifications/initialized"},
            {"method": "notifications/progress", "params": {"progress": 1}},
            {"method": "tools/list"},
        )
        server.run(transport)
        assert out.getvalue() == ""

    def test_ids_echoed(self, server: Server) -> None:
        ids: list[Any] = ["abc", 0, -1, 3.5, None, "x" * 40]
        transport, out = make_transport(*({"id": rid, "method": "ping"} for rid in ids))
        server.run(transport)
        assert [r["id"] for r in read_responses(out)] == ids

    def test_nothing_processed_after_cancel(self, server: Server, echo_tool: RecordingTool) -> None:
        transport, out = make_transport(
            {"id": 1, "method": "initialize"},
            {"method": "notifications/cancelled"},
            {"id": 2, "method": "tools/call", "params": {"name": "echo", "arguments": {"text": "late"}}},
        )
        assert server.run(transport) is RunStatus.TERMINATED
        assert [r["id"] for r in read_responses(out)] == [1]
        assert echo_tool.calls == []

    def test_run_after_terminated_returns_immediately(self, server: Server) -> None:
        first, _ = make_transport({"method": "notifications/cancelled"})
        server.run(first)
        second = MagicMock()
        assert server.run(second) is RunStatus.TERMINATED
        second.receive.assert_not_called()

    def test_blank_lines_skipped(self, server: Server) -> None:
        transport, out = make_transport("", "   ", {"id": 1, "method": "ping"})
        server.run(transport)
        assert read_responses(out) == [{"jsonrpc": "2.0", "id": 1, "result": {}}]

    def test_tool_error_keeps_serving(self) -> None:
        server = Server("demo", "1.0")
        server.add_tool(FailingTool())
        transport, out = make_transport(
            {"id": 1, "method": "tools/call", "params": {"name": "broken"}},
            {"id": 2, "method": "ping"},
        )
        assert server.run(transport) is RunStatus.CLOSED
        first, second = read_responses(out)
        assert first["error"] == {"code": -2147023436, "message": "Facial recognition timed out"}
        assert second["result"] == {}


class TestDecodeHandling:
    def test_lenient_parse_error(self, server: Server) -> None:
        transport, out = make_transport("{oops", {"id": 2, "method": "ping"})
        assert server.run(transport) is RunStatus.CLOSED
        first, second = read_responses(out)
        assert first["id"] is None
        assert first["error"]["code"] == -32700
        assert first["error"]["message"] == "Parse error"
        assert second["id"] == 2

    def test_lenient_invalid_request_keeps_id(self, server: Server) -> None:
        transport, out = make_transport({"id": 7, "params": {}})
        server.run(transport)
        (response,) = read_responses(out)
        assert response["id"] == 7
        assert response["error"]["code"] == -32600

    def test_lenient_invalid_notification_not_answered(self, server: Server) -> None:
        transport, out = make_transport(
            {"jsonrpc": "2.0", "method": "notifications/cancelled", "params": "x"},
            {"jsonrpc": "2.0", "method": 42},
            {"id": 3, "method": "ping"},
        )
        assert server.run(transport) is RunStatus.CLOSED
        (response,) = read_responses(out)
        assert response == {"jsonrpc": "2.0", "id": 3, "result": {}}

    def test_strict_parse_error_propagates(self) -> None:
        server = Server("demo", "1.0", strict=True)
        transport, out = make_transport("{oops", {"id": 2, "method": "ping"})
        with pytest.raises(DecodeError):
            server.run(transport)
        assert out.getvalue() == ""

    def test_strict_invalid_request_propagates(self) -> None:
        server = Server("demo", "1.0", strict=True)
        transport, _ = make_transport("[]")
        with pytest.raises(InvalidRequestError):
            server.run(transport)


class TestServerSetup:
    def test_duplicate_tool_rejected_before_run(self, server: Server) -> None:
        with pytest.raises(DuplicateToolError):
            server.add_tool(RecordingTool())
        assert len(server.registry) == 1

    def test_capabilities_advertised_verbatim(self) -> None:
        caps = {"tools": {"listChanged": False}, "custom": [1, 2]}
        server = Server("demo", "1.0", caps)
        transport, out = make_transport({"id": 1, "method": "initialize"})
        server.run(transport)
        assert read_responses(out)[0]["result"]["capabilities"] == caps

    def test_from_settings(self) -> None:
        settings = ServerSettings(name="helloface", version="0.0.1", tools=["echo"])
        server = Server.from_settings(settings)
        assert server.identity.name == "helloface"
        assert server.registry.names() == ["echo"]
        assert server.capabilities == {"tools": {}}

    def test_from_settings_duplicate(self) -> None:
        with pytest.raises(DuplicateToolError):
            Server.from_settings(ServerSettings(tools=["echo", "echo"]))

    def test_from_settings_unknown_tool(self) -> None:
        from toolhost.protocol.errors import StartupError

        with pytest.raises(StartupError, match="unknown bundled tool"):
            Server.from_settings(ServerSettings(tools=["reco"]))

    def test_handle_line_direct(self, server: Server) -> None:
        response = server.handle_line(json.dumps({"id": 1, "method": "ping"}))
        assert response is not None
        assert response.result == {}
