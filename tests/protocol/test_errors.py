"""Tests for the toolhost error hierarchy."""

from toolhost.protocol.errors import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    DecodeError,
    DuplicateToolError,
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ProtocolError,
    StartupError,
    ToolError,
    ToolhostError,
    ToolNotFoundError,
    TransportClosed,
)


class TestErrorHierarchy:
    def test_duplicate_is_startup_error(self) -> None:
        assert issubclass(DuplicateToolError, StartupError)
        assert issubclass(StartupError, ToolhostError)

    def test_per_message_errors_are_protocol_errors(self) -> None:
        for cls in (MethodNotFoundError, ToolNotFoundError, InvalidParamsError, DecodeError):
            assert issubclass(cls, ProtocolError)

    def test_tool_error_is_not_protocol_error(self) -> None:
        assert not issubclass(ToolError, ProtocolError)

    def test_transport_closed_is_eof(self) -> None:
        assert issubclass(TransportClosed, EOFError)


class TestCodes:
    def test_tool_not_found_matches_method_not_found(self) -> None:
        tool_err = ToolNotFoundError("missing")
        method_err = MethodNotFoundError("bogus/method")
        assert tool_err.code == method_err.code == METHOD_NOT_FOUND
        assert tool_err.message == method_err.message == "Method not found"

    def test_tool_not_found_str_names_tool(self) -> None:
        assert "missing" in str(ToolNotFoundError("missing"))

    def test_invalid_params_carries_detail(self) -> None:
        err = InvalidParamsError("name is required")
        assert err.code == INVALID_PARAMS
        assert err.data == "name is required"

    def test_decode_error(self) -> None:
        err = DecodeError("Expecting value")
        assert err.code == PARSE_ERROR
        assert err.message == "Parse error"

    def test_invalid_request_keeps_id(self) -> None:
        err = InvalidRequestError("method: missing", request_id=7)
        assert err.request_id == 7
        assert err.is_notification is False


class TestMessages:
    def test_duplicate_message(self) -> None:
        err = DuplicateToolError("echo")
        assert err.name == "echo"
        assert str(err) == "Tool with name 'echo' already exists."

    def test_tool_error_attributes(self) -> None:
        err = ToolError(-5, "device busy")
        assert err.code == -5
        assert err.message == "device busy"
        assert "device busy" in str(err)
