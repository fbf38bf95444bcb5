"""Error types for the toolhost server.

Startup errors abort the server before the run loop begins.  Protocol errors
and tool errors are per-message: the dispatcher turns them into JSON-RPC
error responses and keeps serving.
"""

from __future__ import annotations

from typing import Any

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ToolhostError(Exception):
    """Base error for all toolhost failures."""


class StartupError(ToolhostError):
    """The server cannot start. Not recoverable."""


class DuplicateToolError(StartupError):
    """A tool with the same name is already registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool with name '{name}' already exists.")


class ConfigError(ToolhostError):
    """Server settings could not be read or validated."""


class ProtocolError(ToolhostError):
    """A per-message failure reported to the caller as a JSON-RPC error."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, *, data: Any = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)


class MethodNotFoundError(ProtocolError):
    """No handler is registered for the requested method."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__("Method not found")


class ToolNotFoundError(ProtocolError):
    """``tools/call`` named a tool that is not registered.

    Reported on the wire exactly like an unknown method.
    """

    code = METHOD_NOT_FOUND

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("Method not found")

    def __str__(self) -> str:
        return f"Tool not found: {self.name}"


class InvalidParamsError(ProtocolError):
    code = INVALID_PARAMS

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Invalid params", data=detail or None)


class InvalidRequestError(ProtocolError):
    """The message decoded as JSON but is not a valid envelope."""

    code = INVALID_REQUEST

    def __init__(
        self, detail: str = "", *, request_id: Any = None, is_notification: bool = False
    ) -> None:
        self.detail = detail
        self.request_id = request_id
        self.is_notification = is_notification
        super().__init__("Invalid Request", data=detail or None)


class DecodeError(ProtocolError):
    """The raw line is not valid JSON."""

    code = PARSE_ERROR

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Parse error", data=detail or None)


class ToolError(ToolhostError):
    """A tool's own failure. Code and message reach the caller unchanged."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class TransportClosed(EOFError):
    """The transport reached end of input."""
