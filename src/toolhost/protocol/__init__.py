"""Protocol layer: JSON-RPC envelopes, codec, transports and errors."""

from toolhost.protocol.codec import decode, encode
from toolhost.protocol.errors import (
    ConfigError,
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
from toolhost.protocol.models import (
    PROTOCOL_VERSION,
    CallToolParams,
    CallToolResult,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    ServerIdentity,
    ToolDescriptor,
)
from toolhost.protocol.transport import StdioTransport, StreamTransport, Transport

__all__ = [
    "PROTOCOL_VERSION",
    "CallToolParams",
    "CallToolResult",
    "ConfigError",
    "DecodeError",
    "DuplicateToolError",
    "InvalidParamsError",
    "InvalidRequestError",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MethodNotFoundError",
    "ProtocolError",
    "ServerIdentity",
    "StartupError",
    "StdioTransport",
    "StreamTransport",
    "ToolDescriptor",
    "ToolError",
    "ToolNotFoundError",
    "ToolhostError",
    "Transport",
    "TransportClosed",
    "decode",
    "encode",
]
