"""Server — owns the registry and drives the run loop over a transport."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from toolhost.protocol.codec import decode, encode
from toolhost.protocol.errors import DecodeError, InvalidRequestError, StartupError, TransportClosed
from toolhost.protocol.models import PROTOCOL_VERSION, JsonRpcResponse, ServerIdentity
from toolhost.server.dispatch import Dispatcher
from toolhost.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from toolhost.config import ServerSettings
    from toolhost.protocol.transport import Transport
    from toolhost.tools.base import Tool

logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    """Why :meth:`Server.run` returned."""

    TERMINATED = "terminated"
    CLOSED = "closed"


class Server:
    """A tool server speaking newline-delimited JSON-RPC.

    Usage::

        server = Server("demo", "1.0", {"tools": {}})
        server.add_tool(EchoTool())
        status = server.run(StdioTransport())

    In *strict* mode a line that is not valid JSON, or not a valid envelope,
    propagates out of :meth:`run` as a :class:`DecodeError` or
    :class:`InvalidRequestError`.  Otherwise it is answered with a
    ``-32700``/``-32600`` error response and the loop continues.
    """

    def __init__(
        self,
        name: str,
        version: str,
        capabilities: dict[str, Any] | None = None,
        *,
        protocol_version: str = PROTOCOL_VERSION,
        strict: bool = False,
    ) -> None:
        self.identity = ServerIdentity(name=name, version=version)
        self.capabilities = capabilities if capabilities is not None else {}
        self.strict = strict
        self.registry = ToolRegistry()
        self.dispatcher = Dispatcher(
            self.registry,
            self.identity,
            self.capabilities,
            protocol_version=protocol_version,
        )

    @classmethod
    def from_settings(cls, settings: ServerSettings) -> Server:
        """Build a server with the bundled tools enabled in *settings*.

        Raises:
            StartupError: an enabled tool is unknown or listed twice.
        """
        from toolhost.tools.builtin import builtin_tools

        server = cls(
            settings.name,
            settings.version,
            settings.capabilities,
            protocol_version=settings.protocol_version,
            strict=settings.strict,
        )
        try:
            tools = builtin_tools(settings.tools, whoami_timeout=settings.whoami_timeout)
        except KeyError as exc:
            raise StartupError(exc.args[0]) from exc
        for tool in tools:
            server.add_tool(tool)
        return server

    def add_tool(self, tool: Tool) -> None:
        """Register *tool*. Raises :class:`DuplicateToolError` on a name clash."""
        self.registry.register(tool)

    def run(self, transport: Transport) -> RunStatus:
        """Serve messages from *transport* until cancelled or end of input."""
        logger.info(
            "Serving %s %s with %d tool(s)",
            self.identity.name,
            self.identity.version,
            len(self.registry),
        )
        while not self.dispatcher.terminated:
            try:
                line = transport.receive()
            except TransportClosed:
                logger.info("Transport closed, stopping")
                return RunStatus.CLOSED

            if not line.strip():
                continue

            response = self.handle_line(line)
            if response is not None:
                transport.send(encode(response))

        logger.info("Run loop terminated")
        return RunStatus.TERMINATED

    def handle_line(self, line: str) -> JsonRpcResponse | None:
        """Decode and dispatch one raw message."""
        try:
            envelope = decode(line)
        except InvalidRequestError as exc:
            if self.strict:
                raise
            if exc.is_notification:
                logger.warning("Dropping invalid notification: %s", exc.detail)
                return None
            logger.warning("Invalid request: %s", exc.detail)
            return Dispatcher.error_response(exc.request_id, exc)
        except DecodeError as exc:
            if self.strict:
                raise
            logger.warning("Undecodable message: %s", exc.detail)
            return Dispatcher.error_response(None, exc)
        return self.dispatcher.dispatch(envelope)
