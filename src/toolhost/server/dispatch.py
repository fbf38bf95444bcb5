"""Dispatcher — the protocol state machine.

Consumes decoded envelopes, routes them through explicit method tables and
produces response envelopes.  A message is a request if and only if it
carries an ``id``; the ``notifications/`` method prefix is not consulted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from pydantic import ValidationError

from toolhost.protocol.errors import (
    INTERNAL_ERROR,
    InvalidParamsError,
    MethodNotFoundError,
    ProtocolError,
    ToolError,
)
from toolhost.protocol.models import (
    PROTOCOL_VERSION,
    CallToolParams,
    CallToolResult,
    InitializeResult,
    JsonRpcRequest,
    JsonRpcResponse,
    RequestId,
)
from toolhost.utils.telemetry import (
    ATTR_ERROR_CODE,
    ATTR_IS_NOTIFICATION,
    ATTR_METHOD,
    ATTR_REQUEST_ID,
    ATTR_STATE,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from toolhost.protocol.models import Envelope, ServerIdentity
    from toolhost.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

Params = dict[str, Any] | list[Any] | None
RequestHandler = Callable[[Params], dict[str, Any]]
NotificationHandler = Callable[[Params], None]


class ServerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    TERMINATED = "terminated"


class Dispatcher:
    """Routes one envelope at a time and tracks the server lifecycle.

    ``UNINITIALIZED -> READY -> TERMINATED``; ``TERMINATED`` is absorbing.

    Usage::

        dispatcher = Dispatcher(registry, ServerIdentity(name="demo", version="1.0"), {})
        response = dispatcher.dispatch(envelope)   # None for notifications
        if dispatcher.terminated:
            ...
    """

    def __init__(
        self,
        registry: ToolRegistry,
        identity: ServerIdentity,
        capabilities: dict[str, Any],
        *,
        protocol_version: str = PROTOCOL_VERSION,
    ) -> None:
        self._registry = registry
        self._identity = identity
        self._capabilities = capabilities
        self._protocol_version = protocol_version
        self._state = ServerState.UNINITIALIZED

        self._requests: dict[str, RequestHandler] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }
        self._notifications: dict[str, NotificationHandler] = {
            "notifications/initialized": self._initialized,
            "notifications/cancelled": self._cancelled,
        }

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def terminated(self) -> bool:
        return self._state is ServerState.TERMINATED

    def dispatch(self, envelope: Envelope) -> JsonRpcResponse | None:
        """Handle *envelope*; return the response for a request, ``None`` otherwise."""
        if self.terminated:
            logger.warning("Dropping %s: server already terminated", envelope.method)
            return None

        with _tracer.start_as_current_span("toolhost.message") as span:
            span.set_attribute(ATTR_METHOD, envelope.method)
            if isinstance(envelope, JsonRpcRequest):
                span.set_attribute(ATTR_IS_NOTIFICATION, False)
                span.set_attribute(ATTR_REQUEST_ID, str(envelope.id))
                response = self._handle_request(envelope)
                if response.error is not None:
                    span.set_attribute(ATTR_ERROR_CODE, response.error.code)
            else:
                span.set_attribute(ATTR_IS_NOTIFICATION, True)
                self._handle_notification(envelope.method, envelope.params)
                response = None
            span.set_attribute(ATTR_STATE, self._state.value)
        return response

    @staticmethod
    def error_response(request_id: RequestId, exc: ProtocolError) -> JsonRpcResponse:
        return JsonRpcResponse.failure(request_id, exc.code, exc.message, exc.data)

    # -------------------------
    # Routing
    # -------------------------

    def _handle_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        handler = self._requests.get(request.method)
        try:
            if handler is None:
                raise MethodNotFoundError(request.method)
            result = handler(request.params)
        except ProtocolError as exc:
            logger.info("%s (id=%r) failed: %s", request.method, request.id, exc)
            return self.error_response(request.id, exc)
        except ToolError as exc:
            logger.info("%s (id=%r) tool error: %s", request.method, request.id, exc)
            return JsonRpcResponse.failure(request.id, exc.code, exc.message)
        except Exception:
            logger.exception("%s (id=%r) raised unexpectedly", request.method, request.id)
            return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, "Internal error")
        return JsonRpcResponse.success(request.id, result)

    def _handle_notification(self, method: str, params: Params) -> None:
        handler = self._notifications.get(method)
        if handler is None:
            logger.debug("Ignoring notification %s", method)
            return
        handler(params)

    # -------------------------
    # Requests
    # -------------------------

    def _initialize(self, params: Params) -> dict[str, Any]:
        if isinstance(params, dict) and "clientInfo" in params:
            logger.info("Client connected: %s", params["clientInfo"])
        self._state = ServerState.READY
        result = InitializeResult(
            protocol_version=self._protocol_version,
            server_info=self._identity,
            capabilities=self._capabilities,
        )
        return result.model_dump(by_alias=True)

    def _ping(self, params: Params) -> dict[str, Any]:
        return {}

    def _list_tools(self, params: Params) -> dict[str, Any]:
        return {"tools": [d.to_wire() for d in self._registry.enumerate()]}

    def _call_tool(self, params: Params) -> dict[str, Any]:
        if not isinstance(params, dict):
            raise InvalidParamsError("tools/call params must be an object")
        try:
            call = CallToolParams.model_validate(params)
        except ValidationError as exc:
            raise InvalidParamsError(str(exc.errors()[0]["msg"])) from exc

        trace.get_current_span().set_attribute(ATTR_TOOL_NAME, call.name)
        tool = self._registry.lookup(call.name)
        logger.debug("Calling tool %s", call.name)
        output = tool.execute(call.arguments)
        return CallToolResult.from_text(output).model_dump()

    # -------------------------
    # Notifications
    # -------------------------

    def _initialized(self, params: Params) -> None:
        self._state = ServerState.READY

    def _cancelled(self, params: Params) -> None:
        logger.info("Cancellation received, terminating")
        self._state = ServerState.TERMINATED
