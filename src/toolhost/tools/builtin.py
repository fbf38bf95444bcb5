"""Bundled tools shipped with the ``toolhost serve`` command."""

from __future__ import annotations

import getpass
import json
import logging
import socket
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from toolhost.protocol.errors import INVALID_PARAMS, ToolError
from toolhost.tools.base import BaseTool
from toolhost.tools.session import SessionTool

if TYPE_CHECKING:
    from toolhost.tools.base import Tool

logger = logging.getLogger(__name__)

LOOKUP_FAILED = -32002


class EchoTool(BaseTool):
    name = "echo"
    description = "Return the given text unchanged."
    schema = {
        "properties": {"text": {"type": "string", "description": "Text to echo back."}},
        "required": ["text"],
    }

    def execute(self, arguments: dict[str, Any]) -> str:
        text = arguments.get("text")
        if not isinstance(text, str):
            raise ToolError(INVALID_PARAMS, "'text' must be a string")
        return text


class WhoAmITool(SessionTool[ThreadPoolExecutor]):
    """Identify the account the server runs as.

    The lookup runs on a worker owned by the session and completes through a
    callback, so the session must be drained before the result is returned.
    """

    name = "whoami"
    description = "Identify the account running the server, returning account info."
    timeout_message = "Account lookup timed out"

    def __init__(self, timeout: float | None = None) -> None:
        if timeout is not None:
            self.timeout = timeout

    def open_session(self) -> ThreadPoolExecutor:
        return ThreadPoolExecutor(max_workers=1, thread_name_prefix="whoami")

    def close_session(self, session: ThreadPoolExecutor) -> None:
        # A lookup still running after a timeout is abandoned, not awaited.
        session.shutdown(wait=False, cancel_futures=True)

    def start(
        self,
        session: ThreadPoolExecutor,
        completion: Future[str],
        arguments: dict[str, Any],
    ) -> None:
        session.submit(self._resolve, completion)

    @staticmethod
    def _resolve(completion: Future[str]) -> None:
        if not completion.set_running_or_notify_cancel():
            return
        try:
            account = {"name": getpass.getuser(), "domain": socket.gethostname()}
        except (KeyError, OSError) as exc:
            logger.warning("whoami: account lookup failed: %s", exc)
            completion.set_exception(ToolError(LOOKUP_FAILED, f"Account lookup failed: {exc}"))
            return
        completion.set_result(json.dumps(account))


BUILTIN_TOOLS: dict[str, type[BaseTool]] = {
    EchoTool.name: EchoTool,
    WhoAmITool.name: WhoAmITool,
}


def builtin_tools(enabled: list[str] | None = None, *, whoami_timeout: float | None = None) -> list[Tool]:
    """Instantiate the bundled tools, optionally restricted to *enabled* names.

    Raises:
        KeyError: *enabled* names an unknown tool.
    """
    names = list(BUILTIN_TOOLS) if enabled is None else enabled
    tools: list[Tool] = []
    for name in names:
        if name not in BUILTIN_TOOLS:
            msg = f"unknown bundled tool '{name}'"
            raise KeyError(msg)
        if name == WhoAmITool.name:
            tools.append(WhoAmITool(timeout=whoami_timeout))
        else:
            tools.append(BUILTIN_TOOLS[name]())
    return tools
