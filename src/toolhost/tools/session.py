"""SessionTool — tools backed by an external session with callback completion.

Some tools talk to a stateful external subsystem: they open a session, start
an asynchronous operation whose result arrives through a callback, and wait
for it.  :class:`SessionTool` wraps that shape so the session is always
closed before ``execute`` returns, on success, failure and timeout alike.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from toolhost.protocol.errors import ToolError
from toolhost.tools.base import BaseTool

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

SessionT = TypeVar("SessionT")

TOOL_TIMEOUT = -32001


class SessionTool(BaseTool, Generic[SessionT]):
    """Base for tools that open a session and wait on a callback.

    Subclasses implement :meth:`open_session`, :meth:`close_session` and
    :meth:`start`.  ``start`` kicks off the operation and arranges for the
    given future to be completed from whatever callback the subsystem uses.
    """

    timeout: float = 10.0
    timeout_code: int = TOOL_TIMEOUT
    timeout_message: str = "Operation timed out"

    def open_session(self) -> SessionT:
        raise NotImplementedError

    def close_session(self, session: SessionT) -> None:
        raise NotImplementedError

    def start(self, session: SessionT, completion: Future[str], arguments: dict[str, Any]) -> None:
        raise NotImplementedError

    @contextmanager
    def session(self) -> Iterator[SessionT]:
        """Open a session and close it on every exit path."""
        handle = self.open_session()
        logger.debug("%s: session opened", self.name)
        try:
            yield handle
        finally:
            self.close_session(handle)
            logger.debug("%s: session closed", self.name)

    def execute(self, arguments: dict[str, Any]) -> str:
        completion: Future[str] = Future()
        with self.session() as handle:
            self.start(handle, completion, arguments)
            try:
                return completion.result(timeout=self.timeout)
            except FutureTimeoutError:
                completion.cancel()
                raise ToolError(self.timeout_code, self.timeout_message) from None
