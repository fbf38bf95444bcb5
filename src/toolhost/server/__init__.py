"""Server layer: dispatch state machine and run loop."""

from toolhost.server.dispatch import Dispatcher, ServerState
from toolhost.server.server import RunStatus, Server

__all__ = [
    "Dispatcher",
    "RunStatus",
    "Server",
    "ServerState",
]
