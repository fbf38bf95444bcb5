"""toolhost: a minimal JSON-RPC tool server for LLM orchestrators."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from toolhost.server.server import RunStatus as RunStatus
    from toolhost.server.server import Server as Server
    from toolhost.tools.base import BaseTool as BaseTool

_LAZY_EXPORTS = {
    "Server": "toolhost.server.server",
    "RunStatus": "toolhost.server.server",
    "BaseTool": "toolhost.tools.base",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'toolhost' has no attribute {name!r}")
