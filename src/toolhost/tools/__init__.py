"""Tool contract, registry and bundled tools."""

from toolhost.tools.base import BaseTool, Tool, describe
from toolhost.tools.builtin import EchoTool, WhoAmITool, builtin_tools
from toolhost.tools.registry import ToolRegistry
from toolhost.tools.session import SessionTool

__all__ = [
    "BaseTool",
    "EchoTool",
    "SessionTool",
    "Tool",
    "ToolRegistry",
    "WhoAmITool",
    "builtin_tools",
    "describe",
]
