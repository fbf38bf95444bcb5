"""ToolRegistry — owns tool instances keyed by name."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from toolhost.protocol.errors import DuplicateToolError, ToolNotFoundError
from toolhost.tools.base import describe

if TYPE_CHECKING:
    from toolhost.protocol.models import ToolDescriptor
    from toolhost.tools.base import Tool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Name-to-tool map, filled once at boot and read-only afterwards.

    Usage::

        registry = ToolRegistry()
        registry.register(EchoTool())

        registry.enumerate()        # descriptors, sorted by name
        registry.lookup("echo")     # the EchoTool instance
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Add *tool*. A name collision leaves the registry unchanged."""
        name = tool.name
        if name in self._tools:
            raise DuplicateToolError(name)
        self._tools[name] = tool
        logger.debug("Registered tool %s", name)

    def lookup(self, name: str) -> Tool:
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return sorted(self._tools)

    def enumerate(self) -> list[ToolDescriptor]:
        """Return descriptors in lexicographic name order."""
        return [describe(self._tools[name]) for name in self.names()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
