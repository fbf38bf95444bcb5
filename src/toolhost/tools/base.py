"""Tool contract — the capability interface every tool satisfies.

A tool is anything with a ``name``, a ``description``, an ``input_schema()``
and a blocking ``execute(arguments)``.  Failures are reported by raising
:class:`~toolhost.protocol.errors.ToolError`; its code and message reach the
caller unchanged.
"""

from __future__ import annotations

from typing import Any, ClassVar, Protocol, runtime_checkable

from toolhost.protocol.models import ToolDescriptor


@runtime_checkable
class Tool(Protocol):
    """A named, schema-described capability."""

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    def input_schema(self) -> dict[str, Any]: ...

    def execute(self, arguments: dict[str, Any]) -> str:
        """Run the tool and return its text output.

        Must not return before every side effect it started is unwound.
        """
        ...


class BaseTool:
    """Convenience base for tools declared with class attributes.

    Usage::

        class EchoTool(BaseTool):
            name = "echo"
            description = "Return the given text."
            schema = {"properties": {"text": {"type": "string"}}}

            def execute(self, arguments):
                return arguments.get("text", "")
    """

    name: ClassVar[str]
    description: ClassVar[str] = ""
    schema: ClassVar[dict[str, Any]] = {}

    def input_schema(self) -> dict[str, Any]:
        return dict(self.schema)

    def execute(self, arguments: dict[str, Any]) -> str:
        raise NotImplementedError


def describe(tool: Tool) -> ToolDescriptor:
    """Build the advertised descriptor, forcing ``inputSchema.type`` to ``object``."""
    schema = dict(tool.input_schema())
    schema["type"] = "object"
    return ToolDescriptor(name=tool.name, description=tool.description, input_schema=schema)
