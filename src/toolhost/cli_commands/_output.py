"""Shared CLI output formatters."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from toolhost.protocol.models import ToolDescriptor

console = Console()
# stdout carries the protocol while serving; diagnostics go here.
err_console = Console(stderr=True)


def print_tools_table(descriptors: list[ToolDescriptor]) -> None:
    """Pretty-print advertised tool descriptors as a table."""
    table = Table(title="Registered Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Parameters")

    for descriptor in descriptors:
        properties = descriptor.input_schema.get("properties", {})
        params = ", ".join(properties) or "-"
        table.add_row(descriptor.name, _truncate(descriptor.description), params)

    console.print(table)


def print_tools_json(descriptors: list[ToolDescriptor]) -> None:
    console.print_json(json.dumps({"tools": [d.to_wire() for d in descriptors]}))


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
