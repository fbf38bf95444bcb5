"""``toolhost tools`` — inspect the tools a server would advertise."""

from __future__ import annotations

import sys

import click
from rich.markup import escape

from toolhost.cli_commands._output import console, err_console, print_tools_json, print_tools_table


@click.group()
def tools() -> None:
    """Inspect registered tools."""


@tools.command("list")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Server settings YAML file.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the tools/list result as JSON.")
def list_tools(config_path: str | None, as_json: bool) -> None:
    """List tools in the order ``tools/list`` advertises them."""
    from toolhost.config import load_settings
    from toolhost.protocol.errors import ConfigError, StartupError
    from toolhost.server.server import Server

    try:
        server = Server.from_settings(load_settings(config_path))
    except (ConfigError, StartupError) as exc:
        err_console.print(f"[red]Startup error:[/red] {escape(str(exc))}")
        sys.exit(1)

    descriptors = server.registry.enumerate()
    if as_json:
        print_tools_json(descriptors)
        return

    if not descriptors:
        console.print("[yellow]No tools registered.[/yellow]")
        return

    print_tools_table(descriptors)
