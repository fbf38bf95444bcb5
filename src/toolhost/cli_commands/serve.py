"""``toolhost serve`` — run the tool server over standard streams."""

from __future__ import annotations

import logging
import sys
from typing import Any

import click
from rich.markup import escape

from toolhost.cli_commands._output import err_console

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Server settings YAML file.",
)
@click.option("--name", default=None, help="Override the advertised server name.")
@click.option("--server-version", default=None, help="Override the advertised server version.")
@click.option(
    "--tool",
    "-t",
    "tool_names",
    multiple=True,
    help="Enable only this bundled tool (repeatable).",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Log level for stderr diagnostics.",
)
@click.option(
    "--strict/--lenient",
    default=None,
    help="Abort on undecodable input instead of answering with a parse error.",
)
@click.option("--telemetry", is_flag=True, help="Enable OpenTelemetry tracing.")
def serve(
    config_path: str | None,
    name: str | None,
    server_version: str | None,
    tool_names: tuple[str, ...],
    log_level: str | None,
    strict: bool | None,
    telemetry: bool,
) -> None:
    """Serve tools over newline-delimited JSON-RPC on stdin/stdout."""
    from toolhost.config import load_settings
    from toolhost.protocol.errors import ConfigError, ProtocolError, StartupError
    from toolhost.protocol.transport import StdioTransport
    from toolhost.server.server import Server

    try:
        settings = load_settings(config_path)
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        sys.exit(1)

    overrides: dict[str, Any] = {}
    if name is not None:
        overrides["name"] = name
    if server_version is not None:
        overrides["version"] = server_version
    if tool_names:
        overrides["tools"] = list(tool_names)
    if log_level is not None:
        overrides["log_level"] = log_level.upper()
    if strict is not None:
        overrides["strict"] = strict
    if overrides:
        settings = settings.model_copy(update=overrides)

    logging.basicConfig(
        stream=sys.stderr,
        level=settings.log_level,
        format=_LOG_FORMAT,
        force=True,
    )

    if telemetry or settings.telemetry.enabled:
        from toolhost.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(
                service_name=settings.name,
                otlp_endpoint=settings.telemetry.otlp_endpoint,
            )
        except ImportError as exc:
            err_console.print(f"[red]Telemetry error:[/red] {exc}")
            sys.exit(1)

    try:
        server = Server.from_settings(settings)
    except StartupError as exc:
        err_console.print(f"[red]Startup error:[/red] {escape(str(exc))}")
        sys.exit(1)

    try:
        status = server.run(StdioTransport())
    except ProtocolError as exc:
        err_console.print(f"[red]Protocol error:[/red] {exc}")
        sys.exit(2)

    logger.info("Server stopped: %s", status.value)
