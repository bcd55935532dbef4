"""Command-line interface for the Teleport MCP server."""

import asyncio
import json
import logging
import signal
import sys
from typing import Any, Dict, Optional, Sequence

import click
from pydantic import ValidationError as ConfigValidationError

from . import __version__
from .config import AppConfig, load_config
from .logging_utils import setup_logging
from .mcp_server import TeleportMCPServer
from .mcp_server.pipeline import Response
from .mcp_server.server import TRANSPORTS

logger = logging.getLogger(__name__)


def parse_tool_arguments(pairs: Sequence[str]) -> Dict[str, Any]:
    """Turn ``key=value`` pairs into tool arguments.

    Values are parsed as JSON when possible (``true``, ``22``), otherwise
    kept as plain strings.
    """
    arguments: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got '{pair}'", param_hint="--arg")
        try:
            arguments[key] = json.loads(value)
        except json.JSONDecodeError:
            arguments[key] = value
    return arguments


def _load_app_config(ctx: click.Context, overrides: Optional[Dict[str, Any]] = None) -> AppConfig:
    try:
        app_config = load_config(config_file=ctx.obj.get("config_file"), overrides=overrides)
    except (FileNotFoundError, ValueError, ConfigValidationError) as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    # Determine log level: CLI flag overrides config, --debug overrides both
    effective_log_level = ctx.obj.get("log_level") or app_config.log_level
    if app_config.server.debug:
        effective_log_level = "DEBUG"
    setup_logging(effective_log_level, include_request_id=True)
    return app_config


async def _serve(server: TeleportMCPServer, transport: str) -> None:
    loop = asyncio.get_running_loop()
    main_task = asyncio.current_task()

    def _on_signal(signame: str) -> None:
        logger.info(f"Received {signame}, shutting down")
        server.context.shutdown()
        if transport == "stdio":
            main_task.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _on_signal, sig.name)
        except NotImplementedError:
            pass

    try:
        await server.run(transport)
    except asyncio.CancelledError:
        logger.info("Server stopped")
    finally:
        await server.shutdown()


async def _call_tool(server: TeleportMCPServer, tool_name: str, arguments: Dict[str, Any]) -> Response:
    await server.initialize()
    try:
        return await server.tool_registry.dispatch(tool_name, arguments)
    finally:
        await server.shutdown()


@click.group(invoke_without_command=True)
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--config", "--config-file", "config_file", help="Path to configuration file (YAML or JSON)")
@click.pass_context
def cli(ctx, log_level: Optional[str], config_file: Optional[str]):
    """Teleport MCP server - tsh tools for MCP clients."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level
    ctx.obj["config_file"] = config_file

    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


@cli.command()
@click.option("--dry-run/--no-dry-run", default=None, help="Describe tsh commands instead of running them")
@click.option("--debug/--no-debug", default=None, help="Enable debug logging")
@click.option(
    "--non-destructive/--destructive", default=None, help="Non-destructive mode (default: enabled)"
)
@click.option("--transport", type=click.Choice(TRANSPORTS), default=None, help="MCP transport")
@click.option("--http-addr", default=None, help="Listen address for HTTP transports (default :8080)")
@click.option("--sse-endpoint", default=None, help="SSE stream endpoint (default /sse)")
@click.option("--message-endpoint", default=None, help="SSE message endpoint (default /message)")
@click.option("--http-endpoint", default=None, help="Streamable HTTP endpoint (default /mcp)")
@click.pass_context
def serve(
    ctx,
    dry_run: Optional[bool] = None,
    debug: Optional[bool] = None,
    non_destructive: Optional[bool] = None,
    transport: Optional[str] = None,
    http_addr: Optional[str] = None,
    sse_endpoint: Optional[str] = None,
    message_endpoint: Optional[str] = None,
    http_endpoint: Optional[str] = None,
):
    """Start the MCP server."""
    app_config = _load_app_config(
        ctx,
        {
            "server": {
                "dry_run": dry_run,
                "debug": debug,
                "non_destructive": non_destructive,
                "transport": transport,
                "http_addr": http_addr,
                "sse_endpoint": sse_endpoint,
                "message_endpoint": message_endpoint,
                "http_endpoint": http_endpoint,
            }
        },
    )

    server = TeleportMCPServer(app_config)
    asyncio.run(_serve(server, app_config.server.transport))


@cli.command("tools")
@click.pass_context
def list_tools(ctx):
    """List the available tools."""
    app_config = _load_app_config(ctx)
    server = TeleportMCPServer(app_config)
    asyncio.run(server.initialize())

    for tool in server.tool_registry.list_tools():
        click.echo(f"{tool.name}: {tool.description}")


@cli.command()
@click.argument("tool_name")
@click.option("-a", "--arg", "args", multiple=True, help="Tool argument as key=value (repeatable)")
@click.option("--dry-run/--no-dry-run", default=None, help="Describe the tsh command instead of running it")
@click.pass_context
def call(ctx, tool_name: str, args: Sequence[str], dry_run: Optional[bool]):
    """Run a single tool call and print the response."""
    arguments = parse_tool_arguments(args)
    app_config = _load_app_config(ctx, {"server": {"dry_run": dry_run}})

    server = TeleportMCPServer(app_config)
    response = asyncio.run(_call_tool(server, tool_name, arguments))

    click.echo(response.text)
    if response.is_error:
        sys.exit(1)


@cli.command()
def version():
    """Show the version."""
    click.echo(f"mcp-teleport version {__version__}")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
