"""Teleport MCP Server implementation.

Wires the tool categories into the tool registry, registers the MCP
protocol handlers and serves them over stdio, SSE or streamable HTTP.
"""

import asyncio
import contextlib
import logging
from typing import Any, Dict, Optional

from mcp.server import Server
from mcp.server.lowlevel.server import NotificationOptions
from mcp.server.models import InitializationOptions
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Mount, Route

from .. import __version__
from ..config import AppConfig, parse_http_addr
from .context import ServerContext, ServerSettings
from .handlers.registry import ToolRegistry
from .pipeline import ToolPipeline
from .tools import AuthTools, KubeTools, SSHTools

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-teleport"
TRANSPORTS = ("stdio", "sse", "streamable-http")

SERVER_INSTRUCTIONS = """Tools for Teleport through the tsh command line client.

Check teleport_status first; use teleport_login when no valid certificate is shown.
Find nodes with teleport_list_ssh_nodes and Kubernetes clusters with
teleport_kube_list_clusters before connecting to them.
teleport_ssh runs one command per call; interactive sessions are not supported."""

_DISCONNECT_INDICATORS = (
    "Broken pipe",
    "Connection reset",
    "Connection aborted",
    "BrokenResourceError",
    "ClosedResourceError",
    "[Errno 32]",
    "[Errno 104]",
)


def is_client_disconnect_error(exception: BaseException) -> bool:
    """Check if an exception represents a client disconnect."""
    if isinstance(exception, (BrokenPipeError, ConnectionResetError, ConnectionAbortedError)):
        return True

    error_str = f"{exception.__class__.__name__}: {exception}"
    return any(indicator in error_str for indicator in _DISCONNECT_INDICATORS)


def is_client_disconnect_group(exception_group: BaseExceptionGroup) -> bool:
    """Check if an exception group contains only client disconnect errors."""
    if not exception_group.exceptions:
        return False

    for exc in exception_group.exceptions:
        if isinstance(exc, BaseExceptionGroup):
            if not is_client_disconnect_group(exc):
                return False
        elif not is_client_disconnect_error(exc):
            return False
    return True


class TeleportMCPServer:
    """Teleport MCP Server.

    Owns the server context (shared flags and shutdown signal), the tool
    pipeline, the tool registry and the low-level MCP server.
    """

    def __init__(self, config: AppConfig, context: Optional[ServerContext] = None):
        """Initialize the MCP server.

        Args:
            config: Application configuration
            context: Server context, built from ``config`` when omitted
        """
        self.config = config
        self.context = context or ServerContext(ServerSettings.from_config(config))
        self.server: Server = Server(
            SERVER_NAME, version=__version__, instructions=SERVER_INSTRUCTIONS
        )

        self.pipeline = ToolPipeline(self.context)
        self.tool_registry = ToolRegistry()
        self._tool_categories: Dict[str, Any] = {}
        self._initialized = False

    async def initialize(self) -> None:
        """Register all tools and the MCP handlers."""
        if self._initialized:
            return

        self._initialize_tool_categories()
        self._register_all_tools()
        self.tool_registry.register_mcp_handlers(self.server)
        self._initialized = True

        settings = self.context.snapshot()
        logger.info(
            f"Teleport MCP Server initialized with {self.tool_registry.get_tool_count()} tools "
            f"(dry_run={settings.dry_run}, debug={settings.debug}, "
            f"non_destructive={settings.non_destructive}, tsh={settings.tsh_binary})"
        )

    def _initialize_tool_categories(self) -> None:
        self._tool_categories["auth"] = AuthTools(self.pipeline)
        self._tool_categories["ssh"] = SSHTools(self.pipeline)
        self._tool_categories["kube"] = KubeTools(self.pipeline)

    def _register_all_tools(self) -> None:
        """Register all tools from all categories."""
        for category_name, category_instance in self._tool_categories.items():
            category_instance.register_tools()

            tools = category_instance.get_tools()
            handlers = category_instance.get_handlers()

            for tool_name, tool in tools.items():
                if tool_name not in handlers:
                    logger.warning(
                        f"No handler found for tool '{tool_name}' in category '{category_name}'"
                    )
                    continue
                metadata = {
                    "category": category_name,
                    "source": f"{category_instance.__class__.__module__}."
                    f"{category_instance.__class__.__name__}",
                }
                self.tool_registry.register_tool(tool_name, tool, handlers[tool_name], metadata)

            category_tools = self.tool_registry.get_tools_by_category(category_name)
            logger.debug(f"Category '{category_name}': {', '.join(category_tools)}")

        logger.info(
            f"Registered {self.tool_registry.get_tool_count()} tools across "
            f"{len(self._tool_categories)} categories"
        )

    def initialization_options(self) -> InitializationOptions:
        return InitializationOptions(
            server_name=SERVER_NAME,
            server_version=__version__,
            capabilities=self.server.get_capabilities(
                notification_options=NotificationOptions(),
                experimental_capabilities={},
            ),
            instructions=SERVER_INSTRUCTIONS,
        )

    async def run(self, transport_type: Optional[str] = None) -> None:
        """Run the MCP server with the specified transport.

        Args:
            transport_type: "stdio", "sse" or "streamable-http"; defaults to
                the configured transport
        """
        transport_type = transport_type or self.config.server.transport
        if transport_type not in TRANSPORTS:
            raise ValueError(f"Unsupported transport type: {transport_type}")

        if not self._initialized:
            await self.initialize()

        logger.info(f"Starting Teleport MCP Server with {transport_type} transport")
        if transport_type == "stdio":
            await self._run_stdio()
        elif transport_type == "sse":
            await self._serve_http(self.build_sse_app())
        else:
            await self._serve_http(self.build_streamable_http_app())

    async def _run_stdio(self) -> None:
        from mcp.server.stdio import stdio_server

        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(read_stream, write_stream, self.initialization_options())
        except BaseExceptionGroup as eg:
            if not is_client_disconnect_group(eg):
                raise
            logger.info("Client disconnected")
        except (BrokenPipeError, ConnectionResetError):
            logger.info("Client disconnected")

    def build_sse_app(self) -> Starlette:
        """Starlette app serving the SSE stream and its message endpoint."""
        from mcp.server.sse import SseServerTransport

        server_config = self.config.server
        message_path = server_config.message_endpoint.rstrip("/") + "/"
        sse = SseServerTransport(message_path)

        async def handle_sse(request: Request) -> Response:
            async with sse.connect_sse(request.scope, request.receive, request._send) as streams:
                await self.server.run(streams[0], streams[1], self.initialization_options())
            return Response()

        return Starlette(
            routes=[
                Route(server_config.sse_endpoint, endpoint=handle_sse, methods=["GET"]),
                Mount(message_path, app=sse.handle_post_message),
            ],
        )

    def build_streamable_http_app(self) -> Starlette:
        """Starlette app serving the streamable HTTP endpoint."""
        from mcp.server.streamable_http_manager import StreamableHTTPSessionManager

        session_manager = StreamableHTTPSessionManager(app=self.server)

        async def handle_streamable_http(scope, receive, send) -> None:
            await session_manager.handle_request(scope, receive, send)

        @contextlib.asynccontextmanager
        async def lifespan(app: Starlette):
            async with session_manager.run():
                yield

        return Starlette(
            routes=[Mount(self.config.server.http_endpoint, app=handle_streamable_http)],
            lifespan=lifespan,
        )

    async def _serve_http(self, app: Starlette) -> None:
        import uvicorn

        host, port = parse_http_addr(self.config.server.http_addr)
        uvicorn_config = uvicorn.Config(
            app,
            host=host,
            port=port,
            log_level=self.config.log_level.lower(),
        )
        http_server = uvicorn.Server(uvicorn_config)

        async def stop_on_shutdown() -> None:
            await self.context.shutdown_event.wait()
            http_server.should_exit = True

        watcher = asyncio.ensure_future(stop_on_shutdown())
        logger.info(f"Listening on {host}:{port}")
        try:
            await http_server.serve()
        finally:
            watcher.cancel()
            self.context.shutdown()

    async def shutdown(self) -> None:
        """Stop in-flight commands and clear the registry."""
        self.context.shutdown()
        self.tool_registry.clear_registry()
        self._tool_categories.clear()
        self._initialized = False
        logger.info("MCP server shutdown completed")
