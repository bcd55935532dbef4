"""Tool registry for MCP server - manages tool registration and dispatch."""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from mcp.server import Server
from mcp.types import TextContent, Tool

from ...utils.request_context import generate_request_id, set_request_id
from ..pipeline import Response, ResponseBuilder
from ..utils.errors import sanitize_error

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Dict[str, Any]], Awaitable[Response]]


class ToolCallError(Exception):
    """Carries the text of an error response through the MCP server.

    The low-level server reports exceptions raised by a call_tool handler as
    a result with ``isError`` set and the exception text as content.
    """


class ToolRegistry:
    """
    Manages tool registration, discovery, and dispatch for the MCP server.

    This class centralizes all tool management functionality, providing:
    - Tool registration system
    - Tool discovery and enumeration
    - Request-scoped dispatch with error containment
    """

    def __init__(self):
        """Initialize the tool registry."""
        self._tools: Dict[str, Tool] = {}
        self._tool_handlers: Dict[str, ToolHandler] = {}
        self._tool_metadata: Dict[str, Dict[str, Any]] = {}

    def register_tool(
        self,
        name: str,
        tool: Tool,
        handler: ToolHandler,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Register a tool with its handler and optional metadata.

        Args:
            name: Tool name/identifier
            tool: MCP Tool definition
            handler: Async function taking the raw arguments, returning a Response
            metadata: Optional metadata for the tool (category, source)

        Raises:
            ValueError: If ``name`` differs from ``tool.name``
        """
        if name != tool.name:
            raise ValueError(
                f"Tool name mismatch: registered as '{name}' but tool is named '{tool.name}'"
            )

        if name in self._tools:
            logger.warning(f"Tool '{name}' is already registered, overwriting")

        self._tools[name] = tool
        self._tool_handlers[name] = handler
        self._tool_metadata[name] = metadata or {}

        logger.debug(f"Registered tool: {name}")

    def get_tool_handler(self, name: str) -> Optional[ToolHandler]:
        return self._tool_handlers.get(name)

    def list_tools(self) -> List[Tool]:
        return list(self._tools.values())

    def get_tools_by_category(self, category: str) -> List[str]:
        return [
            name
            for name, metadata in self._tool_metadata.items()
            if metadata.get("category") == category
        ]

    def get_tool_count(self) -> int:
        return len(self._tools)

    async def dispatch(self, name: str, arguments: Optional[Dict[str, Any]]) -> Response:
        """
        Run a tool call under a fresh request ID.

        Unknown tools and unexpected handler exceptions become error
        responses; task cancellation propagates.

        Args:
            name: Tool name
            arguments: Raw tool arguments from the client

        Returns:
            Response: The tool's response
        """
        request_id = generate_request_id()
        set_request_id(request_id)

        logger.info(f"MCP tool call: {name}")
        logger.debug(f"Arguments for {name}: {arguments}")

        handler = self.get_tool_handler(name)
        if handler is None:
            logger.warning(f"Unknown tool requested: {name}")
            return ResponseBuilder.error(f"Unknown tool: {name}")

        try:
            response = await handler(arguments or {})
        except Exception as e:
            logger.exception(f"Error calling tool {name}")
            return ResponseBuilder.error(sanitize_error(e))

        logger.info(f"MCP tool '{name}' completed (error={response.is_error})")
        return response

    def register_mcp_handlers(self, server: Server) -> None:
        """
        Register MCP protocol handlers with the server.

        Args:
            server: MCP server instance
        """

        @server.list_tools()
        async def list_tools() -> List[Tool]:
            """List all available MCP tools."""
            return self.list_tools()

        @server.call_tool()
        async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
            """Handle MCP tool calls with request ID tracking."""
            response = await self.dispatch(name, arguments)
            if response.is_error:
                raise ToolCallError(response.text)
            return response.to_text_content()

    def clear_registry(self) -> None:
        """Clear all registered tools (useful for testing)."""
        self._tools.clear()
        self._tool_handlers.clear()
        self._tool_metadata.clear()
        logger.debug("Cleared tool registry")
