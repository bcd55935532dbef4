"""MCP server package for Teleport."""

from .context import ServerContext, ServerSettings
from .pipeline import Response, ResponseBuilder, ToolPipeline
from .server import TeleportMCPServer

__all__ = [
    "Response",
    "ResponseBuilder",
    "ServerContext",
    "ServerSettings",
    "TeleportMCPServer",
    "ToolPipeline",
]
