"""SSH tools for the Teleport MCP server."""

from .tools import SSHTools

__all__ = ["SSHTools"]
