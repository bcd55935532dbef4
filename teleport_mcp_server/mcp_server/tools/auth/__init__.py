"""Authentication tools for the Teleport MCP server."""

from .tools import AuthTools

__all__ = ["AuthTools"]
