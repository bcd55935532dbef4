"""
MCP Server Handlers Package

Tool registration and dispatch for the MCP protocol handlers.
"""

from .registry import ToolCallError, ToolRegistry

__all__ = ["ToolCallError", "ToolRegistry"]
