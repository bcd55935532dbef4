"""
MCP Server Configuration Package

Tool schemas exposed to MCP clients.
"""

from .tool_definitions import ALL_TOOL_SCHEMAS, get_tool_schema

__all__ = ["ALL_TOOL_SCHEMAS", "get_tool_schema"]
