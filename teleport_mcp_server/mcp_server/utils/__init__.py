"""Utilities shared by the MCP server modules."""

from .errors import sanitize_error

__all__ = ["sanitize_error"]
