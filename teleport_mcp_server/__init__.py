"""
MCP Teleport

A Model Context Protocol server that exposes the Teleport ``tsh`` CLI
(login, node listing, ssh, scp, resolve, Kubernetes access) as tools.
"""

# Logging is configured at app entry point via teleport_mcp_server/logging_utils.py
# No need to configure logging here.

__version__ = "0.1.0"
__description__ = "MCP server for Teleport operations"
