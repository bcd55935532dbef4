"""Kubernetes tools for the Teleport MCP server."""

from .tools import KubeTools

__all__ = ["KubeTools"]
