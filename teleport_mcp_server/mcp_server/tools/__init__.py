"""
MCP Server Tools Package

Tool implementations organized by category. Each category exposes
``register_tools()``, ``get_tools()`` and ``get_handlers()``.
"""

from .auth import AuthTools
from .kube import KubeTools
from .ssh import SSHTools

__all__ = ["AuthTools", "KubeTools", "SSHTools"]
