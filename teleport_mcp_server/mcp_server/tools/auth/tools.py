"""Authentication and session tools: login, status and cluster listing."""

from ....teleport.operations import LIST_CLUSTERS, LOGIN, STATUS
from ..base import OperationTools


class AuthTools(OperationTools):
    """Teleport authentication tools for MCP server."""

    operations = (LOGIN, STATUS, LIST_CLUSTERS)
