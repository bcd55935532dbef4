"""SSH node tools: listing, remote commands, file transfer and host resolution."""

from ....teleport.operations import LIST_SSH_NODES, RESOLVE, SCP, SSH
from ..base import OperationTools


class SSHTools(OperationTools):
    """SSH access tools for MCP server.

    ``teleport_ssh`` only runs one-shot commands; a call without a command is
    rejected before anything is spawned.
    """

    operations = (LIST_SSH_NODES, SSH, SCP, RESOLVE)
