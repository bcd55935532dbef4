"""Kubernetes tools: cluster listing and kubeconfig login."""

from ....teleport.operations import KUBE_LIST_CLUSTERS, KUBE_LOGIN
from ..base import OperationTools


class KubeTools(OperationTools):
    """Kubernetes access tools for MCP server."""

    operations = (KUBE_LIST_CLUSTERS, KUBE_LOGIN)
