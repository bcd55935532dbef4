"""Readable rendering of tsh JSON output.

Each formatter takes the raw command output and returns text for the tool
response. Empty output and a JSON null are not errors and yield a fixed
"nothing found" message. Output that cannot be decoded raises
``OutputParseError``; callers recover from it by returning the raw text instead.

Node listings keep the order tsh returned; Kubernetes cluster listings are
sorted by name.
"""

from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .models import KubeCluster, NodeRecord

NO_NODES_MESSAGE = "No SSH nodes found"
NO_KUBE_CLUSTERS_MESSAGE = "No Kubernetes clusters found"
NO_RESOLUTION_MESSAGE = "No resolution result"
INVALID_RESOLUTION_MESSAGE = "Invalid resolution result structure"
VERBOSE_TIP = "Tip: Use verbose=true to see detailed label information for each cluster."

# a JSON null decodes to None, at the top level and as a list item
_NODE_LIST = TypeAdapter(Optional[List[Optional[NodeRecord]]])
_NODE = TypeAdapter(Optional[NodeRecord])
_KUBE_CLUSTER_LIST = TypeAdapter(Optional[List[Optional[KubeCluster]]])


class OutputParseError(ValueError):
    """Raised when command output is not the expected JSON document."""


def _decode(adapter: TypeAdapter, output: str):
    try:
        return adapter.validate_json(output)
    except PydanticValidationError as e:
        raise OutputParseError(f"failed to parse JSON output: {e}") from e


def format_label_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if value is None:
        return ""
    return str(value)


def format_labels(labels: Dict[str, Any]) -> str:
    """Render labels as ``key=value`` pairs sorted by key."""
    return ", ".join(f"{key}={format_label_value(labels[key])}" for key in sorted(labels))


def format_ssh_nodes(output: str) -> str:
    """Format ``tsh ls --format json`` output."""
    if not output.strip():
        return NO_NODES_MESSAGE

    nodes = _decode(_NODE_LIST, output)
    if not nodes:
        return NO_NODES_MESSAGE

    lines = [f"Found {len(nodes)} SSH node(s):", ""]
    for node in nodes:
        if node is None or not node.is_complete:
            continue

        header = f"• {node.hostname}"
        if node.address and node.address != node.hostname:
            header += f" ({node.address})"
        if node.node_id:
            header += f" [{node.node_id}]"
        lines.append(header)

        labels = node.merged_labels()
        if labels:
            lines.append(f"  Labels: {format_labels(labels)}")
        lines.append("")

    return "\n".join(lines) + "\n"


def format_kube_clusters(output: str, verbose: bool = False) -> str:
    """Format ``tsh kube ls --format json`` output.

    Args:
        output: Raw command output
        verbose: Show every label instead of a per-cluster label count
    """
    if not output.strip():
        return NO_KUBE_CLUSTERS_MESSAGE

    clusters = _decode(_KUBE_CLUSTER_LIST, output)
    if not clusters:
        return NO_KUBE_CLUSTERS_MESSAGE
    clusters = [KubeCluster() if cluster is None else cluster for cluster in clusters]

    lines = [f"Found {len(clusters)} Kubernetes cluster(s):", ""]
    for cluster in sorted(clusters, key=lambda c: c.kube_cluster_name):
        header = f"• {cluster.kube_cluster_name}"
        if cluster.selected:
            header += " (selected)"
        lines.append(header)

        if cluster.labels:
            if verbose:
                lines.append(f"  Labels: {format_labels(cluster.labels)}")
            else:
                lines.append(
                    f"  Labels: {len(cluster.labels)} available (use verbose=true to see details)"
                )
        lines.append("")

    if not verbose:
        lines.append(VERBOSE_TIP)

    return "\n".join(lines) + "\n"


def format_resolve(output: str) -> str:
    """Format ``tsh resolve --format json`` output."""
    if not output.strip():
        return NO_RESOLUTION_MESSAGE

    node = _decode(_NODE, output)
    if node is None or not node.is_complete:
        return INVALID_RESOLUTION_MESSAGE

    lines = [f"Host resolution for: {node.hostname}"]
    if node.address and node.address != node.hostname:
        lines.append(f"Address: {node.address}")
    if node.node_id:
        lines.append(f"Node ID: {node.node_id}")

    labels = node.merged_labels()
    if labels:
        lines.append(f"Labels: {format_labels(labels)}")

    return "\n".join(lines) + "\n"
