"""
Tool Definitions Configuration

Schema definitions for all MCP server tools, grouped by category. Every
tool accepts the common tsh parameters (``loginParam``, ``proxyParam``,
...) in addition to its own.
"""

from typing import Any, Dict

COMMON_PARAMETERS: Dict[str, Dict[str, Any]] = {
    "loginParam": {"type": "string", "description": "Remote host login"},
    "proxyParam": {"type": "string", "description": "Teleport proxy address"},
    "userParam": {
        "type": "string",
        "description": "Teleport user, defaults to current local user",
    },
    "ttlParam": {"type": "string", "description": "Minutes to live for a session"},
    "identityParam": {"type": "string", "description": "Identity file"},
    "insecureParam": {
        "type": "boolean",
        "description": "Do not verify server's certificate and host name. Use only in test environments",
    },
    "debugParam": {"type": "boolean", "description": "Verbose logging to stdout"},
}

SEARCH_DESCRIPTION = (
    "List of comma separated search keywords or phrases enclosed in quotations "
    '(e.g. foo,bar,"some phrase")'
)
QUERY_DESCRIPTION = (
    "Query by predicate language enclosed in single quotes. Supports ==, !=, &&, and || "
    "(e.g. 'labels[\"key1\"] == \"value1\" && labels[\"key2\"] != \"value2\"')"
)
LABELS_DESCRIPTION = "List of comma separated labels to filter by (e.g. key1=value1,key2=value2)"
CLUSTER_DESCRIPTION = "Specify the Teleport cluster to connect"


def _tool_schema(name: str, description: str, properties=None, required=None) -> Dict[str, Any]:
    input_schema: Dict[str, Any] = {
        "type": "object",
        "properties": {**COMMON_PARAMETERS, **(properties or {})},
    }
    if required:
        input_schema["required"] = list(required)
    return {"name": name, "description": description, "inputSchema": input_schema}


# Authentication Tools Schemas
AUTH_TOOLS_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "teleport_login": _tool_schema(
        "teleport_login",
        "Login to a Teleport cluster. When to use: before any other operation when "
        "teleport_status shows no valid certificates.",
    ),
    "teleport_status": _tool_schema(
        "teleport_status",
        "Display the list of proxy servers and retrieved certificates",
    ),
    "teleport_list_clusters": _tool_schema(
        "teleport_list_clusters",
        "List available Teleport clusters",
    ),
}

# SSH Tools Schemas
SSH_TOOLS_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "teleport_list_ssh_nodes": _tool_schema(
        "teleport_list_ssh_nodes",
        "List SSH nodes available through Teleport",
        {
            "search": {"type": "string", "description": SEARCH_DESCRIPTION},
            "query": {"type": "string", "description": QUERY_DESCRIPTION},
            "labels": {"type": "string", "description": LABELS_DESCRIPTION},
            "verbose": {
                "type": "boolean",
                "description": "One-line output (for text format), including node UUIDs",
            },
            "all": {
                "type": "boolean",
                "description": "List nodes from all clusters and proxies",
            },
            "cluster": {"type": "string", "description": CLUSTER_DESCRIPTION},
        },
    ),
    "teleport_ssh": _tool_schema(
        "teleport_ssh",
        "Execute a command on a remote SSH node. Interactive shell sessions are not "
        "supported: a command is required.",
        {
            "destination": {
                "type": "string",
                "description": "Remote host to connect to, optionally as login@host",
            },
            "command": {
                "type": "string",
                "description": "Command to execute on the remote host",
            },
            "port": {"type": "number", "description": "SSH port on the remote host"},
            "verbose": {"type": "boolean", "description": "Verbose output"},
            "forwardAgent": {
                "type": "boolean",
                "description": "Forward SSH agent to the remote host",
            },
            "localForward": {
                "type": "string",
                "description": "Forward localhost connections to remote server (e.g. 8080:localhost:80)",
            },
            "remoteForward": {
                "type": "string",
                "description": "Forward remote connections to localhost (e.g. 8080:localhost:80)",
            },
            "dynamicForward": {
                "type": "string",
                "description": "Forward localhost connections to remote server using SOCKS5",
            },
            "openSSHOptions": {
                "type": "string",
                "description": "OpenSSH options in the format used in the configuration file",
            },
            "localCommand": {
                "type": "string",
                "description": "Execute command on localhost after connecting to SSH node",
            },
            "noRemoteExec": {
                "type": "boolean",
                "description": "Don't execute remote command, useful for port forwarding",
            },
            "cluster": {"type": "string", "description": CLUSTER_DESCRIPTION},
            "logDir": {
                "type": "string",
                "description": "Directory to log separated command output",
            },
            "tty": {
                "type": "boolean",
                "description": "Allocate TTY (true) or disable TTY allocation (false)",
            },
        },
        required=["destination"],
    ),
    "teleport_scp": _tool_schema(
        "teleport_scp",
        "Transfer files to and from SSH nodes",
        {
            "source": {
                "type": "string",
                "description": "Source path, local or remote (login@host:path)",
            },
            "destination": {
                "type": "string",
                "description": "Destination path, local or remote (login@host:path)",
            },
            "recursive": {"type": "boolean", "description": "Recursive copy of subdirectories"},
            "preserveAttributes": {
                "type": "boolean",
                "description": "Preserve access and modification times",
            },
            "quiet": {"type": "boolean", "description": "Quiet mode"},
            "port": {"type": "number", "description": "Port to connect to on the remote host"},
            "cluster": {"type": "string", "description": CLUSTER_DESCRIPTION},
        },
        required=["source", "destination"],
    ),
    "teleport_resolve": _tool_schema(
        "teleport_resolve",
        "Resolve a host name to the SSH node it refers to",
        {
            "host": {"type": "string", "description": "Host name to resolve"},
            "quiet": {"type": "boolean", "description": "Quiet mode"},
        },
        required=["host"],
    ),
}

# Kubernetes Tools Schemas
KUBE_TOOLS_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "teleport_kube_list_clusters": _tool_schema(
        "teleport_kube_list_clusters",
        "Get a list of Kubernetes clusters available through Teleport",
        {
            "search": {"type": "string", "description": SEARCH_DESCRIPTION},
            "query": {"type": "string", "description": QUERY_DESCRIPTION},
            "labels": {"type": "string", "description": LABELS_DESCRIPTION},
            "verbose": {
                "type": "boolean",
                "description": "Show an untruncated list of labels and detailed cluster information",
            },
            "all": {
                "type": "boolean",
                "description": "List Kubernetes clusters from all clusters and proxies",
            },
            "cluster": {"type": "string", "description": CLUSTER_DESCRIPTION},
            "quiet": {"type": "boolean", "description": "Quiet mode"},
        },
    ),
    "teleport_kube_login": _tool_schema(
        "teleport_kube_login",
        "Login to a Kubernetes cluster via Teleport. Updates kubeconfig to enable kubectl "
        "access to the specified cluster.",
        {
            "cluster": {"type": "string", "description": CLUSTER_DESCRIPTION},
            "kubeCluster": {
                "type": "string",
                "description": "Name of the Kubernetes cluster to login to. Check "
                "'teleport_kube_list_clusters' for available clusters. Mutually exclusive with all.",
            },
            "labels": {
                "type": "string",
                "description": "List of comma separated labels to filter clusters for batch login "
                "(e.g. key1=value1,key2=value2). Used with all.",
            },
            "query": {
                "type": "string",
                "description": "Query by predicate language for filtering clusters in batch login. "
                "Used with all.",
            },
            "asUser": {
                "type": "string",
                "description": "Configure custom Kubernetes user impersonation",
            },
            "asGroups": {
                "type": "string",
                "description": "Configure custom Kubernetes group impersonation",
            },
            "kubeNamespace": {
                "type": "string",
                "description": "Configure the default Kubernetes namespace",
            },
            "all": {
                "type": "boolean",
                "description": "Generate a kubeconfig with every cluster the user has access to. "
                "Mutually exclusive with kubeCluster.",
            },
            "contextName": {
                "type": "string",
                "description": 'Define a custom context name. To use it with all include "{{.KubeName}}"',
            },
            "requestReason": {"type": "string", "description": "Reason for requesting access"},
            "disableAccessRequest": {
                "type": "boolean",
                "description": "Disable automatic resource access requests",
            },
        },
    ),
}

ALL_TOOL_SCHEMAS: Dict[str, Dict[str, Any]] = {
    **AUTH_TOOLS_SCHEMAS,
    **SSH_TOOLS_SCHEMAS,
    **KUBE_TOOLS_SCHEMAS,
}


def get_tool_schema(name: str) -> Dict[str, Any]:
    """Schema for one tool; raises KeyError for an unknown name."""
    return ALL_TOOL_SCHEMAS[name]
