"""Declarative definitions of the tsh operations exposed as tools.

An ``Operation`` ties a tsh subcommand to its validation rules, its
operation specific argument rules and a renderer for successful output.
Renderers may raise ``OutputParseError``; the pipeline then falls back to
the raw command output.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from .flags import (
    ArgumentRule,
    CommandSpec,
    Const,
    NumberOption,
    Option,
    Positional,
    Switch,
    TriState,
    build_command,
)
from .formatters import format_kube_clusters, format_resolve, format_ssh_nodes
from .parameters import (
    ExclusiveChoice,
    ParameterSet,
    RequiredText,
    ValidationRule,
    validate_parameters,
)

Renderer = Callable[[ParameterSet, str], str]

JSON_FORMAT = Const(("--format", "json"))

DESTINATION_REQUIRED = "Destination host is required"
COMMAND_REQUIRED = (
    "Command is required. Interactive shell sessions are not supported via MCP - "
    "you must provide a specific command to execute."
)
SOURCE_PATH_REQUIRED = "Source path is required"
DESTINATION_PATH_REQUIRED = "Destination path is required"
HOST_REQUIRED = "Host is required"
KUBE_TARGET_REQUIRED = (
    "Either 'kubeCluster' must be specified for single cluster login, "
    "or 'all' must be true for batch login to all accessible clusters."
)
KUBE_TARGET_CONFLICT = (
    "'kubeCluster' and 'all' are mutually exclusive. "
    "Specify either a specific cluster name or use --all for batch login."
)


def render_raw(params: ParameterSet, output: str) -> str:
    return output


def render_ssh_nodes(params: ParameterSet, output: str) -> str:
    return format_ssh_nodes(output)


def render_kube_clusters(params: ParameterSet, output: str) -> str:
    return format_kube_clusters(output, verbose=params.is_true("verbose"))


def render_resolve(params: ParameterSet, output: str) -> str:
    return format_resolve(output)


def render_file_transfer(params: ParameterSet, output: str) -> str:
    return f"File transfer completed successfully\n{output}"


def render_kube_login(params: ParameterSet, output: str) -> str:
    if params.is_true("all"):
        text = "Successfully logged in to all accessible Kubernetes clusters.\n"
    else:
        text = f"Successfully logged in to Kubernetes cluster: {params.get_str('kubeCluster')}\n"
    text += (
        "Your kubeconfig has been updated. "
        "You can now use kubectl to interact with the cluster(s).\n\n"
    )
    if output:
        text += f"Command output:\n{output}"
    return text


@dataclass(frozen=True)
class Operation:
    """One tsh capability: subcommand, rules and success rendering."""

    name: str
    subcommand: Tuple[str, ...]
    validation: Tuple[ValidationRule, ...] = ()
    arguments: Tuple[ArgumentRule, ...] = ()
    render: Renderer = render_raw

    def validate(self, params: ParameterSet) -> None:
        validate_parameters(params, self.validation)

    def build(self, params: ParameterSet) -> CommandSpec:
        """Validate ``params`` and build the command; nothing is built on failure."""
        self.validate(params)
        return build_command(self.subcommand, params, self.arguments)


LOGIN = Operation("teleport_login", ("login",))
STATUS = Operation("teleport_status", ("status",))
LIST_CLUSTERS = Operation("teleport_list_clusters", ("clusters",))

LIST_SSH_NODES = Operation(
    "teleport_list_ssh_nodes",
    ("ls",),
    arguments=(
        JSON_FORMAT,
        Option("search", "--search"),
        Option("query", "--query"),
        Switch("verbose", "--verbose"),
        Switch("all", "--all"),
        Option("cluster", "--cluster"),
        Positional("labels"),
    ),
    render=render_ssh_nodes,
)

SSH = Operation(
    "teleport_ssh",
    ("ssh",),
    validation=(
        RequiredText("destination", DESTINATION_REQUIRED),
        RequiredText("command", COMMAND_REQUIRED),
    ),
    arguments=(
        Option("localForward", "-L"),
        Option("remoteForward", "-R"),
        Option("dynamicForward", "-D"),
        Option("openSSHOptions", "-o"),
        Option("localCommand", "--local"),
        Switch("noRemoteExec", "-N"),
        Option("cluster", "--cluster"),
        Option("logDir", "--log-dir"),
        TriState("tty", on="-t", off="-T"),
        NumberOption("port", "--port"),
        Switch("verbose", "--verbose"),
        Switch("forwardAgent", "--forward-agent"),
        # destination and command close the line: tsh treats what follows
        # the destination as the remote command
        Positional("destination"),
        Positional("command"),
    ),
)

SCP = Operation(
    "teleport_scp",
    ("scp",),
    validation=(
        RequiredText("source", SOURCE_PATH_REQUIRED),
        RequiredText("destination", DESTINATION_PATH_REQUIRED),
    ),
    arguments=(
        Switch("recursive", "-r"),
        Switch("preserveAttributes", "-p"),
        Switch("quiet", "-q"),
        NumberOption("port", "-P", joined=False),
        Option("cluster", "--cluster"),
        Positional("source"),
        Positional("destination"),
    ),
    render=render_file_transfer,
)

RESOLVE = Operation(
    "teleport_resolve",
    ("resolve",),
    validation=(RequiredText("host", HOST_REQUIRED),),
    arguments=(
        JSON_FORMAT,
        Switch("quiet", "--quiet"),
        Positional("host"),
    ),
    render=render_resolve,
)

KUBE_LIST_CLUSTERS = Operation(
    "teleport_kube_list_clusters",
    ("kube", "ls"),
    arguments=(
        JSON_FORMAT,
        Option("search", "--search"),
        Option("query", "--query"),
        Switch("verbose", "--verbose"),
        Switch("all", "--all"),
        Option("cluster", "--cluster"),
        Switch("quiet", "--quiet"),
        Positional("labels"),
    ),
    render=render_kube_clusters,
)

KUBE_LOGIN = Operation(
    "teleport_kube_login",
    ("kube", "login"),
    validation=(
        ExclusiveChoice(
            target="kubeCluster",
            flag="all",
            missing_message=KUBE_TARGET_REQUIRED,
            conflict_message=KUBE_TARGET_CONFLICT,
        ),
    ),
    arguments=(
        Option("cluster", "--cluster"),
        Option("labels", "--labels"),
        Option("query", "--query"),
        Option("asUser", "--as"),
        Option("asGroups", "--as-groups"),
        Option("kubeNamespace", "--kube-namespace"),
        Switch("all", "--all"),
        Option("contextName", "--set-context-name"),
        Option("requestReason", "--request-reason"),
        Switch("disableAccessRequest", "--disable-access-request"),
        Positional("kubeCluster"),
    ),
    render=render_kube_login,
)

OPERATIONS: Dict[str, Operation] = {
    op.name: op
    for op in (
        LOGIN,
        STATUS,
        LIST_CLUSTERS,
        LIST_SSH_NODES,
        SSH,
        SCP,
        RESOLVE,
        KUBE_LIST_CLUSTERS,
        KUBE_LOGIN,
    )
}


def get_operation(name: str) -> Operation:
    """Look up an operation by tool name; raises KeyError if unknown."""
    return OPERATIONS[name]
