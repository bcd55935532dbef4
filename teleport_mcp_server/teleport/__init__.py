"""tsh command construction, execution and output formatting."""

from .executor import CommandExecutor, ExecutionMode
from .flags import CommandSpec, build_arguments, build_command
from .formatters import OutputParseError
from .operations import OPERATIONS, Operation, get_operation
from .parameters import ParameterSet, ValidationError, normalize_parameters
from .results import DEFAULT_COMMAND_TIMEOUT, ExecutionResult

__all__ = [
    "CommandExecutor",
    "CommandSpec",
    "DEFAULT_COMMAND_TIMEOUT",
    "ExecutionMode",
    "ExecutionResult",
    "OPERATIONS",
    "Operation",
    "OutputParseError",
    "ParameterSet",
    "ValidationError",
    "build_arguments",
    "build_command",
    "get_operation",
    "normalize_parameters",
]
