"""Command line construction for tsh.

Arguments are built in two passes:

1. Common flags shared by every tsh subcommand (proxy, user, login, ...)
   taken from ``COMMON_FLAGS`` in table order, followed by flags derived
   from any other ``<name>Param`` parameter.
2. The operation's own rules (``Const``, ``Switch``, ``Option``, ...), in
   the order the operation declares them. Positionals come last.

Building depends only on the parameter values, never on the order in which
the client sent them.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from .parameters import ParameterSet, ParamValue

PARAM_SUFFIX = "Param"


@dataclass(frozen=True)
class CommonFlag:
    """A global tsh flag and the parameter names that may carry it."""

    flag: str
    aliases: Tuple[str, ...]
    short: Optional[str] = None


COMMON_FLAGS: Tuple[CommonFlag, ...] = (
    CommonFlag("login", ("loginParam", "login"), short="-l"),
    CommonFlag("proxy", ("proxyParam", "proxy")),
    CommonFlag("user", ("userParam", "user")),
    CommonFlag("ttl", ("ttlParam", "ttl")),
    CommonFlag("identity", ("identityParam", "identity")),
    CommonFlag("insecure", ("insecureParam", "insecure")),
    CommonFlag("debug", ("debugParam", "debug")),
    # bare "verbose" belongs to the listing and ssh operations
    CommonFlag("verbose", ("verboseParam",)),
)

_KNOWN_ALIASES = frozenset(alias for entry in COMMON_FLAGS for alias in entry.aliases)


def format_number(value: Union[int, float]) -> str:
    """Render a number the way a user would type it (22, not 22.0)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _render_flag(flag: str, value: ParamValue, short: Optional[str] = None) -> List[str]:
    if isinstance(value, bool):
        return [f"--{flag}"] if value else []
    if isinstance(value, str):
        if not value:
            return []
        return [short, value] if short else [f"--{flag}={value}"]
    text = format_number(value)
    return [short, text] if short else [f"--{flag}={text}"]


def common_arguments(params: ParameterSet) -> List[str]:
    """Render the global flags present in ``params``."""
    args: List[str] = []
    for entry in COMMON_FLAGS:
        for alias in entry.aliases:
            if alias not in params:
                continue
            tokens = _render_flag(entry.flag, params[alias], entry.short)
            if tokens:
                args.extend(tokens)
                break

    derived = sorted(
        name
        for name in params
        if name.endswith(PARAM_SUFFIX)
        and len(name) > len(PARAM_SUFFIX)
        and name not in _KNOWN_ALIASES
    )
    for name in derived:
        args.extend(_render_flag(name[: -len(PARAM_SUFFIX)].lower(), params[name]))
    return args


@dataclass(frozen=True)
class Const:
    """Tokens that are always emitted, e.g. ``--format json``."""

    tokens: Tuple[str, ...]

    def render(self, params: ParameterSet) -> List[str]:
        return list(self.tokens)


@dataclass(frozen=True)
class Switch:
    """Flag emitted only when the boolean parameter is true."""

    param: str
    token: str

    def render(self, params: ParameterSet) -> List[str]:
        return [self.token] if params.is_true(self.param) else []


@dataclass(frozen=True)
class Option:
    """Flag followed by the parameter's non-empty string value."""

    param: str
    token: str

    def render(self, params: ParameterSet) -> List[str]:
        value = params.get_str(self.param)
        return [self.token, value] if value else []


@dataclass(frozen=True)
class NumberOption:
    """Numeric option, either joined (``--port=22``) or split (``-P 22``).

    Fractional values are truncated toward zero, so 22.9 renders as 22.
    """

    param: str
    token: str
    joined: bool = True

    def render(self, params: ParameterSet) -> List[str]:
        value = params.get_number(self.param)
        if value is None:
            return []
        text = str(int(value))
        return [f"{self.token}={text}"] if self.joined else [self.token, text]


@dataclass(frozen=True)
class TriState:
    """Boolean with distinct tokens for true and false; absent emits nothing."""

    param: str
    on: str
    off: str

    def render(self, params: ParameterSet) -> List[str]:
        value = params.get_bool(self.param)
        if value is None:
            return []
        return [self.on if value else self.off]


@dataclass(frozen=True)
class Positional:
    """The parameter's non-empty string value as a bare argument."""

    param: str

    def render(self, params: ParameterSet) -> List[str]:
        value = params.get_str(self.param)
        return [value] if value else []


ArgumentRule = Union[Const, Switch, Option, NumberOption, TriState, Positional]


@dataclass(frozen=True)
class CommandSpec:
    """A tsh subcommand and its ordered arguments."""

    subcommand: Tuple[str, ...]
    args: Tuple[str, ...] = ()

    def argv(self, binary: str) -> List[str]:
        return [binary, *self.subcommand, *self.args]


def build_arguments(params: ParameterSet, rules: Sequence[ArgumentRule] = ()) -> List[str]:
    """Build the ordered argument list for one invocation.

    Args:
        params: Normalized parameters
        rules: Operation specific rules, rendered after the common flags

    Returns:
        List of argument tokens (without the binary and subcommand)
    """
    args = common_arguments(params)
    for rule in rules:
        tokens = rule.render(params)
        # a verboseParam common flag and a verbose switch both yield --verbose
        if isinstance(rule, Switch) and rule.token in args:
            continue
        args.extend(tokens)
    return args


def build_command(
    subcommand: Sequence[str], params: ParameterSet, rules: Sequence[ArgumentRule] = ()
) -> CommandSpec:
    return CommandSpec(tuple(subcommand), tuple(build_arguments(params, rules)))
