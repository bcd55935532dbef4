"""Parameter normalization and validation for tool invocations.

MCP clients send tool arguments as an untyped JSON object. This module is the
only place that looks at that raw object: it keeps the values that are one of
the supported scalar kinds (bool, str, number) and drops everything else, so
the rest of the pipeline works with a typed, read-only ``ParameterSet``.

Values of the wrong kind are treated as absent instead of being coerced. A
``"true"`` string is not a boolean and a ``"22"`` string is not a port.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional, Sequence, Tuple, Union

ParamValue = Union[bool, str, int, float]


class ValidationError(Exception):
    """Raised when an invocation's parameters violate an operation rule.

    Attributes:
        message: Human readable description of the violated rule
        fields: Names of the parameters involved
    """

    def __init__(self, message: str, fields: Sequence[str] = ()):
        super().__init__(message)
        self.message = message
        self.fields: Tuple[str, ...] = tuple(fields)


class ParameterSet(Mapping[str, ParamValue]):
    """Typed, read-only parameters of a single tool invocation."""

    def __init__(self, values: Optional[Mapping[str, ParamValue]] = None):
        self._values = dict(values or {})

    def __getitem__(self, name: str) -> ParamValue:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ParameterSet({self._values!r})"

    def get_str(self, name: str) -> Optional[str]:
        value = self._values.get(name)
        return value if isinstance(value, str) else None

    def get_bool(self, name: str) -> Optional[bool]:
        value = self._values.get(name)
        return value if isinstance(value, bool) else None

    def get_number(self, name: str) -> Optional[Union[int, float]]:
        value = self._values.get(name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return value

    def has_text(self, name: str) -> bool:
        """True when the parameter is a non-empty string."""
        return bool(self.get_str(name))

    def is_true(self, name: str) -> bool:
        return self.get_bool(name) is True


def _coerce(value: Any) -> Optional[ParamValue]:
    # bool is checked first: it is a subclass of int
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    return None


def normalize_parameters(raw: Any) -> ParameterSet:
    """Turn an untyped argument bag into a ParameterSet.

    Args:
        raw: Tool arguments as received from the client, possibly None

    Returns:
        ParameterSet with every supported scalar value; nested objects,
        lists, nulls and non-string keys are dropped.
    """
    if not isinstance(raw, Mapping):
        return ParameterSet()

    values = {}
    for key, value in raw.items():
        if not isinstance(key, str):
            continue
        coerced = _coerce(value)
        if coerced is not None:
            values[key] = coerced
    return ParameterSet(values)


@dataclass(frozen=True)
class RequiredText:
    """The named parameter must be a non-empty string."""

    name: str
    message: str

    def check(self, params: ParameterSet) -> None:
        if not params.has_text(self.name):
            raise ValidationError(self.message, (self.name,))


@dataclass(frozen=True)
class ExclusiveChoice:
    """Exactly one of a named target or an "all" flag must be chosen.

    An empty target string counts as not chosen, as does a false or missing
    flag.
    """

    target: str
    flag: str
    missing_message: str
    conflict_message: str

    def check(self, params: ParameterSet) -> None:
        has_target = params.has_text(self.target)
        has_flag = params.is_true(self.flag)
        if has_target and has_flag:
            raise ValidationError(self.conflict_message, (self.target, self.flag))
        if not has_target and not has_flag:
            raise ValidationError(self.missing_message, (self.target, self.flag))


ValidationRule = Union[RequiredText, ExclusiveChoice]


def validate_parameters(params: ParameterSet, rules: Sequence[ValidationRule]) -> None:
    """Check rules in order and raise ValidationError on the first violation."""
    for rule in rules:
        rule.check(params)
