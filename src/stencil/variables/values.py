"""Conversions between raw inputs, variable values and the answers file.

A variable value is always one of ``str``, ``bool``, ``int``, ``float`` or
``list[str]``. Every conversion here is total: inputs that cannot be parsed
for the declared kind fall back to the raw string instead of raising.
"""

from __future__ import annotations

import math
from typing import Any, List, Union

from ..config.schema import VariableKind, VariableSpec

VariableValue = Union[str, bool, int, float, List[str]]

TRUTHY = ("true", "1", "yes")


def parse_bool(raw: str) -> bool:
    return raw in TRUTHY


def parse_int(raw: str) -> VariableValue:
    try:
        return int(raw.strip())
    except ValueError:
        return raw


def parse_float(raw: str) -> VariableValue:
    try:
        value = float(raw.strip())
    except ValueError:
        return raw
    # inf/nan would not survive a round trip through the answers file
    if not math.isfinite(value):
        return raw
    return value


def split_choices(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",")]


def coerce_override(raw: str, spec: VariableSpec) -> VariableValue:
    """Convert a ``key=value`` override string to the variable's kind."""
    if spec.kind is VariableKind.BOOL:
        return parse_bool(raw)
    if spec.kind is VariableKind.INT:
        return parse_int(raw)
    if spec.kind is VariableKind.FLOAT:
        return parse_float(raw)
    if spec.kind is VariableKind.MULTISELECT:
        return split_choices(raw)
    return raw


def coerce_default(raw: Any, spec: VariableSpec) -> VariableValue:
    """Convert a declared default (any YAML scalar or list) to the variable's kind."""
    kind = spec.kind
    if kind is VariableKind.BOOL:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, (int, float)):
            return bool(raw)
        return parse_bool(str(raw))
    if kind is VariableKind.INT:
        if isinstance(raw, bool):
            return int(raw)
        if isinstance(raw, int):
            return raw
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
        return parse_int(str(raw))
    if kind is VariableKind.FLOAT:
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            value = float(raw)
            return value if math.isfinite(value) else str(raw)
        return parse_float(str(raw))
    if kind is VariableKind.MULTISELECT:
        if isinstance(raw, (list, tuple)):
            return [str(item) for item in raw]
        if isinstance(raw, str):
            return split_choices(raw) if raw else []
        return [str(raw)]
    return str(raw)


def to_answer_value(value: VariableValue) -> Any:
    """Convert a variable value to its answers-file representation."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else str(value)
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return str(value)


def from_answer_value(raw: Any) -> VariableValue:
    """Convert a value read back from the answers file to a variable value."""
    if isinstance(raw, (bool, int, str)):
        return raw
    if isinstance(raw, float):
        return raw if math.isfinite(raw) else str(raw)
    if isinstance(raw, (list, tuple)):
        return [str(item) for item in raw]
    if raw is None:
        return ""
    return str(raw)
