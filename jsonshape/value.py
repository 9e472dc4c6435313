"""The generic value tree produced by the parser.

Values are plain Python objects: ``None``, ``bool``, ``Int64``/``UInt64``/
``float`` numbers, ``str``, ``list`` and ``dict`` (keys are strings, order is
insertion order).
"""

from __future__ import annotations

import enum
from typing import Any, Union

from . import logs
from .primitives import Int64, UInt64

log = logs.get(__name__)

Value = Union[None, bool, int, float, str, list['Value'], dict[str, 'Value']]


class ValueKind(enum.Enum):
    NULL = 'null'
    BOOL = 'bool'
    NUMBER = 'number'
    STRING = 'string'
    SEQUENCE = 'sequence'
    MAPPING = 'mapping'


class NumberKind(enum.Enum):
    SIGNED = 'signed'
    UNSIGNED = 'unsigned'
    DOUBLE = 'double'


def kind_of(value: Any) -> ValueKind:
    """Return the kind of a generic value, raising `TypeError` for anything else."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.SEQUENCE
    if isinstance(value, dict):
        return ValueKind.MAPPING
    raise TypeError(f'not a generic value: {type(value).__name__}')


def number_kind(value: int | float) -> NumberKind:
    """Return how a parsed number is stored.

    Plain ints are classified by sign, the way the parser would store them.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f'not a number: {type(value).__name__}')
    if isinstance(value, float):
        return NumberKind.DOUBLE
    if isinstance(value, Int64):
        return NumberKind.SIGNED
    if isinstance(value, UInt64):
        return NumberKind.UNSIGNED
    return NumberKind.SIGNED if value < 0 else NumberKind.UNSIGNED


def is_value(value: Any) -> bool:
    """Return `True` if `value` is a tree made only of generic value kinds."""
    try:
        kind = kind_of(value)
    except TypeError:
        return False
    if kind is ValueKind.SEQUENCE:
        return all(is_value(item) for item in value)
    if kind is ValueKind.MAPPING:
        return all(isinstance(k, str) and is_value(v) for k, v in value.items())
    return True


def dump(value: Value, level: int = 0) -> None:
    """Log an indented view of a value tree at debug level."""
    if not log.isEnabledFor(logs.DEBUG):
        return
    try:
        lines = _dump_lines(value, level)
    except RecursionError:
        log.debug('value tree nested too deep to dump')
        return
    for line in lines:
        log.debug('%s', line)


def _dump_lines(value: Value, level: int) -> list[str]:
    tabs = ' ' * level
    lines: list[str] = []
    if isinstance(value, dict):
        for name, item in value.items():
            if isinstance(item, (dict, list)):
                lines.append(f'{tabs}{name} :')
                lines.extend(_dump_lines(item, level + 4))
            else:
                lines.append(f'{tabs}{name} : {item!r}')
    elif isinstance(value, list):
        for item in value:
            if isinstance(item, (dict, list)):
                lines.extend(_dump_lines(item, level + 4))
            else:
                lines.append(f'{tabs}{item!r}')
    else:
        lines.append(f'{tabs}{value!r}')
    return lines
