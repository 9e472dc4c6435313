"""Serializes generic values and typed object graphs into JSON text."""

from __future__ import annotations

import enum
import inspect
import math
import re
import uuid
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from . import convert, logs, reflect
from .errors import UnsupportedValue
from .primitives import Pair
from .utils.format import format_path
from .value import Value

if TYPE_CHECKING:
    from .catalog import TypeRegistry

log = logs.get(__name__)


class DateFormat(enum.Enum):
    ISO8601 = 'iso8601'
    AJAX = 'ajax'


PRIMITIVE_TYPES = (bool, int, float, str)
UNSUPPORTED_TYPES = (bytes, bytearray, memoryview, set, frozenset, complex)

ESCAPES = {
    '"': '\\"',
    '\\': '\\\\',
    '\b': '\\b',
    '\f': '\\f',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
}
_NEEDS_ESCAPE = re.compile(r'["\\]|[^\x20-\x7e]')


def serialize(
    obj: Any,
    registry: TypeRegistry | None = None,
    date_format: DateFormat | str = DateFormat.ISO8601,
    skip_unsupported: bool = False,
) -> str:
    """Serialize `obj` to JSON text, raising `UnsupportedValue`."""
    return Encoder(registry, date_format, skip_unsupported).encode(obj)


def to_value(
    obj: Any,
    registry: TypeRegistry | None = None,
    date_format: DateFormat | str = DateFormat.ISO8601,
    skip_unsupported: bool = False,
) -> Value:
    """Reflect `obj` into a generic value tree."""
    return Encoder(registry, date_format, skip_unsupported).to_value(obj)


def needs_reflection(obj: Any) -> bool:
    """Return `True` unless `obj` is written directly as a JSON primitive."""
    return obj is not None and not isinstance(obj, PRIMITIVE_TYPES)


def quote(text: str) -> str:
    """Quote a string, escaping everything outside printable ASCII."""
    return f'"{_NEEDS_ESCAPE.sub(_escape, text)}"'


def _escape(match: re.Match[str]) -> str:
    char = match.group()
    try:
        return ESCAPES[char]
    except KeyError:
        pass
    code = ord(char)
    if code > 0xFFFF:
        code -= 0x10000
        return f'\\u{0xD800 | (code >> 10):04x}\\u{0xDC00 | (code & 0x3FF):04x}'
    return f'\\u{code:04x}'


class Encoder:
    """Converts objects to generic values, then to text.

    Typed objects are read through their registered descriptor when a
    registry knows the type, and through reflection otherwise.
    """

    def __init__(
        self,
        registry: TypeRegistry | None = None,
        date_format: DateFormat | str = DateFormat.ISO8601,
        skip_unsupported: bool = False,
    ) -> None:
        self.registry = registry
        self.date_format = DateFormat(date_format)
        self.skip_unsupported = skip_unsupported

    def encode(self, obj: Any) -> str:
        chunks: list[str] = []
        value = self.to_value(obj)
        try:
            self.write(value, chunks)
        except RecursionError:
            raise UnsupportedValue('nesting too deep') from None
        return ''.join(chunks)

    ##
    ## reflection
    ##

    def to_value(self, obj: Any) -> Value:
        try:
            return self._reflect(obj, '', set())
        except RecursionError:
            raise UnsupportedValue('nesting too deep') from None

    def _reflect(self, obj: Any, path: str, active: set[int]) -> Value:
        if not needs_reflection(obj):
            if isinstance(obj, float) and not math.isfinite(obj):
                raise UnsupportedValue(f'{path or "value"}: {obj!r} has no JSON representation')
            return obj

        if isinstance(obj, datetime):
            if self.date_format is DateFormat.AJAX:
                return convert.to_ticks(obj)
            return convert.to_iso8601(obj)
        if isinstance(obj, uuid.UUID):
            return str(obj)
        if isinstance(obj, enum.Enum):
            return self._reflect(obj.value, path, active)

        if (
            isinstance(obj, UNSUPPORTED_TYPES)
            or inspect.isroutine(obj)
            or inspect.isclass(obj)
            or inspect.ismodule(obj)
        ):
            raise UnsupportedValue(f'{path or "value"}: {type(obj).__name__} is not supported')

        key = id(obj)
        if key in active:
            raise UnsupportedValue(f'{path or type(obj).__name__}: circular reference')
        active.add(key)
        try:
            if isinstance(obj, Pair):
                name = str(obj.key)
                return {name: self._reflect(obj.value, format_path(path, name), active)}
            if isinstance(obj, Mapping):
                return {
                    str(k): self._reflect(v, format_path(path, str(k)), active)
                    for k, v in obj.items()
                }
            if isinstance(obj, (list, tuple)):
                return [self._reflect(v, f'{path}[{i}]', active) for i, v in enumerate(obj)]
            return self._reflect_object(obj, path, active)
        finally:
            active.discard(key)

    def _reflect_object(self, obj: Any, path: str, active: set[int]) -> dict[str, Value]:
        cls = type(obj)
        descriptor = self.registry.describe(cls) if self.registry is not None else None
        if descriptor is not None:
            props = tuple(descriptor.properties.values())
        elif reflect.is_candidate(cls):
            props = reflect.properties(cls)
        else:
            raise UnsupportedValue(f'{path or "value"}: {cls.__name__} is not supported')

        path = path or cls.__name__
        result: dict[str, Value] = {}
        for prop in props:
            prop_path = format_path(path, prop.name)
            try:
                attr = prop.get(obj)
            except AttributeError:
                log.debug('skipping %s: not set', prop_path)
                continue
            try:
                result[prop.name] = self._reflect(attr, prop_path, active)
            except UnsupportedValue as exc:
                if not self.skip_unsupported:
                    raise
                log.debug('skipping %s', exc)
        return result

    ##
    ## text
    ##

    def write(self, value: Value, chunks: list[str]) -> None:
        """Append the JSON text for a generic value to `chunks`."""
        if value is None:
            chunks.append('null')
        elif value is True:
            chunks.append('true')
        elif value is False:
            chunks.append('false')
        elif isinstance(value, int):
            chunks.append(str(int(value)))
        elif isinstance(value, float):
            chunks.append(convert.format_number(value))
        elif isinstance(value, str):
            chunks.append(quote(value))
        elif isinstance(value, dict):
            chunks.append('{')
            for i, (k, v) in enumerate(value.items()):
                if i:
                    chunks.append(',')
                chunks.append(quote(k))
                chunks.append(':')
                self.write(v, chunks)
            chunks.append('}')
        elif isinstance(value, list):
            chunks.append('[')
            for i, v in enumerate(value):
                if i:
                    chunks.append(',')
                self.write(v, chunks)
            chunks.append(']')
        else:
            raise UnsupportedValue(f'{type(value).__name__} is not a generic value')
