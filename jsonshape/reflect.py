"""Discovers the public properties of Python classes.

A property is anything readable by name on an instance: msgspec struct
fields, dataclass fields, annotated class attributes and `property`
objects. Each is described by a `PropertySpec`.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import enum
import inspect
import sys
import types
import typing
from typing import Any, Callable, ClassVar, Iterator

import msgspec

from . import logs

log = logs.get(__name__)

# types from these namespaces are never JSON payload targets
EXCLUDED_MODULES = frozenset(
    {
        'builtins',
        'typing',
        'typing_extensions',
        'msgspec',
        'jsonshape',
        '_pytest',
        'pytest',
    }
)
METADATA_TYPES = (
    type,
    types.ModuleType,
    types.FunctionType,
    types.MethodType,
    types.BuiltinFunctionType,
    inspect.Signature,
    inspect.Parameter,
    property,
)


class PropertySpec(msgspec.Struct, frozen=True):
    """Description of a single public property.

    Reads default to ``getattr(obj, attr or name)`` and writes to ``setattr``;
    ``getter`` and ``setter`` replace them when given.
    """

    name: str
    type_name: str
    annotation: Any = Any
    writable: bool = True
    attr: str | None = None
    getter: Any = None
    setter: Any = None

    def get(self, obj: Any) -> Any:
        if self.getter is not None:
            return self.getter(obj)
        return getattr(obj, self.attr or self.name)

    def set(self, obj: Any, value: Any) -> bool:
        """Assign `value` on `obj`; returns `False` when the property is read-only."""
        if not self.writable:
            return False
        if self.setter is not None:
            self.setter(obj, value)
        else:
            setattr(obj, self.attr or self.name, value)
        return True


def spec(
    name: str,
    annotation: Any = Any,
    writable: bool = True,
    getter: Callable[[Any], Any] | None = None,
    setter: Callable[[Any, Any], None] | None = None,
) -> PropertySpec:
    """Build a `PropertySpec`, deriving its printable type name."""
    return PropertySpec(
        name,
        type_name(annotation),
        annotation,
        writable=writable and (getter is None or setter is not None),
        getter=getter,
        setter=setter,
    )


def type_name(annotation: Any) -> str:
    """Return a printable, importable name for a type annotation."""
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, type) and not isinstance(annotation, types.GenericAlias):
        if annotation.__module__ == 'builtins':
            return annotation.__qualname__
        return f'{annotation.__module__}.{annotation.__qualname__}'
    return repr(annotation)


def qualified_name(cls: type) -> str:
    return f'{cls.__module__}.{cls.__qualname__}'


def is_candidate(obj: Any) -> bool:
    """Return `True` if `obj` is a class that could own a JSON object."""
    if not inspect.isclass(obj) or isinstance(obj, types.GenericAlias):
        return False
    root = obj.__module__.partition('.')[0]
    if root in EXCLUDED_MODULES or root in sys.stdlib_module_names:
        return False
    if inspect.isabstract(obj) or issubclass(obj, (enum.Enum, BaseException)):
        return False
    if getattr(obj, '_is_protocol', False):
        return False
    return True


def is_excluded_type(annotation: Any) -> bool:
    """Return `True` for declared types a property may not have.

    Abstract classes, callables and reflection metadata are excluded.
    """
    if isinstance(annotation, type) and not isinstance(annotation, types.GenericAlias):
        if inspect.isabstract(annotation) or issubclass(annotation, METADATA_TYPES):
            return True
    if annotation is Callable or annotation is collections.abc.Callable:
        return True
    origin = typing.get_origin(annotation)
    return origin is collections.abc.Callable or origin is type


def properties(cls: type) -> tuple[PropertySpec, ...]:
    """Return the usable public properties of `cls` in declaration order."""
    if isinstance(cls, type) and issubclass(cls, msgspec.Struct):
        found = list(_struct_properties(cls))
    elif dataclasses.is_dataclass(cls):
        found = list(_dataclass_properties(cls))
    else:
        found = list(_annotated_properties(cls))

    names = {p.name for p in found}
    found.extend(p for p in _property_objects(cls) if p.name not in names)

    result = []
    for prop in found:
        if is_excluded_type(prop.annotation):
            log.debug('skipping %s.%s: %s', cls.__name__, prop.name, prop.type_name)
            continue
        result.append(prop)
    return tuple(result)


def _struct_properties(cls: type[msgspec.Struct]) -> Iterator[PropertySpec]:
    frozen = cls.__struct_config__.frozen
    for field in msgspec.structs.fields(cls):
        if field.name.startswith('_'):
            continue
        yield PropertySpec(
            field.encode_name,
            type_name(field.type),
            field.type,
            writable=not frozen,
            attr=None if field.encode_name == field.name else field.name,
        )


def _dataclass_properties(cls: type) -> Iterator[PropertySpec]:
    hints = type_hints(cls)
    frozen = cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
    for field in dataclasses.fields(cls):
        if field.name.startswith('_'):
            continue
        annotation = hints.get(field.name, field.type)
        yield PropertySpec(field.name, type_name(annotation), annotation, writable=not frozen)


def _annotated_properties(cls: type) -> Iterator[PropertySpec]:
    for name, annotation in type_hints(cls).items():
        if name.startswith('_') or typing.get_origin(annotation) is ClassVar:
            continue
        if isinstance(annotation, str) and annotation.startswith(('ClassVar', 'typing.ClassVar')):
            continue
        if isinstance(inspect.getattr_static(cls, name, None), property):
            continue
        yield PropertySpec(name, type_name(annotation), annotation)


def _property_objects(cls: type) -> Iterator[PropertySpec]:
    props: dict[str, property] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name, attr in vars(klass).items():
            if isinstance(attr, property):
                props[name] = attr

    for name, prop in props.items():
        if name.startswith('_') or prop.fget is None:
            continue
        if getattr(prop, '__isabstractmethod__', False):
            continue
        annotation = _return_hint(prop.fget)
        yield PropertySpec(name, type_name(annotation), annotation, writable=prop.fset is not None)


def type_hints(cls: type) -> dict[str, Any]:
    """Resolve class annotations, falling back to their raw (string) form."""
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError, AttributeError, SyntaxError) as exc:
        log.debug('unresolved annotations on %s: %s', cls.__name__, exc)

    hints: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        hints.update(inspect.get_annotations(klass))
    return hints


def _return_hint(func: Callable[..., Any]) -> Any:
    try:
        return typing.get_type_hints(func).get('return', Any)
    except (NameError, TypeError, AttributeError, SyntaxError):
        return inspect.get_annotations(func).get('return', Any)
