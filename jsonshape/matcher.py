"""Structural matching of parsed JSON objects against the type catalog.

JSON objects carry no type information, so the type to build is inferred
from which registered type declares the object's property names.
"""

from __future__ import annotations

import collections.abc
import enum
import inspect
import math
import types
import typing
import uuid
from collections.abc import Mapping
from datetime import datetime
from typing import Any

import msgspec

from . import convert, logs
from .catalog import TypeDescriptor, TypeRegistry
from .errors import DeserializeError, NoMatch, PropertyCoercionError, TypeInstantiationError
from .primitives import FixedInt, Float32, Pair
from .reflect import PropertySpec, type_name
from .utils.format import elide, format_path

log = logs.get(__name__)


class MatchPolicy(enum.Enum):
    # the last type, in catalog order, owning the last matched key
    LAST = 'last'
    # the type declaring the most of the object's keys
    SCORE = 'score'


DEFAULT_POLICY = MatchPolicy.SCORE

_UNSET = object()

MAPPING_TYPES = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
SEQUENCE_TYPES = (list, tuple, collections.abc.Sequence, collections.abc.MutableSequence)
SCALAR_TYPES = (bool, int, float, str, bytes, datetime, uuid.UUID)


class MatchResult(msgspec.Struct, frozen=True):
    """The descriptor judged to own a mapping."""

    descriptor: TypeDescriptor
    mapping: Mapping[str, Any]
    score: int


def deserialize(
    mapping: Mapping[str, Any],
    registry: TypeRegistry,
    policy: MatchPolicy | str | None = None,
) -> Any:
    """Build a typed object from a parsed JSON object."""
    return Matcher(registry, policy).deserialize(mapping)


def instantiate(descriptor: TypeDescriptor) -> Any:
    """Create an instance of a descriptor's type without arguments."""
    factory = descriptor.factory or descriptor.cls
    try:
        sig = inspect.signature(factory)
    except (TypeError, ValueError):
        sig = None

    if sig is not None:
        required = [
            p.name
            for p in sig.parameters.values()
            if p.default is p.empty and p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
        ]
        if required:
            raise TypeInstantiationError(
                f'{descriptor.name} has no parameterless constructor (requires {", ".join(required)})'
            )

    try:
        return factory()
    except TypeError as exc:
        raise TypeInstantiationError(f'cannot instantiate {descriptor.name}: {exc}') from exc


class Matcher:
    """Selects, instantiates and populates registered types from mappings."""

    def __init__(self, registry: TypeRegistry, policy: MatchPolicy | str | None = None) -> None:
        self.registry = registry
        self.policy = MatchPolicy(policy or DEFAULT_POLICY)

    def match(self, mapping: Mapping[str, Any]) -> MatchResult:
        """Return the descriptor that best owns `mapping`, raising `NoMatch`."""
        descriptors = self.registry.descriptors()

        if not mapping:
            empty = [d for d in descriptors if not d.properties]
            if not empty:
                raise NoMatch('no registered type matches an empty object')
            found = empty[-1] if self.policy is MatchPolicy.LAST else empty[0]
            return MatchResult(found, mapping, 0)

        if self.policy is MatchPolicy.LAST:
            found = self._match_last(mapping, descriptors)
        else:
            found = self._match_score(mapping, descriptors)

        if found is None:
            keys = ', '.join(mapping)
            raise NoMatch(f'no registered type has any of the properties: {elide(keys)}')

        score = sum(1 for key in mapping if key in found.properties)
        log.debug('matched %s (%d of %d keys)', found.name, score, len(mapping))
        return MatchResult(found, mapping, score)

    def _match_last(
        self, mapping: Mapping[str, Any], descriptors: tuple[TypeDescriptor, ...]
    ) -> TypeDescriptor | None:
        # no score is kept: every owner of every key overwrites the candidate
        found = None
        for key in mapping:
            for descriptor in descriptors:
                if key in descriptor.properties:
                    found = descriptor
        return found

    def _match_score(
        self, mapping: Mapping[str, Any], descriptors: tuple[TypeDescriptor, ...]
    ) -> TypeDescriptor | None:
        found = None
        best: tuple[int, int] | None = None
        for descriptor in descriptors:
            score = sum(1 for key in mapping if key in descriptor.properties)
            if not score:
                continue
            # ties go to the type declaring the fewest properties the input lacks
            rank = (score, score - len(descriptor.properties))
            if best is None or rank > best:
                found, best = descriptor, rank
        return found

    def deserialize(self, mapping: Mapping[str, Any]) -> Any:
        """Build and populate the best-matching type for `mapping`."""
        if not isinstance(mapping, Mapping):
            raise NoMatch(f'expected a JSON object, got {type(mapping).__name__}')
        try:
            return self._build(mapping, '')
        except RecursionError:
            raise DeserializeError('nesting too deep') from None

    def _build(self, mapping: Mapping[str, Any], path: str) -> Any:
        try:
            result = self.match(mapping)
        except NoMatch as exc:
            if not path:
                raise
            raise NoMatch(f'{path}: {exc}') from exc

        descriptor = result.descriptor
        obj = instantiate(descriptor)
        path = path or descriptor.cls.__name__

        for name, prop in descriptor.properties.items():
            if name not in mapping:
                continue
            prop_path = format_path(path, name)
            value = self.coerce(mapping[name], prop.annotation, prop_path)
            if value is _UNSET:
                continue
            self._assign(obj, prop, value, prop_path)

        return obj

    def _assign(self, obj: Any, prop: PropertySpec, value: Any, path: str) -> None:
        try:
            assigned = prop.set(obj, value)
        except (TypeError, ValueError, AttributeError) as exc:
            raise PropertyCoercionError(f'{path}: {exc}') from exc
        if not assigned:
            log.debug('%s has no setter, skipping', path)

    ##
    ## coercion
    ##

    def coerce(self, value: Any, annotation: Any, path: str) -> Any:
        """Convert a parsed value to a declared type."""
        if value is None:
            return None

        origin = typing.get_origin(annotation)
        args = typing.get_args(annotation)

        if origin is typing.Union or origin is types.UnionType:
            return self._coerce_union(value, args, path)

        target = origin or annotation
        if target is Any or target is object:
            return value

        # unresolved annotations name a class we cannot see
        if isinstance(target, (str, typing.TypeVar, typing.ForwardRef)):
            if isinstance(value, Mapping):
                return self._build(value, path)
            return value

        if not isinstance(target, type):
            return value

        if isinstance(value, Mapping):
            return self._coerce_mapping(value, target, args, path)

        if issubclass(target, datetime):
            text = self._expect(value, str, annotation, path)
            return self._convert(
                convert.parse_ticks if convert.is_ticks(text) else convert.parse_iso8601,
                text,
                path,
            )

        if issubclass(target, uuid.UUID):
            return self._convert(convert.parse_guid, self._expect(value, str, annotation, path), path)

        if issubclass(target, enum.Enum):
            return self._convert(target, value, path)

        if target is bool:
            return self._expect(value, bool, annotation, path)

        if issubclass(target, (FixedInt, Float32)):
            number = self._number(value, annotation, path)
            return self._convert(target.narrow, number, path)

        if target is int:
            number = self._number(value, annotation, path)
            return self._convert(_truncate, number, path)

        if target is float:
            return float(self._number(value, annotation, path))

        if target is str:
            return self._expect(value, str, annotation, path)

        if target in SEQUENCE_TYPES:
            return self._coerce_sequence(self._expect(value, list, annotation, path), target, args, path)

        if isinstance(value, target):
            return value
        raise PropertyCoercionError(
            f'{path}: expected {type_name(annotation)}, got {type(value).__name__}'
        )

    def _coerce_union(self, value: Any, args: tuple[Any, ...], path: str) -> Any:
        members = [a for a in args if a is not type(None)]
        failures = []
        for member in members:
            try:
                return self.coerce(value, member, path)
            except PropertyCoercionError as exc:
                failures.append(exc)
        if len(failures) == 1:
            raise failures[0]
        names = ' | '.join(type_name(m) for m in members)
        raise PropertyCoercionError(f'{path}: expected {names}, got {type(value).__name__}')

    def _coerce_mapping(
        self, value: Mapping[str, Any], target: type, args: tuple[Any, ...], path: str
    ) -> Any:
        if issubclass(target, Pair):
            return self._coerce_pair(value, path)

        if target in MAPPING_TYPES:
            value_type = args[1] if len(args) == 2 else Any
            return {k: self.coerce(v, value_type, format_path(path, k)) for k, v in value.items()}

        if issubclass(target, SCALAR_TYPES) or target in SEQUENCE_TYPES:
            raise PropertyCoercionError(f'{path}: expected {type_name(target)}, got an object')

        obj = self._build(value, path)
        if not isinstance(obj, target):
            log.debug('%s: declared %s, matched %s', path, type_name(target), type(obj).__name__)
        return obj

    def _coerce_pair(self, value: Mapping[str, Any], path: str) -> Any:
        if not value:
            log.debug('%s: empty object, leaving unset', path)
            return _UNSET
        if len(value) > 1:
            log.warning('%s: keeping the first of %d entries', path, len(value))
        key, item = next(iter(value.items()))
        return Pair(key, item)

    def _coerce_sequence(
        self, value: list[Any], target: type, args: tuple[Any, ...], path: str
    ) -> Any:
        if target is tuple and args and args[-1] is not Ellipsis:
            if len(args) != len(value):
                raise PropertyCoercionError(
                    f'{path}: expected {len(args)} items, got {len(value)}'
                )
            item_types = list(args)
        else:
            item_types = [args[0] if args else Any] * len(value)

        items = [
            self.coerce(item, item_type, f'{path}[{i}]')
            for i, (item, item_type) in enumerate(zip(value, item_types))
        ]
        return tuple(items) if target is tuple else items

    def _expect(self, value: Any, kind: type, annotation: Any, path: str) -> Any:
        if isinstance(value, kind) and (kind is bool or not isinstance(value, bool)):
            return value
        raise PropertyCoercionError(
            f'{path}: expected {type_name(annotation)}, got {type(value).__name__}'
        )

    def _number(self, value: Any, annotation: Any, path: str) -> int | float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PropertyCoercionError(
                f'{path}: expected {type_name(annotation)}, got {type(value).__name__}'
            )
        return value

    def _convert(self, func: typing.Callable[[Any], Any], value: Any, path: str) -> Any:
        try:
            return func(value)
        except PropertyCoercionError as exc:
            raise PropertyCoercionError(f'{path}: {exc}') from exc
        except (ValueError, OverflowError) as exc:
            raise PropertyCoercionError(f'{path}: {exc}') from exc


def _truncate(value: int | float) -> int:
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f'cannot convert {value} to int')
        return math.trunc(value)
    return int(value)
