"""The type catalog: a snapshot of candidate types and their properties."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable, Iterator, Mapping
from threading import Lock
from types import ModuleType
from typing import Any, NamedTuple, TypeVar, overload

import msgspec

from . import errors, logs, reflect
from .reflect import PropertySpec
from .utils.path import import_module

log = logs.get(__name__)

T = TypeVar('T', bound=type)

__all__ = ['PropertySpec', 'TypeDescriptor', 'TypeRegistry']


class TypeDescriptor(msgspec.Struct, frozen=True):
    """A type's name and its public properties, in declaration order."""

    name: str
    cls: Any
    properties: dict[str, PropertySpec]
    factory: Any = None

    def type_names(self) -> dict[str, str]:
        """Return the property name to declared type name table."""
        return {name: prop.type_name for name, prop in self.properties.items()}

    def __contains__(self, name: object) -> bool:
        return name in self.properties


class _Candidate(NamedTuple):
    cls: type
    name: str
    properties: tuple[PropertySpec, ...] | None
    factory: Callable[[], Any] | None


class _Snapshot(NamedTuple):
    descriptors: tuple[TypeDescriptor, ...]
    by_name: dict[str, TypeDescriptor]
    by_type: dict[type, TypeDescriptor]


class TypeRegistry:
    """An explicit catalog of the types JSON objects may be matched against.

    Types are registered up front; `snapshot()` reflects them into
    descriptors. The snapshot is built on first use and only changes when
    `snapshot()` is called again.
    """

    def __init__(
        self,
        types: Iterable[type] = (),
        modules: Iterable[str | ModuleType] = (),
    ) -> None:
        self._lock = Lock()
        self._candidates: dict[str, _Candidate] = {}
        self._snapshot: _Snapshot | None = None

        for cls in types:
            self.register(cls)
        for module in modules:
            self.add_module(module)

    @overload
    def register(
        self,
        cls: T,
        *,
        name: str | None = None,
        properties: Mapping[str, Any] | Iterable[PropertySpec] | None = None,
        factory: Callable[[], Any] | None = None,
    ) -> T: ...

    @overload
    def register(
        self,
        cls: None = None,
        *,
        name: str | None = None,
        properties: Mapping[str, Any] | Iterable[PropertySpec] | None = None,
        factory: Callable[[], Any] | None = None,
    ) -> Callable[[T], T]: ...

    def register(self, cls=None, *, name=None, properties=None, factory=None):
        """Register a candidate type; usable directly or as a class decorator.

        `properties` replaces reflection: either a mapping of property name to
        declared type, or a sequence of `PropertySpec`.
        """
        if cls is None:

            def decorator(cls: T) -> T:
                return self.register(cls, name=name, properties=properties, factory=factory)

            return decorator

        if not inspect.isclass(cls):
            raise TypeError(f'expected a class, got {cls!r}')

        name = name or reflect.qualified_name(cls)
        specs = None if properties is None else _normalize(properties)
        with self._lock:
            existing = self._candidates.get(name)
            if existing is not None and existing.cls is not cls:
                raise errors.RegistryError(f'{name!r} is already registered to {existing.cls!r}')
            self._candidates[name] = _Candidate(cls, name, specs, factory)

        if self._snapshot is not None:
            log.debug('registered %s; visible after the next snapshot', name)
        return cls

    def add_module(self, module: str | ModuleType) -> list[type]:
        """Register every candidate class `module` exposes."""
        if isinstance(module, str):
            module = import_module(module)

        with self._lock:
            registered = {c.cls for c in self._candidates.values()}
        added = []
        for attr in vars(module).values():
            if reflect.is_candidate(attr) and attr not in registered:
                self.register(attr)
                registered.add(attr)
                added.append(attr)
        return added

    def snapshot(self) -> None:
        """Rebuild every descriptor from the registered types."""
        with self._lock:
            self._build()

    def descriptors(self) -> tuple[TypeDescriptor, ...]:
        """Return the current snapshot, building it on first use."""
        return self._current().descriptors

    def get(self, name: str) -> TypeDescriptor | None:
        return self._current().by_name.get(name)

    def describe(self, cls: type) -> TypeDescriptor | None:
        """Return the descriptor registered for exactly `cls`, if any."""
        return self._current().by_type.get(cls)

    def __getitem__(self, name: str) -> TypeDescriptor:
        return self._current().by_name[name]

    def __contains__(self, key: object) -> bool:
        snapshot = self._current()
        if isinstance(key, str):
            return key in snapshot.by_name
        return key in snapshot.by_type

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self.descriptors())

    def __len__(self) -> int:
        return len(self.descriptors())

    def _current(self) -> _Snapshot:
        snapshot = self._snapshot
        if snapshot is None:
            with self._lock:
                if self._snapshot is None:
                    self._build()
                snapshot = self._snapshot
        assert snapshot is not None
        return snapshot

    def _build(self) -> None:
        descriptors = tuple(self._describe(c) for c in list(self._candidates.values()))
        # a single assignment swaps the whole catalog for readers
        self._snapshot = _Snapshot(
            descriptors,
            {d.name: d for d in descriptors},
            {d.cls: d for d in descriptors},
        )
        log.debug('catalog snapshot: %d types', len(descriptors))

    def _describe(self, candidate: _Candidate) -> TypeDescriptor:
        log.debug('adding %s to the catalog', candidate.name)
        specs = candidate.properties
        if specs is None:
            specs = reflect.properties(candidate.cls)
        return TypeDescriptor(
            candidate.name,
            candidate.cls,
            {spec.name: spec for spec in specs},
            candidate.factory,
        )


def _normalize(properties: Mapping[str, Any] | Iterable[PropertySpec]) -> tuple[PropertySpec, ...]:
    if isinstance(properties, Mapping):
        return tuple(reflect.spec(name, annotation) for name, annotation in properties.items())
    specs = tuple(properties)
    for spec in specs:
        if not isinstance(spec, PropertySpec):
            raise TypeError(f'expected PropertySpec, got {spec!r}')
    return specs
