"""Codec base classes and helpers."""

from __future__ import annotations

import abc
from typing import Any

from .. import errors, registry, utils
from ..registry import Registry


def create(name: str | Codec, **kwargs: Any) -> Codec:
    """Return a codec by name or pass through existing instances."""
    if isinstance(name, Codec):
        return name
    registry.init()
    try:
        cls = REGISTRY[name]
    except KeyError:
        raise errors.RegistryError(f'unknown codec: {name!r}') from None
    return cls(**kwargs)


class Codec(abc.ABC):
    """Base class for codecs that convert objects to and from bytes."""

    NAME: str

    def __init_subclass__(cls) -> None:
        REGISTRY[cls.NAME] = cls

    @abc.abstractmethod
    def encode(self, obj: Any) -> bytes:
        """Serialize `obj` into bytes."""
        raise NotImplementedError('abstract')

    @abc.abstractmethod
    def decode(self, data: bytes) -> Any:
        """Deserialize bytes into Python objects."""
        raise NotImplementedError('abstract')

    def _encode(self, obj: Any) -> bytes:
        """Wrapper that provides encoding error context. Used internally."""
        try:
            return self.encode(obj)
        except Exception as exc:
            raise errors.EncodeError(f'{exc}: obj={utils.format.elide(repr(obj))}') from exc

    def _decode(self, data: bytes) -> Any:
        """Wrapper that provides decoding error context. Used internally."""
        try:
            return self.decode(data)
        except Exception as exc:
            raise errors.DecodeError(f'{exc}: data={utils.format.elide(repr(data))}') from exc


REGISTRY = Registry(__name__, Codec)
