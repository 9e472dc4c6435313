from __future__ import annotations


class JsonShapeError(Exception):
    """Base class for all jsonshape exceptions."""


class MalformedJson(JsonShapeError):
    """Raised when the parser cannot continue."""

    def __init__(self, msg: str, position: int = 0) -> None:
        super().__init__(f'{msg} (at {position})')
        self.msg = msg
        self.position = position


class UnsupportedValue(JsonShapeError):
    """Raised when the serializer meets a value it cannot represent."""


class DeserializeError(JsonShapeError):
    """Base class for errors raised while populating typed objects."""


class NoMatch(DeserializeError):
    """Raised when no registered type owns any property of a mapping."""


class TypeInstantiationError(DeserializeError):
    """Raised when the matched type cannot be constructed without arguments."""


class PropertyCoercionError(DeserializeError):
    """Raised when a value cannot be converted to a property's declared type."""


class RegistryError(JsonShapeError):
    """Raised when attempting to register a duplicate object."""


class EncodeError(JsonShapeError):
    """Adds context for errors raised when encoding."""


class DecodeError(JsonShapeError):
    """Adds context for errors raised when decoding."""
