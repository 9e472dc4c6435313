from __future__ import annotations

# Imports for convenience
from .catalog import PropertySpec, TypeDescriptor, TypeRegistry
from .errors import (
    DeserializeError,
    JsonShapeError,
    MalformedJson,
    NoMatch,
    PropertyCoercionError,
    TypeInstantiationError,
    UnsupportedValue,
)
from .interface import JsonSerializer
from .matcher import Matcher, MatchPolicy, deserialize
from .parser import ParseResult, decode, parse
from .primitives import (
    Float32,
    Int8,
    Int16,
    Int32,
    Int64,
    Pair,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from .serializer import DateFormat, serialize, to_value

__all__ = [
    'DateFormat',
    'DeserializeError',
    'Float32',
    'Int8',
    'Int16',
    'Int32',
    'Int64',
    'JsonSerializer',
    'JsonShapeError',
    'MalformedJson',
    'MatchPolicy',
    'Matcher',
    'NoMatch',
    'Pair',
    'ParseResult',
    'PropertyCoercionError',
    'PropertySpec',
    'TypeDescriptor',
    'TypeInstantiationError',
    'TypeRegistry',
    'UInt8',
    'UInt16',
    'UInt32',
    'UInt64',
    'UnsupportedValue',
    'decode',
    'deserialize',
    'parse',
    'serialize',
    'to_value',
]
