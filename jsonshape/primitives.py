"""Fixed-width numeric types and the single-pair container.

JSON carries no width information, so the parser keeps every integer as
either `Int64` or `UInt64` and the matcher narrows it to whatever width a
property declares. The same classes serve both roles.
"""

from __future__ import annotations

import math
import struct
from typing import Any, ClassVar, NamedTuple, SupportsFloat, SupportsIndex


class FixedInt(int):
    """An integer constrained to a fixed bit width."""

    BITS: ClassVar[int] = 64
    SIGNED: ClassVar[bool] = True
    MIN: ClassVar[int] = -(1 << 63)
    MAX: ClassVar[int] = (1 << 63) - 1

    def __init_subclass__(cls, bits: int = 64, signed: bool = True, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.BITS = bits
        cls.SIGNED = signed
        if signed:
            cls.MIN = -(1 << (bits - 1))
            cls.MAX = (1 << (bits - 1)) - 1
        else:
            cls.MIN = 0
            cls.MAX = (1 << bits) - 1

    def __new__(cls, value: SupportsIndex | str = 0, base: int | None = None) -> FixedInt:
        if base is None:
            obj = super().__new__(cls, value)
        else:
            obj = super().__new__(cls, value, base)  # type: ignore[call-overload]
        if not cls.MIN <= obj <= cls.MAX:
            raise OverflowError(f'{int(obj)} out of range for {cls.__name__}')
        return obj

    @classmethod
    def narrow(cls, value: SupportsFloat | SupportsIndex) -> FixedInt:
        """Convert `value` with truncating semantics.

        Floats are truncated toward zero, then the integer keeps only its low
        `BITS` bits, reinterpreted as two's complement for signed types.
        """
        if isinstance(value, float):
            if not math.isfinite(value):
                raise ValueError(f'cannot convert {value} to {cls.__name__}')
            value = math.trunc(value)
        mask = (1 << cls.BITS) - 1
        bits = int(value) & mask
        if cls.SIGNED and bits > cls.MAX:
            bits -= 1 << cls.BITS
        return cls(bits)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({int(self)})'


class Int8(FixedInt, bits=8, signed=True):
    pass


class Int16(FixedInt, bits=16, signed=True):
    pass


class Int32(FixedInt, bits=32, signed=True):
    pass


class Int64(FixedInt, bits=64, signed=True):
    pass


class UInt8(FixedInt, bits=8, signed=False):
    pass


class UInt16(FixedInt, bits=16, signed=False):
    pass


class UInt32(FixedInt, bits=32, signed=False):
    pass


class UInt64(FixedInt, bits=64, signed=False):
    pass


FLOAT32_MAX = struct.unpack('<f', b'\xff\xff\x7f\x7f')[0]


class Float32(float):
    """A float rounded to single precision."""

    def __new__(cls, value: SupportsFloat | str = 0.0) -> Float32:
        return super().__new__(cls, cls._round(float(value)))

    @staticmethod
    def _round(value: float) -> float:
        if math.isfinite(value) and abs(value) > FLOAT32_MAX:
            return math.copysign(math.inf, value)
        return struct.unpack('<f', struct.pack('<f', value))[0]

    @classmethod
    def narrow(cls, value: SupportsFloat) -> Float32:
        return cls(value)

    def __repr__(self) -> str:
        return f'Float32({float(self)!r})'


class Pair(NamedTuple):
    """A single key/value entry, serialized as a one-entry JSON object."""

    key: str
    value: Any
