import math

import pytest

from jsonshape import Float32, Int8, Int16, Int32, Int64, UInt8, UInt16, UInt32, UInt64
from jsonshape.primitives import FLOAT32_MAX


@pytest.mark.parametrize(
    'cls, low, high',
    [
        (Int8, -128, 127),
        (Int16, -32768, 32767),
        (Int32, -(2**31), 2**31 - 1),
        (Int64, -(2**63), 2**63 - 1),
        (UInt8, 0, 255),
        (UInt16, 0, 65535),
        (UInt32, 0, 2**32 - 1),
        (UInt64, 0, 2**64 - 1),
    ],
)
def test_ranges(cls, low, high):
    assert cls.MIN == low
    assert cls.MAX == high
    assert cls(low) == low
    assert cls(high) == high

    with pytest.raises(OverflowError):
        cls(low - 1)
    with pytest.raises(OverflowError):
        cls(high + 1)


@pytest.mark.parametrize(
    'cls, value, expected',
    [
        (UInt8, 300, 44),
        (UInt8, -1, 255),
        (UInt8, 255.9, 255),
        (Int8, 200, -56),
        (Int8, -200, 56),
        (Int16, 40000, -25536),
        (UInt32, -1, 2**32 - 1),
        (Int32, 2**31, -(2**31)),
        (Int64, 2**64 - 1, -1),
        (Int32, -7.9, -7),
    ],
)
def test_narrow(cls, value, expected):
    result = cls.narrow(value)
    assert result == expected
    assert type(result) is cls


def test_narrow_non_finite():
    with pytest.raises(ValueError):
        Int32.narrow(math.nan)


def test_repr():
    assert repr(Int8(5)) == 'Int8(5)'
    assert repr(Float32(0.5)) == 'Float32(0.5)'
    assert str(int(UInt8(7))) == '7'


def test_float32():
    assert Float32(0.1) == pytest.approx(0.1)
    assert Float32(0.1) != 0.1
    assert Float32(0.5) == 0.5
    assert Float32(FLOAT32_MAX) == FLOAT32_MAX
    assert Float32(1e39) == math.inf
    assert Float32(-1e39) == -math.inf
    assert math.isnan(Float32(math.nan))
