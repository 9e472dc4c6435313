import uuid
from datetime import datetime, timedelta, timezone

import pytest
from shapes import Blob, Line, Node, Person, Point, Polygon, Reading, Size, Swatch

from jsonshape import (
    DateFormat,
    Float32,
    Int32,
    Pair,
    TypeRegistry,
    UInt8,
    UnsupportedValue,
    decode,
    deserialize,
    serialize,
    to_value,
)
from jsonshape.serializer import needs_reflection, quote


class Bare:
    X: Int32
    Y: Int32


def test_serialize_line():
    line = Line(Point(Int32(1), Int32(2)), Point(Int32(3), Int32(4)))
    assert serialize(line) == '{"Start":{"X":1,"Y":2},"End":{"X":3,"Y":4}}'


def test_serialize_registered_properties():
    registry = TypeRegistry()
    registry.register(Point, properties={'X': Int32})
    assert serialize(Point(Int32(1), Int32(2)), registry) == '{"X":1}'


def test_serialize_plain_class():
    r = Reading()
    r.Level = UInt8(7)
    r.Label = 'x'
    assert serialize(r) == (
        '{"Level":7,"Ratio":0.0,"Count":0,"Total":0.0,"Label":"x","Enabled":false}'
    )


def test_serialize_struct():
    assert serialize(Size(3, 4)) == '{"Width":3,"Height":4}'
    assert serialize(Person('Ada', 'Lovelace')) == '{"firstName":"Ada","lastName":"Lovelace"}'


def test_serialize_list_of_objects():
    polygon = Polygon('tri', [Point(Int32(0), Int32(0)), Point(Int32(1), Int32(1))])
    assert serialize(polygon) == '{"Name":"tri","Points":[{"X":0,"Y":0},{"X":1,"Y":1}]}'


def test_to_value():
    assert to_value(Line()) == {'Start': {'X': 0, 'Y': 0}, 'End': {'X': 0, 'Y': 0}}


##
## primitives
##


@pytest.mark.parametrize(
    'obj, expected',
    [
        (None, 'null'),
        (True, 'true'),
        (False, 'false'),
        (0, '0'),
        (-12, '-12'),
        (UInt8(200), '200'),
        (1.5, '1.5'),
        (2.0, '2.0'),
        (-0.25, '-0.25'),
        (1e20, '100000000000000000000.0'),
        (1e-7, '0.0000001'),
        (Float32(0.5), '0.5'),
        ('', '""'),
        ([], '[]'),
        ({}, '{}'),
        ((1, 'a'), '[1,"a"]'),
        ({'b': 1, 'a': [1, None]}, '{"b":1,"a":[1,null]}'),
        ({1: 'x'}, '{"1":"x"}'),
        (Pair('k', 1), '{"k":1}'),
    ],
)
def test_serialize_values(obj, expected):
    assert serialize(obj) == expected


@pytest.mark.parametrize('obj', [float('nan'), float('inf'), -float('inf')])
def test_serialize_non_finite(obj):
    with pytest.raises(UnsupportedValue):
        serialize(obj)


def test_serialize_enum():
    assert serialize(Swatch('sky')) == '{"Name":"sky","Shade":"red"}'


def test_serialize_uuid():
    value = uuid.UUID('00112233-4455-6677-8899-aabbccddeeff')
    assert serialize(value) == '"00112233-4455-6677-8899-aabbccddeeff"'


def test_serialize_datetime():
    dt = datetime(2020, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
    assert serialize(dt) == '"2020-01-02T03:04:05.678Z"'

    local = dt.astimezone(timezone(timedelta(hours=2)))
    assert serialize(local) == '"2020-01-02T03:04:05.678Z"'


def test_serialize_datetime_ajax():
    dt = datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert serialize(dt, date_format=DateFormat.AJAX) == '"/Date(621355968000000000)/"'
    assert serialize(dt, date_format='ajax') == '"/Date(621355968000000000)/"'


##
## strings
##


@pytest.mark.parametrize(
    'text, expected',
    [
        ('plain', '"plain"'),
        ('a"b', r'"a\"b"'),
        ('a\\b', r'"a\\b"'),
        ('a/b', '"a/b"'),
        ('\b\f\n\r\t', r'"\b\f\n\r\t"'),
        ('\x01', r'"\u0001"'),
        ('\x7f', r'"\u007f"'),
        ('é', r'"\u00e9"'),
        ('€', r'"\u20ac"'),
        ('\U0001f600', r'"\ud83d\ude00"'),
    ],
)
def test_quote(text, expected):
    assert quote(text) == expected
    assert decode(expected) == text


##
## unsupported
##


@pytest.mark.parametrize('obj', [b'bytes', {1, 2}, print, Point, pytest, 1j])
def test_serialize_unsupported(obj):
    with pytest.raises(UnsupportedValue):
        serialize(obj)


def test_serialize_unsupported_property():
    with pytest.raises(UnsupportedValue) as exc_info:
        serialize(Blob('b', b'data'))
    assert 'Blob.Data' in str(exc_info.value)


def test_skip_unsupported():
    assert serialize(Blob('b', b'data'), skip_unsupported=True) == '{"Name":"b"}'


def test_serialize_unknown_object():
    with pytest.raises(UnsupportedValue):
        serialize(object())


def test_serialize_cycle():
    node = Node(1)
    node.Next = node
    with pytest.raises(UnsupportedValue) as exc_info:
        serialize(node)
    assert 'circular reference' in str(exc_info.value)


def test_serialize_shared_reference():
    point = Point(Int32(1), Int32(1))
    assert serialize(Line(point, point)) == '{"Start":{"X":1,"Y":1},"End":{"X":1,"Y":1}}'


def test_serialize_unset_property():
    registry = TypeRegistry([Bare])
    bare = deserialize(decode('{"X":1}'), registry)
    assert not hasattr(bare, 'Y')
    assert serialize(bare, registry) == '{"X":1}'
    assert serialize(bare) == '{"X":1}'


def test_serialize_nesting_too_deep():
    node = Node()
    for i in range(5000):
        node = Node(i, node)
    with pytest.raises(UnsupportedValue, match='nesting too deep'):
        serialize(node)


def test_needs_reflection():
    assert not needs_reflection(None)
    assert not needs_reflection(1)
    assert not needs_reflection('a')
    assert not needs_reflection(UInt8(1))
    assert needs_reflection(Point())
    assert needs_reflection([])


##
## round-trip
##


@pytest.mark.parametrize(
    'text',
    [
        '{"a":[1,-2,3.5,"x",true,false,null],"b":{"c":{}}}',
        '[]',
        '"\\u00e9\\ud83d\\ude00"',
        '-9223372036854775808',
        '18446744073709551615',
    ],
)
def test_roundtrip(text):
    tree = decode(text)
    assert decode(serialize(tree)) == tree
    assert serialize(decode(serialize(tree))) == serialize(tree)
