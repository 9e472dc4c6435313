import pytest
from shapes import Point

from jsonshape import Int32, TypeRegistry, codec
from jsonshape.codec.json import JsonCodec
from jsonshape.errors import DecodeError, EncodeError, RegistryError


def test_create():
    c = codec.create('json')
    assert isinstance(c, JsonCodec)
    assert codec.create(c) is c
    assert 'json' in codec.REGISTRY.names()


def test_create_unknown():
    with pytest.raises(RegistryError):
        codec.create('yaml')


def test_encode_decode():
    c = JsonCodec()
    assert c.encode({'a': [1, 'é']}) == b'{"a":[1,"\\u00e9"]}'
    assert c.decode(b'{"a":[1,"\\u00e9"]}') == {'a': [1, 'é']}
    assert c.decode('{"a":"é"}'.encode()) == {'a': 'é'}


def test_decode_with_registry():
    c = codec.create('json', registry=TypeRegistry([Point]))
    assert c.decode(b'{"X":1,"Y":2}') == Point(Int32(1), Int32(2))
    assert c.decode(b'[1]') == [1]


def test_encode_with_registry():
    registry = TypeRegistry()
    registry.register(Point, properties={'Y': Int32})
    c = JsonCodec(registry=registry, date_format='ajax')
    assert c.encode(Point(Int32(1), Int32(2))) == b'{"Y":2}'


def test_encoding():
    c = JsonCodec(encoding='utf-16')
    data = c.encode('a')
    assert data == '"a"'.encode('utf-16')
    assert c.decode(data) == 'a'


def test_errors():
    c = JsonCodec()
    with pytest.raises(EncodeError):
        c._encode(b'bytes')
    with pytest.raises(DecodeError) as exc_info:
        c._decode(b'{"a":')
    assert 'data=' in str(exc_info.value)
    with pytest.raises(DecodeError):
        c._decode(b'\xff')
