import pytest

from jsonshape import Int64, MalformedJson, UInt64, decode, parse, value
from jsonshape.parser import Parser, Token, decode_number


def test_parse_object():
    assert decode(' { "a" : [ 1 , 2 ] , "b" : { } , "c" : [ ] } ') == {'a': [1, 2], 'b': {}, 'c': []}


def test_parse_literals():
    assert decode('[true, false, null]') == [True, False, None]


def test_key_order_is_preserved():
    assert list(decode('{"z":1,"a":2,"m":3}')) == ['z', 'a', 'm']


def test_duplicate_keys_keep_last():
    assert decode('{"a":1,"a":2}') == {'a': 2}


def test_parse_result():
    result = parse('{"a":1}')
    assert result.ok
    assert result.value == {'a': 1}
    assert result.error is None


def test_trailing_data_is_ignored():
    assert decode('1 2') == 1
    assert decode('{"a":1} garbage') == {'a': 1}


def test_parse_deep_nesting():
    text = '[' * 50 + ']' * 50
    result = decode(text)
    for _ in range(49):
        result = result[0]
    assert result == []


##
## strings
##


@pytest.mark.parametrize(
    'text, expected',
    [
        (r'"\u0041\u00e9"', 'Aé'),
        (r'"\ud83d\ude00"', '\U0001f600'),
        (r'"\"\\\/\b\f\n\r\t"', '"\\/\b\f\n\r\t'),
        ('"plain"', 'plain'),
        ('""', ''),
        ('"é"', 'é'),
    ],
)
def test_parse_string(text, expected):
    assert decode(text) == expected


def test_lone_surrogate_is_kept():
    assert decode(r'"\ud83dx"') == '\ud83dx'


##
## numbers
##


@pytest.mark.parametrize(
    'text, expected, cls',
    [
        ('0', 0, UInt64),
        ('123', 123, UInt64),
        ('-5', -5, Int64),
        ('0x1F', 31, UInt64),
        ('-0x10', -16, Int64),
        ('18446744073709551615', 18446744073709551615, UInt64),
        ('-9223372036854775808', -9223372036854775808, Int64),
        ('1.5', 1.5, float),
        ('-2.5e3', -2500.0, float),
        ('1E2', 100.0, float),
        ('18446744073709551616', 18446744073709551616.0, float),
    ],
)
def test_parse_number(text, expected, cls):
    result = decode(text)
    assert result == expected
    assert type(result) is cls


def test_number_kinds():
    assert value.number_kind(decode('1')) is value.NumberKind.UNSIGNED
    assert value.number_kind(decode('-1')) is value.NumberKind.SIGNED
    assert value.number_kind(decode('1.0')) is value.NumberKind.DOUBLE


def test_decode_number_out_of_range():
    with pytest.raises(ValueError):
        decode_number('1' * 400)


##
## malformed
##


@pytest.mark.parametrize(
    'text',
    [
        '',
        '   ',
        '{"a":}',
        '{"a" 1}',
        '{a:1}',
        '{"a":1,}',
        '[1,]',
        '[1 2]',
        '[1',
        '{"a":1',
        '"abc',
        r'"\x"',
        r'"\u12"',
        r'"\u12zz"',
        'tru',
        'nul',
        '-',
        '1.2.3',
        '0x',
        '+1',
        '1e999',
        '-1e999',
        '[1.5e400]',
    ],
)
def test_malformed(text):
    result = parse(text)
    assert not result.ok
    assert result.value is None
    assert isinstance(result.error, MalformedJson)

    with pytest.raises(MalformedJson):
        decode(text)


def test_malformed_position():
    with pytest.raises(MalformedJson) as exc_info:
        decode('{"a":}')
    assert exc_info.value.position == 5
    assert 'unexpected character' in exc_info.value.msg


def test_unterminated_string_position():
    with pytest.raises(MalformedJson) as exc_info:
        decode('["ok", "open')
    assert exc_info.value.position == 7


def test_nesting_too_deep():
    result = parse('[' * 100_000)
    assert not result.ok
    assert 'nesting too deep' in str(result.error)


def test_decode_requires_text():
    with pytest.raises(MalformedJson):
        decode(b'{}')


##
## tokens
##


def test_look_ahead_does_not_consume():
    p = Parser('  {"a":1}')
    assert p.look_ahead() is Token.OBJECT_BEGIN
    assert p.index == 0
    assert p.next_token() is Token.OBJECT_BEGIN
    assert p.index == 3
    assert p.next_token() is Token.STRING
