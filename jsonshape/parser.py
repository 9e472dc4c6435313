"""Recursive-descent JSON parser producing generic values."""

from __future__ import annotations

import enum
import math
import re
from typing import NamedTuple

from . import logs
from .errors import MalformedJson
from .primitives import Int64, UInt64
from .value import Value

log = logs.get(__name__)


class Token(enum.Enum):
    NONE = 0  # end of input or an unknown character
    OBJECT_BEGIN = 1  # {
    OBJECT_END = 2  # }
    ARRAY_BEGIN = 3  # [
    ARRAY_END = 4  # ]
    PROPERTY_SEPARATOR = 5  # :
    ITEMS_SEPARATOR = 6  # ,
    STRING = 7  # "
    NUMBER = 8  # 0-9 or -
    TRUE = 9
    FALSE = 10
    NULL = 11


PUNCTUATION = {
    '{': Token.OBJECT_BEGIN,
    '}': Token.OBJECT_END,
    '[': Token.ARRAY_BEGIN,
    ']': Token.ARRAY_END,
    ':': Token.PROPERTY_SEPARATOR,
    ',': Token.ITEMS_SEPARATOR,
    '"': Token.STRING,
}
LITERALS = (
    ('false', Token.FALSE),
    ('true', Token.TRUE),
    ('null', Token.NULL),
)
ESCAPES = {
    '"': '"',
    '\\': '\\',
    '/': '/',
    'b': '\b',
    'f': '\f',
    'n': '\n',
    'r': '\r',
    't': '\t',
}
NUMBER_START = frozenset('0123456789-')
NUMBER_CHARS = frozenset('0123456789+-.eE')
HEX_CHARS = frozenset('0123456789abcdefABCDEF')
FLOAT_MARKERS = frozenset('.eE,')

_WHITESPACE = re.compile(r'[ \t\n\r]*')
_STRING_CHUNK = re.compile(r'[^"\\]*')


class ParseResult(NamedTuple):
    value: Value
    ok: bool
    error: MalformedJson | None = None


def parse(text: str) -> ParseResult:
    """Parse `text` without raising; check `ok` before using `value`."""
    try:
        value = decode(text)
    except MalformedJson as exc:
        log.debug('parse failed: %s', exc)
        return ParseResult(None, False, exc)
    return ParseResult(value, True)


def decode(text: str) -> Value:
    """Parse `text`, raising `MalformedJson` on failure."""
    if not isinstance(text, str):
        raise MalformedJson(f'expected text, got {type(text).__name__}')
    return Parser(text).parse()


def decode_number(run: str) -> int | float:
    """Decode a scanned number run into `Int64`, `UInt64` or `float`.

    A `0x` prefix selects base 16. Otherwise a decimal point, exponent or
    grouping character makes it a float. Integers with a sign are signed,
    others unsigned; integers that do not fit 64 bits fall back to float.
    """
    body = run.lstrip('+-')
    signed = body != run
    if body[:2] in ('0x', '0X'):
        value = int(run, 16)
    elif FLOAT_MARKERS.intersection(run):
        number = float(run)
        if not math.isfinite(number):
            raise ValueError(f'{run} is out of range')
        return number
    else:
        value = int(run, 10)

    cls = Int64 if signed else UInt64
    if cls.MIN <= value <= cls.MAX:
        return cls(value)
    try:
        return float(value)
    except OverflowError as exc:
        raise ValueError(f'{run} is out of range') from exc


class Parser:
    """Parses a single JSON document held in memory."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.index = 0

    def error(self, msg: str, position: int | None = None) -> MalformedJson:
        return MalformedJson(msg, self.index if position is None else position)

    def parse(self) -> Value:
        try:
            value = self.parse_value()
        except RecursionError:
            raise self.error('nesting too deep') from None

        self.eat_whitespace()
        if self.index < len(self.text):
            log.debug('ignoring trailing data at %d', self.index)
        return value

    ##
    ## tokens
    ##

    def eat_whitespace(self) -> None:
        self.index = _WHITESPACE.match(self.text, self.index).end()

    def look_ahead(self) -> Token:
        index = self.index
        try:
            return self.next_token()
        finally:
            self.index = index

    def next_token(self) -> Token:
        self.eat_whitespace()

        text = self.text
        if self.index == len(text):
            return Token.NONE

        char = text[self.index]
        token = PUNCTUATION.get(char)
        if token is not None:
            self.index += 1
            return token
        if char in NUMBER_START:
            self.index += 1
            return Token.NUMBER

        for literal, token in LITERALS:
            if text.startswith(literal, self.index):
                self.index += len(literal)
                return token

        return Token.NONE

    def _unexpected(self) -> MalformedJson:
        self.eat_whitespace()
        if self.index == len(self.text):
            return self.error('unexpected end of input')
        return self.error(f'unexpected character {self.text[self.index]!r}')

    ##
    ## values
    ##

    def parse_value(self) -> Value:
        token = self.look_ahead()

        if token is Token.STRING:
            return self.parse_string()
        if token is Token.NUMBER:
            return self.parse_number()
        if token is Token.OBJECT_BEGIN:
            return self.parse_object()
        if token is Token.ARRAY_BEGIN:
            return self.parse_array()
        if token is Token.TRUE:
            self.next_token()
            return True
        if token is Token.FALSE:
            self.next_token()
            return False
        if token is Token.NULL:
            self.next_token()
            return None

        raise self._unexpected()

    def parse_object(self) -> dict[str, Value]:
        table: dict[str, Value] = {}

        # {
        self.next_token()
        if self.look_ahead() is Token.OBJECT_END:
            self.next_token()
            return table

        while True:
            # name
            if self.look_ahead() is not Token.STRING:
                raise self._unexpected()
            name = self.parse_string()

            # :
            if self.look_ahead() is not Token.PROPERTY_SEPARATOR:
                raise self._unexpected()
            self.next_token()

            # value; duplicate keys keep the last one
            table[name] = self.parse_value()

            token = self.look_ahead()
            if token is Token.OBJECT_END:
                self.next_token()
                return table
            if token is not Token.ITEMS_SEPARATOR:
                raise self._unexpected()
            self.next_token()

    def parse_array(self) -> list[Value]:
        array: list[Value] = []

        # [
        self.next_token()
        if self.look_ahead() is Token.ARRAY_END:
            self.next_token()
            return array

        while True:
            array.append(self.parse_value())

            token = self.look_ahead()
            if token is Token.ARRAY_END:
                self.next_token()
                return array
            if token is not Token.ITEMS_SEPARATOR:
                raise self._unexpected()
            self.next_token()

    def parse_string(self) -> str:
        self.eat_whitespace()
        text = self.text
        start = self.index

        # "
        self.index += 1
        chunks: list[str] = []
        while True:
            end = _STRING_CHUNK.match(text, self.index).end()
            chunks.append(text[self.index : end])
            self.index = end

            if self.index == len(text):
                raise self.error('unterminated string', start)

            char = text[self.index]
            self.index += 1
            if char == '"':
                return ''.join(chunks)

            # \
            if self.index == len(text):
                raise self.error('unterminated string', start)
            char = text[self.index]
            self.index += 1

            if char == 'u':
                chunks.append(self._parse_unicode_escape())
                continue
            try:
                chunks.append(ESCAPES[char])
            except KeyError:
                raise self.error(f'invalid escape {char!r}', self.index - 2) from None

    def _read_hex4(self) -> int:
        digits = self.text[self.index : self.index + 4]
        if len(digits) < 4 or not HEX_CHARS.issuperset(digits):
            raise self.error('invalid \\u escape', self.index - 2)
        self.index += 4
        return int(digits, 16)

    def _parse_unicode_escape(self) -> str:
        code = self._read_hex4()

        # a high surrogate followed by a low surrogate is one code point
        if 0xD800 <= code <= 0xDBFF and self.text.startswith('\\u', self.index):
            index = self.index
            self.index += 2
            low = self._read_hex4()
            if 0xDC00 <= low <= 0xDFFF:
                code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
            else:
                self.index = index

        return chr(code)

    def parse_number(self) -> int | float:
        self.eat_whitespace()
        text = self.text
        start = index = self.index

        if text.startswith(('0x', '0X'), index) or text.startswith(('-0x', '-0X'), index):
            index += 3 if text[index] == '-' else 2
            chars = HEX_CHARS
        else:
            chars = NUMBER_CHARS

        while index < len(text) and text[index] in chars:
            index += 1

        run = text[start:index]
        self.index = index
        try:
            return decode_number(run)
        except ValueError as exc:
            raise self.error(f'invalid number {run!r}', start) from exc
