"""Text conversions for numbers, timestamps and identifiers."""

from __future__ import annotations

import math
import re
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from .errors import PropertyCoercionError, UnsupportedValue

TICKS_EPOCH = datetime(1, 1, 1)
TICKS_PER_SECOND = 10_000_000

_ISO8601 = re.compile(
    r'(?P<year>\d{4})'
    r'(?:-(?P<month>\d{1,2})'
    r'(?:-(?P<day>\d{1,2})'
    r'(?:[T ](?P<hour>\d{1,2}):(?P<minute>\d{2})'
    r'(?::(?P<second>\d{2})(?:\.(?P<fraction>\d+))?)?)?)?)?'
    r'(?P<zone>Z|(?P<sign>[+-])(?P<hours>\d{2}):?(?P<minutes>\d{2}))?'
)
_TICKS = re.compile(r'/?Date\((?P<ticks>-?\d+)(?:[+-]\d{4})?\)/?')
_GUID = re.compile(
    r'(?P<a>[0-9a-fA-F]{8})-(?P<b>[0-9a-fA-F]{4})-(?P<c>[0-9a-fA-F]{4})-'
    r'(?P<d>[0-9a-fA-F]{4})-(?P<e>[0-9a-fA-F]{12})'
)


def format_number(value: float) -> str:
    """Format a float as positional decimal text, independent of locale.

    The shortest text that round-trips is expanded out of exponent notation
    and always keeps at least one digit after the point.
    """
    if not math.isfinite(value):
        raise UnsupportedValue(f'{value!r} has no JSON representation')
    text = format(Decimal(repr(float(value))), 'f')
    if '.' not in text:
        text += '.0'
    return text


def is_ticks(text: str) -> bool:
    return 'Date(' in text


def parse_ticks(text: str) -> datetime:
    """Parse a `/Date(ticks)/` wrapper into a UTC datetime.

    Ticks are 100 nanosecond intervals since 0001-01-01.
    """
    match = _TICKS.fullmatch(text.strip())
    if not match:
        raise PropertyCoercionError(f'invalid ticks timestamp: {text!r}')
    ticks = int(match['ticks'])
    try:
        dt = TICKS_EPOCH + timedelta(microseconds=ticks // 10)
    except OverflowError as exc:
        raise PropertyCoercionError(f'ticks out of range: {text!r}') from exc
    return dt.replace(tzinfo=timezone.utc)


def to_ticks(dt: datetime) -> str:
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    delta = dt - TICKS_EPOCH
    ticks = (delta.days * 86400 + delta.seconds) * TICKS_PER_SECOND + delta.microseconds * 10
    return f'/Date({ticks})/'


def parse_iso8601(text: str) -> datetime:
    """Parse an ISO-8601 timestamp.

    A `Z` suffix yields a UTC-aware datetime. An explicit `+HH:MM` or
    `-HH:MM` offset is added to or subtracted from the parsed time and the
    result is naive, as is a timestamp with no zone at all.
    """
    match = _ISO8601.fullmatch(text.strip())
    if not match:
        raise PropertyCoercionError(f'invalid ISO-8601 timestamp: {text!r}')

    fraction = match['fraction'] or ''
    try:
        dt = datetime(
            int(match['year']),
            int(match['month'] or 1),
            int(match['day'] or 1),
            int(match['hour'] or 0),
            int(match['minute'] or 0),
            int(match['second'] or 0),
            int(fraction[:6].ljust(6, '0')),
        )
    except ValueError as exc:
        raise PropertyCoercionError(f'invalid ISO-8601 timestamp: {text!r}: {exc}') from exc

    if match['zone'] == 'Z':
        return dt.replace(tzinfo=timezone.utc)

    if match['sign']:
        offset = timedelta(hours=int(match['hours']), minutes=int(match['minutes']))
        try:
            dt = dt + offset if match['sign'] == '+' else dt - offset
        except OverflowError as exc:
            raise PropertyCoercionError(f'timestamp out of range: {text!r}') from exc

    return dt


def to_iso8601(dt: datetime) -> str:
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return (
        f'{dt.year:04d}-{dt.month:02d}-{dt.day:02d}T'
        f'{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}.{dt.microsecond // 1000:03d}Z'
    )


def guid_bytes(text: str) -> bytes:
    """Convert a canonical GUID string into its 16-byte form.

    The first three groups are stored little-endian (byte-swapped within
    themselves), the last two are copied as written.
    """
    match = _GUID.fullmatch(text.strip())
    if not match:
        raise PropertyCoercionError(f'invalid GUID: {text!r}')
    swapped = b''.join(bytes.fromhex(match[group])[::-1] for group in 'abc')
    return swapped + bytes.fromhex(match['d']) + bytes.fromhex(match['e'])


def parse_guid(text: str) -> uuid.UUID:
    return uuid.UUID(bytes_le=guid_bytes(text))
