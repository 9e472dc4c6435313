"""Helpers for converting between str and bytes at the codec boundary."""

from __future__ import annotations

from typing import Any


def to_bytes(value: Any, encoding: str = 'utf8') -> bytes:
    """Encode text to bytes, passing bytes through."""
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode(encoding)
    raise TypeError(f'expected str or bytes, got {type(value).__name__}')


def to_str(value: Any, encoding: str = 'utf8') -> str:
    """Decode bytes (and bytes-like buffers) to text, passing text through."""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode(encoding)
    raise TypeError(f'expected str or bytes, got {type(value).__name__}')
