from __future__ import annotations

# Imports for convenience
from . import encoding, format, path

__all__ = [
    'encoding',
    'format',
    'path',
]
