"""JSON codec that builds registered types from object payloads."""

from __future__ import annotations

from typing import Any

from .. import parser
from ..catalog import TypeRegistry
from ..matcher import Matcher, MatchPolicy
from ..serializer import DateFormat, Encoder
from ..utils.encoding import to_bytes, to_str
from . import Codec

DEFAULT_ENCODING = 'utf8'


class JsonCodec(Codec):
    """Codec that serializes objects to JSON bytes.

    Without a registry, decoding returns the generic value tree. With one,
    object payloads are matched against it and built into typed objects.
    """

    NAME = 'json'

    def __init__(
        self,
        registry: TypeRegistry | None = None,
        policy: MatchPolicy | str | None = None,
        date_format: DateFormat | str = DateFormat.ISO8601,
        encoding: str = DEFAULT_ENCODING,
    ) -> None:
        self.registry = registry
        self.policy = policy
        self.date_format = DateFormat(date_format)
        self.encoding = encoding

    def encode(self, obj: Any) -> bytes:
        """Encode an object graph to JSON bytes."""
        return to_bytes(Encoder(self.registry, self.date_format).encode(obj), self.encoding)

    def decode(self, data: bytes) -> Any:
        """Decode JSON bytes into a value tree or a registered type."""
        tree = parser.decode(to_str(data, self.encoding))
        if self.registry is None or not isinstance(tree, dict):
            return tree
        return Matcher(self.registry, self.policy).deserialize(tree)
