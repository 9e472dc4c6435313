from __future__ import annotations

from typing import Any

from . import logs, parser, value
from .catalog import TypeRegistry
from .errors import NoMatch
from .matcher import DEFAULT_POLICY, Matcher, MatchPolicy
from .serializer import DateFormat, Encoder

DEFAULT_DATE_FORMAT = DateFormat.ISO8601

log = logs.get(__name__)


class JsonSerializer:
    """Serializes objects to JSON text and back through a type catalog."""

    def __init__(
        self,
        registry: TypeRegistry | None = None,
        date_format: DateFormat | str = DEFAULT_DATE_FORMAT,
        policy: MatchPolicy | str = DEFAULT_POLICY,
        skip_unsupported: bool = False,
    ) -> None:
        self.registry = registry if registry is not None else TypeRegistry()
        self.date_format = date_format
        self.policy = MatchPolicy(policy)
        self.skip_unsupported = skip_unsupported

    @property
    def date_format(self) -> DateFormat:
        return self._date_format

    @date_format.setter
    def date_format(self, date_format: DateFormat | str) -> None:
        self._date_format = DateFormat(date_format)
        log.debug('date format: %s', self._date_format.value)

    def snapshot(self) -> None:
        """Rebuild the type catalog from the registered types."""
        self.registry.snapshot()

    def serialize(self, obj: Any) -> str:
        return Encoder(self.registry, self.date_format, self.skip_unsupported).encode(obj)

    def deserialize(self, text: str) -> Any:
        """Parse `text` and build the registered type its object matches."""
        tree = parser.decode(text)
        value.dump(tree)

        if value.kind_of(tree) is not value.ValueKind.MAPPING:
            raise NoMatch(f'expected a JSON object, got {value.kind_of(tree).name.lower()}')
        return Matcher(self.registry, self.policy).deserialize(tree)
