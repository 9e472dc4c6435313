# Model types used by the examples.

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from uuid import UUID, uuid4

import msgspec

import jsonshape


@dataclasses.dataclass
class Point:
    X: jsonshape.Int32 = jsonshape.Int32(0)
    Y: jsonshape.Int32 = jsonshape.Int32(0)


@dataclasses.dataclass
class Line:
    Start: Point = dataclasses.field(default_factory=Point)
    End: Point = dataclasses.field(default_factory=Point)


class Event(msgspec.Struct):
    Name: str = ''
    Id: UUID = msgspec.field(default_factory=uuid4)
    Timestamp: datetime = msgspec.field(default_factory=lambda: datetime.now(timezone.utc))
