# Serialize typed objects and rebuild them from their JSON.

from models import Event, Line, Point

import jsonshape
from jsonshape import Int32, logs


def main():
    logs.init(1)

    registry = jsonshape.TypeRegistry([Point, Line, Event])
    s = jsonshape.JsonSerializer(registry)

    line = Line(Point(Int32(1), Int32(2)), Point(Int32(3), Int32(4)))
    text = s.serialize(line)
    print(f'{text=}')
    print(f'{s.deserialize(text)=}')

    s.date_format = 'ajax'
    text = s.serialize(Event('started'))
    print(f'{text=}')
    print(f'{s.deserialize(text)=}')


if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        pass
