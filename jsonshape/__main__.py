"""Command line entry point: parse, normalize and deserialize JSON."""

from __future__ import annotations

import argparse
import sys

from . import logs, parser, value
from .catalog import TypeRegistry
from .errors import JsonShapeError
from .interface import JsonSerializer
from .matcher import DEFAULT_POLICY, MatchPolicy
from .serializer import DateFormat
from .utils.format import format_exc

log = logs.get('jsonshape')


def main(argv: list[str] | None = None) -> int:
    cli = argparse.ArgumentParser('jsonshape')
    cli.add_argument(
        'path',
        nargs='?',
        help='a JSON file to read. reads STDIN by default',
    )
    cli.add_argument(
        '-m',
        '--module',
        action='append',
        dest='modules',
        metavar='MODULE',
        default=[],
        help='a module whose types JSON objects are matched against',
    )
    cli.add_argument(
        '--policy',
        choices=[p.value for p in MatchPolicy],
        default=DEFAULT_POLICY.value,
        help='how a JSON object is matched to a type',
    )
    cli.add_argument(
        '--date-format',
        choices=[f.value for f in DateFormat],
        default=DateFormat.ISO8601.value,
        help='how timestamps are written',
    )
    cli.add_argument(
        '--dump',
        action='store_true',
        help='log the parsed value tree',
    )
    cli.add_argument(
        '-v',
        '--verbose',
        action='count',
        default=0,
        help='log more; repeat for parser and catalog detail',
    )

    args = cli.parse_args(argv)

    logs.init(max(args.verbose, 1 if args.dump else 0))

    try:
        if args.path:
            with open(args.path, encoding='utf8') as f:
                text = f.read()
        else:
            text = sys.stdin.read()

        serializer = JsonSerializer(
            TypeRegistry(modules=args.modules),
            date_format=args.date_format,
            policy=args.policy,
        )

        if not args.modules:
            tree = parser.decode(text)
            if args.dump:
                value.dump(tree)
            print(serializer.serialize(tree))
            return 0

        obj = serializer.deserialize(text)
        print(repr(obj))
        print(serializer.serialize(obj))
    except (OSError, ImportError, JsonShapeError) as exc:
        log.error(format_exc(exc))
        return 1
    return 0


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
